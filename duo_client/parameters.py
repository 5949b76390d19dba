"""
Request parameters.

Ordered name -> value map used to build query strings and form bodies.
"""

from typing import Dict, Iterator, Optional, Tuple


class Parameters:
    """
    Ordered mapping of parameter names to string values.

    Insertion order is kept for readable logs; signing sorts its own copy,
    so order never affects the signature. Setting an existing name
    overwrites its value in place.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = {}
        if initial:
            for name, value in initial.items():
                self.set(name, value)

    def set(self, name: str, value: str) -> "Parameters":
        self._values[name] = value
        return self

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(name, default)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._values.items()))

    def copy(self) -> "Parameters":
        return Parameters(dict(self._values))

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parameters):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Parameters({self._values!r})"
