"""Tests for canonical request strings and HMAC signing."""

import base64
import hashlib
import hmac

import pytest

from duo_client.errors import EncodingError
from duo_client.parameters import Parameters
from duo_client.signing import (
    basic_authorization,
    canonicalize,
    encode_parameters,
    request_date,
    sign,
)

DATE = "Tue, 21 Aug 2012 17:29:18 -0000"
IKEY = "DIWJ8X6AEYOR5OMC6TQ1"
SKEY = "Zh5eGmUq9zpfQnyUIu5OL9iWoMMv5ZNmk3zLJ4Ep"
HOST = "api-xxxxxxxx.duosecurity.com"
PATH = "/accounts/v1/account/list"


def account_list_params() -> Parameters:
    return Parameters({"username": "root", "realname": "First Last"})


class TestEncoding:
    """Percent-encoding and key ordering."""

    def test_sorted_by_key(self):
        params = Parameters({"b": "2", "A": "0", "a": "1"})
        assert encode_parameters(params) == "A=0&a=1&b=2"

    def test_space_is_percent_20(self):
        assert encode_parameters(Parameters({"k": "First Last"})) == "k=First%20Last"

    def test_reserved_characters_encoded(self):
        params = Parameters({"k": "a/b?c=d&e*f+g"})
        assert encode_parameters(params) == "k=a%2Fb%3Fc%3Dd%26e%2Af%2Bg"

    def test_unreserved_characters_literal(self):
        params = Parameters({"k": "AZaz09-._~"})
        assert encode_parameters(params) == "k=AZaz09-._~"

    def test_utf8(self):
        assert encode_parameters(Parameters({"name": "é"})) == "name=%C3%A9"

    def test_keys_are_encoded_too(self):
        assert encode_parameters(Parameters({"a key": "v"})) == "a%20key=v"

    def test_empty(self):
        assert encode_parameters(Parameters()) == ""

    def test_non_string_value_raises(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_parameters(Parameters({"share": 3}))  # type: ignore[dict-item]
        assert exc_info.value.name == "share"
        assert exc_info.value.code == "ENCODING_ERROR"

    def test_lone_surrogate_raises(self):
        with pytest.raises(EncodingError):
            encode_parameters(Parameters({"k": "\ud800"}))


class TestCanonicalString:
    """Fixed order: date, METHOD, host, path, params."""

    def test_documented_example(self):
        result = canonicalize(DATE, "POST", HOST, PATH, account_list_params())
        assert result == (
            "Tue, 21 Aug 2012 17:29:18 -0000\n"
            "POST\n"
            "api-xxxxxxxx.duosecurity.com\n"
            "/accounts/v1/account/list\n"
            "realname=First%20Last&username=root"
        )

    def test_method_uppercased_host_lowercased(self):
        result = canonicalize(DATE, "get", "API-XXXXXXXX.DuoSecurity.com", "/auth/v2/check", Parameters())
        assert result.split("\n") == [
            DATE,
            "GET",
            "api-xxxxxxxx.duosecurity.com",
            "/auth/v2/check",
            "",
        ]

    def test_path_case_preserved(self):
        result = canonicalize(DATE, "GET", HOST, "/Auth/V2/Check", Parameters())
        assert "/Auth/V2/Check" in result.split("\n")


class TestSignature:
    """HMAC over the canonical string."""

    def test_documented_sha1_signature(self):
        signature = sign(SKEY, DATE, "POST", HOST, PATH, account_list_params(), hashlib.sha1)
        assert signature == "2d97d6166319781b5a3a07af39d366f491234edc"

    def test_documented_authorization_header(self):
        signature = sign(SKEY, DATE, "POST", HOST, PATH, account_list_params(), hashlib.sha1)
        assert basic_authorization(IKEY, signature) == (
            "Basic RElXSjhYNkFFWU9SNU9NQzZUUTE6MmQ5N2Q2MTY2MzE5NzgxYjVhM2EwN2FmMzlkMzY2ZjQ5MTIzNGVkYw=="
        )

    def test_default_digest_is_sha512(self):
        canonical = canonicalize(DATE, "POST", HOST, PATH, account_list_params())
        expected = hmac.new(SKEY.encode(), canonical.encode(), hashlib.sha512).hexdigest()

        assert sign(SKEY, DATE, "POST", HOST, PATH, account_list_params()) == expected
        assert len(expected) == 128

    def test_insertion_order_does_not_matter(self):
        forward = Parameters()
        forward.set("user_id", "alice").set("factor", "auto").set("async", "1")
        backward = Parameters()
        backward.set("async", "1").set("factor", "auto").set("user_id", "alice")

        assert sign(SKEY, DATE, "POST", HOST, "/auth/v2/auth", forward) == sign(
            SKEY, DATE, "POST", HOST, "/auth/v2/auth", backward
        )

    def test_deterministic(self):
        first = sign(SKEY, DATE, "GET", HOST, "/auth/v2/auth_status", Parameters({"txid": "abc"}))
        second = sign(SKEY, DATE, "GET", HOST, "/auth/v2/auth_status", Parameters({"txid": "abc"}))
        assert first == second

    @pytest.mark.parametrize(
        "field,value",
        [
            ("date", "Wed, 22 Aug 2012 17:29:18 -0000"),
            ("method", "GET"),
            ("host", "api-yyyyyyyy.duosecurity.com"),
            ("path", "/accounts/v1/account/other"),
        ],
    )
    def test_every_component_is_signed(self, field, value):
        args = {"date": DATE, "method": "POST", "host": HOST, "path": PATH}
        baseline = sign(SKEY, parameters=account_list_params(), **args)
        args[field] = value
        assert sign(SKEY, parameters=account_list_params(), **args) != baseline

    def test_secret_changes_signature(self):
        assert sign(SKEY, DATE, "POST", HOST, PATH, account_list_params()) != sign(
            SKEY + "x", DATE, "POST", HOST, PATH, account_list_params()
        )

    def test_authorization_is_base64_of_ikey_and_hex(self):
        header = basic_authorization("DIKEY", "abc123")
        scheme, credential = header.split(" ")
        assert scheme == "Basic"
        assert base64.b64decode(credential).decode() == "DIKEY:abc123"


class TestRequestDate:
    """RFC 2822 Date header."""

    def test_fixed_timestamp(self):
        # 2012-08-21T17:29:18Z
        assert request_date(1345570158) == DATE

    def test_now_has_rfc2822_shape(self):
        parts = request_date().split(" ")
        assert len(parts) == 6
        assert parts[0].endswith(",")
        assert parts[-1] == "-0000"
