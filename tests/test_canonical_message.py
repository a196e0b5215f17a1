"""
Test suite for string-to-sign construction

Covers the body digest rule, JSON minification and the field order and
delimiter of each signing scheme.
"""

import hashlib

import pytest

from snap_signer.exceptions import SerializationError
from snap_signer.signing.canonical_message import (
    body_bytes,
    build_token_string,
    build_transactions_hmac_string,
    build_transactions_rsa_string,
    digest_body,
)
from snap_signer.signing.types import (
    RawBody,
    StructuredBody,
    TokenRequest,
    TransactionsHMACRequest,
    TransactionsRSARequest,
)
from snap_signer.signing.utils import MAX_NESTING_DEPTH, minify_json, serialize_json

TIMESTAMP = "2024-01-15T10:30:00.000+07:00"
AMOUNT_DIGEST = hashlib.sha256(b'{"amount":"1000"}').hexdigest()


class TestMinifyJson:
    """Test cases for JSON minification"""

    def test_removes_whitespace_between_tokens(self):
        assert minify_json(b'{ "a": 1,\n\t"b": [1, 2 ,3] }\r\n') == b'{"a":1,"b":[1,2,3]}'

    def test_preserves_whitespace_inside_strings(self):
        assert minify_json(b'{"note": "two  spaces\\tand tab"}') == b'{"note":"two  spaces\\tand tab"}'

    def test_preserves_escaped_quotes(self):
        assert minify_json(b'{"q": "say \\"hi \\" ", "x": 1}') == b'{"q":"say \\"hi \\" ","x":1}'

    def test_preserves_escaped_backslash_before_quote(self):
        assert minify_json(b'["a\\\\", "b"]') == b'["a\\\\","b"]'

    def test_preserves_member_order_and_number_spelling(self):
        assert minify_json(b'{"z": 1.50, "a": 1e3}') == b'{"z":1.50,"a":1e3}'

    def test_preserves_unicode_escapes_and_raw_utf8(self):
        data = '{"city": "M\\u00fcnchen", "name": "Zoë"}'.encode('utf-8')
        assert minify_json(data) == '{"city":"M\\u00fcnchen","name":"Zoë"}'.encode('utf-8')

    def test_scalar_document(self):
        assert minify_json(b'  "text"  ') == b'"text"'

    def test_deep_nesting_is_accepted(self):
        data = b"[" * 3000 + b"]" * 3000
        assert minify_json(data) == data

    def test_nesting_beyond_limit_is_rejected(self):
        data = b"[" * (MAX_NESTING_DEPTH + 1) + b"]" * (MAX_NESTING_DEPTH + 1)

        with pytest.raises(SerializationError, match="max nesting depth"):
            minify_json(data)

    def test_invalid_utf8_inside_string_is_kept(self):
        assert minify_json(b'[ "\xff" ]') == b'["\xff"]'

    @pytest.mark.parametrize("data", [
        b"not json",
        b'{"a": 1',
        b'{"a": NaN}',
        b"   ",
        b"\xff\xfe",
    ])
    def test_invalid_json_raises_serialization_error(self, data):
        with pytest.raises(SerializationError):
            minify_json(data)


class TestSerializeJson:
    """Test cases for structured body serialization"""

    def test_compact_with_sorted_keys(self):
        assert serialize_json({"b": 1, "a": [True, None]}) == b'{"a":[true,null],"b":1}'

    def test_nested_keys_are_sorted(self):
        assert serialize_json([{"z": {"y": 1, "x": 2}}]) == b'[{"z":{"x":2,"y":1}}]'

    def test_non_ascii_is_raw_utf8(self):
        assert serialize_json({"name": "Zoë"}) == '{"name":"Zoë"}'.encode('utf-8')

    def test_html_characters_are_escaped(self):
        value = {"note": "a&b <c> \u2028\u2029"}
        assert serialize_json(value) == b'{"note":"a\\u0026b \\u003cc\\u003e \\u2028\\u2029"}'

    def test_integral_floats_have_no_fraction(self):
        assert serialize_json({"amount": 1000.0, "rate": 1.5, "big": 1e21}) == \
            b'{"amount":1000,"big":1e+21,"rate":1.5}'

    def test_body_digest_uses_canonical_form(self):
        expected = hashlib.sha256('{"a":2,"b":"x\\u0026y","c":"é"}'.encode('utf-8')).hexdigest()
        assert digest_body(StructuredBody({"c": "é", "b": "x&y", "a": 2})) == expected

    def test_deep_value_raises_serialization_error(self):
        value = []
        for _ in range(5000):
            value = [value]

        with pytest.raises(SerializationError):
            serialize_json(value)

    def test_unserializable_value_raises(self):
        with pytest.raises(SerializationError):
            serialize_json({"when": object()})

    def test_nan_is_rejected(self):
        with pytest.raises(SerializationError):
            serialize_json({"amount": float("nan")})


class TestBodyDigest:
    """Test cases for the body digest segment"""

    def test_no_body_gives_empty_segment(self):
        assert digest_body(None) == ""

    def test_empty_raw_body_gives_empty_segment(self):
        assert digest_body(RawBody("")) == ""
        assert digest_body(RawBody(b"")) == ""

    def test_raw_body_is_minified_before_hashing(self):
        assert digest_body(RawBody('{ "amount" :  "1000" }')) == AMOUNT_DIGEST

    def test_structured_body_is_serialized(self):
        assert digest_body(StructuredBody({"amount": "1000"})) == AMOUNT_DIGEST

    def test_whitespace_invariance(self):
        compact = digest_body(RawBody('{"a":1,"b":2}'))
        spaced = digest_body(RawBody('{ "a": 1,  "b": 2 }'))
        assert compact == spaced

    def test_empty_structured_object_is_hashed(self):
        assert digest_body(StructuredBody({})) == hashlib.sha256(b"{}").hexdigest()

    def test_invalid_raw_body_raises(self):
        with pytest.raises(SerializationError):
            digest_body(RawBody("amount=1000"))

    def test_body_bytes_rejects_unknown_types(self):
        with pytest.raises(TypeError):
            body_bytes({"amount": "1000"})


class TestTransactionsRsaString:
    """Test cases for the SHA256withRSA transaction string"""

    def test_field_order_and_delimiter(self):
        request = TransactionsRSARequest(method="POST", url="/v1.0/debit", body='{"amount":"1000"}')

        assert build_transactions_rsa_string(request, TIMESTAMP) == \
            f"POST:/v1.0/debit:{AMOUNT_DIGEST}:{TIMESTAMP}"

    def test_dict_body_is_treated_as_structured(self):
        request = TransactionsRSARequest(method="POST", url="/v1.0/debit", body={"amount": "1000"})

        assert isinstance(request.body, StructuredBody)
        assert build_transactions_rsa_string(request, TIMESTAMP) == \
            f"POST:/v1.0/debit:{AMOUNT_DIGEST}:{TIMESTAMP}"

    def test_missing_body_keeps_empty_segment(self):
        request = TransactionsRSARequest(method="GET", url="/v1.0/balance")

        assert build_transactions_rsa_string(request, TIMESTAMP) == f"GET:/v1.0/balance::{TIMESTAMP}"

    def test_method_and_url_are_not_normalized(self):
        request = TransactionsRSARequest(method="post", url="/V1.0/Debit?x=1", body="")

        assert build_transactions_rsa_string(request, TIMESTAMP).startswith("post:/V1.0/Debit?x=1:")


class TestTransactionsHmacString:
    """Test cases for the HMAC-SHA512 transaction string"""

    def test_field_order_and_delimiter(self):
        request = TransactionsHMACRequest(
            method="POST",
            url="/v1.0/debit",
            body={"amount": "1000"},
            access_token="tok-123",
            secret_key="s3cr3t",
        )

        assert build_transactions_hmac_string(request, TIMESTAMP) == \
            f"POST:/v1.0/debit:tok-123:{AMOUNT_DIGEST}:{TIMESTAMP}"

    def test_secret_is_not_part_of_string(self):
        request = TransactionsHMACRequest(method="POST", url="/v1.0/debit", access_token="tok", secret_key="s3cr3t")

        assert "s3cr3t" not in build_transactions_hmac_string(request, TIMESTAMP)


class TestTokenString:
    """Test cases for the access-token string"""

    def test_client_id_and_timestamp(self):
        request = TokenRequest(client_id="client-42")

        assert build_token_string(request, TIMESTAMP) == f"client-42|{TIMESTAMP}"
