"""
String-to-sign construction for SNAP signatures

Each signing scheme joins a fixed list of fields with a fixed delimiter.
Field order and delimiter must match the receiving party exactly:

    Transactions SHA256withRSA:
        HTTPMethod:RelativeUrl:Lowercase(HexEncode(SHA-256(minify(Body)))):Timestamp
    Transactions HMAC-SHA512:
        HTTPMethod:RelativeUrl:AccessToken:Lowercase(HexEncode(SHA-256(minify(Body)))):Timestamp
    Token SHA256withRSA:
        ClientID|Timestamp
"""

from typing import List

from ..crypto.primitives import hex_sha256
from .types import (
    RawBody,
    RequestBody,
    StructuredBody,
    TokenRequest,
    TransactionsHMACRequest,
    TransactionsRSARequest,
)
from .utils import minify_json, serialize_json

TRANSACTION_DELIMITER = ":"
TOKEN_DELIMITER = "|"


def body_bytes(body: RequestBody) -> bytes:
    """
    Serialize a request body to the bytes that are minified and digested.

    Args:
        body: Raw or structured body, or None

    Returns:
        bytes: Body bytes (empty for no body)

    Raises:
        SerializationError: If a structured body cannot be serialized
    """
    if body is None:
        return b""
    if isinstance(body, RawBody):
        return body.to_bytes()
    if isinstance(body, StructuredBody):
        return serialize_json(body.value)
    raise TypeError(f"Unsupported body type: {type(body).__name__}")


def digest_body(body: RequestBody) -> str:
    """
    Compute the body segment of a transaction string-to-sign.

    Args:
        body: Raw or structured body, or None

    Returns:
        str: Lowercase hex SHA-256 of the minified body, or "" when there is none

    Raises:
        SerializationError: If the body cannot be serialized or minified
    """
    data = body_bytes(body)
    if not data:
        return ""

    minified = minify_json(data)
    if not minified:
        return ""

    return hex_sha256(minified)


def _join(fields: List[str], delimiter: str) -> str:
    return delimiter.join(fields)


def build_transactions_rsa_string(request: TransactionsRSARequest, timestamp: str) -> str:
    """Build the SHA256withRSA transaction string-to-sign"""
    return _join(
        [request.method, request.url, digest_body(request.body).lower(), timestamp],
        TRANSACTION_DELIMITER
    )


def build_transactions_hmac_string(request: TransactionsHMACRequest, timestamp: str) -> str:
    """Build the HMAC-SHA512 transaction string-to-sign"""
    return _join(
        [request.method, request.url, request.access_token, digest_body(request.body).lower(), timestamp],
        TRANSACTION_DELIMITER
    )


def build_token_string(request: TokenRequest, timestamp: str) -> str:
    """Build the SHA256withRSA access-token string-to-sign"""
    return _join([request.client_id, timestamp], TOKEN_DELIMITER)
