"""
Type definitions for SNAP signing

This module provides the request variants accepted by the signature engine,
the closed body union used by the canonicalizer, and the signature artifact
returned to callers.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union
from dataclasses import dataclass, field
from enum import Enum

from ..crypto.primitives import to_utf8


HEADER_TIMESTAMP = "X-TIMESTAMP"
HEADER_SIGNATURE = "X-SIGNATURE"


class SignatureType(str, Enum):
    """Signing schemes, by their wire identifier"""
    TRANSACTIONS_RSA_SHA256 = "TRANSACTIONS_RSA_SHA256"
    TRANSACTIONS_HMAC_SHA512 = "TRANSACTIONS_HMAC_SHA512"
    TOKEN_RSA_SHA256 = "TOKEN_RSA_SHA256"


@dataclass(frozen=True)
class RawBody:
    """
    Body supplied as text exactly as it will be sent

    Attributes:
        content: Body text or bytes
    """
    content: Union[str, bytes]

    def to_bytes(self) -> bytes:
        if isinstance(self.content, str):
            return to_utf8(self.content)
        return bytes(self.content)


@dataclass(frozen=True)
class StructuredBody:
    """
    Body supplied as a JSON-compatible value (dict, list, ...)

    Attributes:
        value: Value serialized to JSON before digesting
    """
    value: Any


RequestBody = Union[RawBody, StructuredBody, None]


def as_request_body(value: Any) -> RequestBody:
    """
    Resolve an arbitrary body value into the closed body union.

    Args:
        value: None, text, bytes, an existing body, or a JSON-compatible value

    Returns:
        RequestBody: RawBody for text/bytes, StructuredBody for anything else
    """
    if value is None or isinstance(value, (RawBody, StructuredBody)):
        return value
    if isinstance(value, (str, bytes, bytearray)):
        return RawBody(value if isinstance(value, str) else bytes(value))
    return StructuredBody(value)


@dataclass
class TransactionsRSARequest:
    """
    Transaction request signed with SHA256withRSA

    Attributes:
        method: HTTP method
        url: Relative request URL
        body: Request body
        private_key_pem: PKCS#8 PEM key; the engine's default key is used when empty
        timestamp: Explicit X-TIMESTAMP value; generated when empty
    """
    method: str
    url: str
    body: Any = None
    private_key_pem: Optional[str] = None
    timestamp: Optional[str] = None

    signature_type = SignatureType.TRANSACTIONS_RSA_SHA256

    def __post_init__(self):
        self.body = as_request_body(self.body)


@dataclass
class TransactionsHMACRequest:
    """
    Transaction request signed with HMAC-SHA512

    Attributes:
        method: HTTP method
        url: Relative request URL
        body: Request body
        access_token: B2B access token included in the string to sign
        secret_key: HMAC secret
        timestamp: Explicit X-TIMESTAMP value; generated when empty
    """
    method: str
    url: str
    body: Any = None
    access_token: str = ""
    secret_key: str = field(default="", repr=False)
    timestamp: Optional[str] = None

    signature_type = SignatureType.TRANSACTIONS_HMAC_SHA512

    def __post_init__(self):
        self.body = as_request_body(self.body)


@dataclass
class TokenRequest:
    """
    Access-token request signed with SHA256withRSA

    Attributes:
        client_id: Client identifier (X-CLIENT-KEY)
        private_key_pem: PKCS#8 PEM key; the engine's default key is used when empty
        timestamp: Explicit X-TIMESTAMP value; generated when empty
    """
    client_id: str
    private_key_pem: Optional[str] = None
    timestamp: Optional[str] = None

    signature_type = SignatureType.TOKEN_RSA_SHA256


SigningRequest = Union[TransactionsRSARequest, TransactionsHMACRequest, TokenRequest]


@dataclass
class SignatureArtifact:
    """
    Generated SNAP signature

    Attributes:
        signature: Base64-encoded signature
        timestamp: Timestamp used in the string to sign
        string_to_sign: Exact string that was signed
        headers: X-TIMESTAMP and X-SIGNATURE headers
    """
    signature: str
    timestamp: str
    string_to_sign: str
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Headers always mirror the signature and timestamp"""
        if not self.headers:
            self.headers = {
                HEADER_TIMESTAMP: self.timestamp,
                HEADER_SIGNATURE: self.signature,
            }
        elif (self.headers.get(HEADER_TIMESTAMP) != self.timestamp or
              self.headers.get(HEADER_SIGNATURE) != self.signature):
            raise ValueError("Headers must mirror signature and timestamp")

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation of the artifact"""
        return {
            "signature": self.signature,
            "timestamp": self.timestamp,
            "stringToSign": self.string_to_sign,
            "headers": dict(self.headers),
        }


# Type aliases for convenience
Clock = Callable[[], datetime]
