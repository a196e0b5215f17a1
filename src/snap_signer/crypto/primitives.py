"""
Hashing and signing primitives for SNAP signatures

RSA signing uses the cryptography package (PKCS#1 v1.5 padding over SHA-256,
backed by the OpenSSL CSPRNG). HMAC-SHA512 and the SHA-256 body digest use
the standard library.
"""

import hmac
import base64
import hashlib
import re
from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import SigningError


# Lone UTF-16 surrogates, which decoded JSON escapes such as "\ud800" can leave in text
_LONE_SURROGATE = re.compile('[\ud800-\udfff]')


def to_utf8(text: str) -> bytes:
    """
    Encode text as UTF-8, replacing lone surrogates with U+FFFD.

    Args:
        text: Text to encode

    Returns:
        bytes: UTF-8 bytes
    """
    return _LONE_SURROGATE.sub('\ufffd', text).encode('utf-8')


def _to_bytes(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        return to_utf8(message)
    return message


def hex_sha256(payload: Union[str, bytes]) -> str:
    """
    Hash a payload with SHA-256.

    Args:
        payload: Bytes (or UTF-8 text) to hash

    Returns:
        str: Lowercase hex digest (64 characters)
    """
    return hashlib.sha256(_to_bytes(payload)).hexdigest()


def sign_rsa_sha256(message: Union[str, bytes], private_key: rsa.RSAPrivateKey) -> str:
    """
    Sign a message with SHA256withRSA (RSASSA-PKCS1-v1_5).

    Args:
        message: Message to sign
        private_key: RSA private key

    Returns:
        str: Base64-encoded signature

    Raises:
        SigningError: If the key cannot sign the message
    """
    try:
        signature = private_key.sign(
            _to_bytes(message),
            padding.PKCS1v15(),
            hashes.SHA256()
        )
    except (ValueError, TypeError) as e:
        raise SigningError(
            f"RSA signing failed: {e}",
            details={"original_error": str(e)}
        ) from e

    return base64.b64encode(signature).decode('ascii')


def sign_hmac_sha512(secret_key: str, message: Union[str, bytes]) -> str:
    """
    Compute an HMAC-SHA512 keyed by the UTF-8 bytes of a secret.

    Args:
        secret_key: Shared secret
        message: Message to authenticate

    Returns:
        str: Base64-encoded MAC
    """
    mac = hmac.new(to_utf8(secret_key), _to_bytes(message), hashlib.sha512)
    return base64.b64encode(mac.digest()).decode('ascii')
