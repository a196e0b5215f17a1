"""
RSA private key decoding for the SNAP signer

This module turns PEM text into an RSA private key object using the
cryptography package. Only PKCS#8 containers are accepted: a PKCS#1
("RSA PRIVATE KEY") payload is rejected rather than auto-detected.
"""

import re
import base64
import binascii
from typing import Optional, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..exceptions import KeyFormatError, KeyParseError, KeyTypeError

# First PEM block in the text; the END label must match the BEGIN label
PEM_BLOCK_PATTERN = re.compile(
    r'-----BEGIN ([A-Z0-9 ]+)-----[ \t]*\r?\n(.*?)-----END \1-----',
    re.DOTALL
)

# RFC 1421 encapsulated headers (e.g. "Proc-Type: 4,ENCRYPTED")
_PEM_HEADER_LINE = re.compile(r'^[A-Za-z0-9-]+:.*$', re.MULTILINE)

_DER_SEQUENCE = 0x30
_DER_INTEGER = 0x02


def decode_pem_block(pem_text: str) -> Tuple[str, bytes]:
    """
    Extract the first PEM block from text.

    Args:
        pem_text: Text containing a PEM block

    Returns:
        Tuple[str, bytes]: Block label and DER payload

    Raises:
        KeyFormatError: If no PEM block is found or its body is not base64
    """
    if not isinstance(pem_text, str):
        raise KeyFormatError("PEM text must be a string", details={"type": str(type(pem_text))})

    match = PEM_BLOCK_PATTERN.search(pem_text)
    if match is None:
        raise KeyFormatError("no PEM key found")

    label = match.group(1)
    body = _PEM_HEADER_LINE.sub('', match.group(2))
    body = ''.join(body.split())

    try:
        der = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyFormatError(f"PEM block is not valid base64: {e}", details={"label": label}) from e

    if not der:
        raise KeyFormatError("PEM block is empty", details={"label": label})

    return label, der


def _read_der_header(data: bytes, offset: int) -> Optional[Tuple[int, int, int]]:
    """Return (tag, content_offset, content_length) or None if truncated."""
    if offset + 2 > len(data):
        return None

    tag = data[offset]
    first = data[offset + 1]
    offset += 2

    if first < 0x80:
        return tag, offset, first

    count = first & 0x7F
    if count == 0 or count > 4 or offset + count > len(data):
        return None

    length = int.from_bytes(data[offset:offset + count], 'big')
    return tag, offset + count, length


def is_pkcs8_structure(der: bytes) -> bool:
    """
    Check whether DER bytes have the outer shape of an unencrypted PKCS#8 key.

    PrivateKeyInfo is SEQUENCE { INTEGER version, SEQUENCE algorithm, OCTET STRING key }.
    PKCS#1 RSAPrivateKey has an INTEGER where the algorithm SEQUENCE would be and
    EncryptedPrivateKeyInfo starts with a SEQUENCE instead of the version INTEGER.

    Args:
        der: DER-encoded key bytes

    Returns:
        bool: True if the structure matches PrivateKeyInfo
    """
    outer = _read_der_header(der, 0)
    if outer is None or outer[0] != _DER_SEQUENCE:
        return False

    version = _read_der_header(der, outer[1])
    if version is None or version[0] != _DER_INTEGER:
        return False

    algorithm = _read_der_header(der, version[1] + version[2])
    return algorithm is not None and algorithm[0] == _DER_SEQUENCE


def decode_private_key(pem_text: str) -> rsa.RSAPrivateKey:
    """
    Decode a PEM-encoded PKCS#8 RSA private key.

    A fresh key object is returned on every call; callers own it for the
    duration of a single signing operation.

    Args:
        pem_text: PEM text containing a single PKCS#8 private key block

    Returns:
        RSAPrivateKey: The decoded key

    Raises:
        KeyFormatError: If no PEM block is found
        KeyParseError: If the payload is not a valid PKCS#8 private key
        KeyTypeError: If the key is not an RSA key
    """
    label, der = decode_pem_block(pem_text)

    if not is_pkcs8_structure(der):
        raise KeyParseError(
            "PEM payload is not a PKCS#8 private key",
            details={"label": label}
        )

    try:
        private_key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyParseError(
            f"Failed to parse PKCS#8 private key: {e}",
            details={"label": label}
        ) from e

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise KeyTypeError(
            "not an RSA key",
            details={"key_type": type(private_key).__name__}
        )

    return private_key
