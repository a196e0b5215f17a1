"""
Cryptographic building blocks: key decoding, hashing and signing
"""

from .rsa_keys import (
    decode_private_key,
    decode_pem_block,
    is_pkcs8_structure,
)
from .primitives import (
    to_utf8,
    hex_sha256,
    sign_rsa_sha256,
    sign_hmac_sha512,
)

__all__ = [
    'decode_private_key',
    'decode_pem_block',
    'is_pkcs8_structure',
    'to_utf8',
    'hex_sha256',
    'sign_rsa_sha256',
    'sign_hmac_sha512',
]
