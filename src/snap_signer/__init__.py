"""
SNAP signer
SNAP request signatures with SHA256withRSA and HMAC-SHA512
"""

from .version import __version__
from .crypto import (
    decode_private_key,
    hex_sha256,
    sign_rsa_sha256,
    sign_hmac_sha512,
)
from .exceptions import (
    SnapSignerError,
    KeyFormatError,
    KeyParseError,
    KeyTypeError,
    KeyLoadError,
    SigningError,
    SerializationError,
    ValidationError,
    ConfigurationError,
)
from .keys import (
    KeyProvider,
    StaticKeyProvider,
    FileKeyProvider,
)
from .signing import (
    # Engine
    SignatureEngine,
    create_engine,
    sign,
    # Types
    SignatureType,
    RawBody,
    StructuredBody,
    TransactionsRSARequest,
    TransactionsHMACRequest,
    TokenRequest,
    SignatureArtifact,
    # Utilities
    generate_timestamp,
    format_timestamp,
)
from .config import (
    SignerSettings,
    load_settings,
)
from .service import (
    SignatureService,
    create_service,
    parse_signature_request,
)

__all__ = [
    '__version__',
    # Crypto
    'decode_private_key',
    'hex_sha256',
    'sign_rsa_sha256',
    'sign_hmac_sha512',
    # Exceptions
    'SnapSignerError',
    'KeyFormatError',
    'KeyParseError',
    'KeyTypeError',
    'KeyLoadError',
    'SigningError',
    'SerializationError',
    'ValidationError',
    'ConfigurationError',
    # Key providers
    'KeyProvider',
    'StaticKeyProvider',
    'FileKeyProvider',
    # Signing
    'SignatureEngine',
    'create_engine',
    'sign',
    'SignatureType',
    'RawBody',
    'StructuredBody',
    'TransactionsRSARequest',
    'TransactionsHMACRequest',
    'TokenRequest',
    'SignatureArtifact',
    'generate_timestamp',
    'format_timestamp',
    # Configuration
    'SignerSettings',
    'load_settings',
    # Service
    'SignatureService',
    'create_service',
    'parse_signature_request',
]
