"""
SNAP request signing

Canonical string-to-sign construction and the signature engine for
SHA256withRSA transactions, HMAC-SHA512 transactions and SHA256withRSA
access-token requests.
"""

from .types import (
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    Clock,
    RawBody,
    RequestBody,
    SignatureArtifact,
    SignatureType,
    SigningRequest,
    StructuredBody,
    TokenRequest,
    TransactionsHMACRequest,
    TransactionsRSARequest,
    as_request_body,
)

from .canonical_message import (
    TOKEN_DELIMITER,
    TRANSACTION_DELIMITER,
    build_token_string,
    build_transactions_hmac_string,
    build_transactions_rsa_string,
    digest_body,
)

from .engine import (
    SignatureEngine,
    create_engine,
    sign,
)

from .utils import (
    format_timestamp,
    generate_timestamp,
    minify_json,
    serialize_json,
    system_clock,
    utc_clock,
)

# Public API exports
__all__ = [
    # Engine
    'SignatureEngine',
    'create_engine',
    'sign',
    # Types
    'HEADER_SIGNATURE',
    'HEADER_TIMESTAMP',
    'Clock',
    'RawBody',
    'RequestBody',
    'SignatureArtifact',
    'SignatureType',
    'SigningRequest',
    'StructuredBody',
    'TokenRequest',
    'TransactionsHMACRequest',
    'TransactionsRSARequest',
    'as_request_body',
    # Canonical message
    'TOKEN_DELIMITER',
    'TRANSACTION_DELIMITER',
    'build_token_string',
    'build_transactions_hmac_string',
    'build_transactions_rsa_string',
    'digest_body',
    # Utilities
    'format_timestamp',
    'generate_timestamp',
    'minify_json',
    'serialize_json',
    'system_clock',
    'utc_clock',
]
