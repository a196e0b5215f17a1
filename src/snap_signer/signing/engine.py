"""
SNAP signature engine

The engine resolves the timestamp, builds the string-to-sign for the
request's scheme, signs it and assembles the signature artifact. It keeps
no state between calls: the clock and the default key provider are
read-only collaborators supplied at construction.
"""

from typing import Callable, Dict, Optional, Type

from ..crypto.primitives import sign_hmac_sha512, sign_rsa_sha256
from ..crypto.rsa_keys import decode_private_key
from ..exceptions import KeyLoadError, ValidationError
from ..keys import KeyProvider
from .canonical_message import (
    build_token_string,
    build_transactions_hmac_string,
    build_transactions_rsa_string,
)
from .types import (
    Clock,
    SignatureArtifact,
    SigningRequest,
    TokenRequest,
    TransactionsHMACRequest,
    TransactionsRSARequest,
)
from .utils import generate_timestamp, system_clock


class SignatureEngine:
    """
    Signature engine for the three SNAP signing schemes

    Safe to share between threads: signing reads only its arguments and the
    injected collaborators.
    """

    def __init__(self, clock: Optional[Clock] = None, key_provider: Optional[KeyProvider] = None):
        """
        Initialize the engine.

        Args:
            clock: Time source for generated timestamps (local system clock if None)
            key_provider: Default key source for RSA requests without a key
        """
        self.clock = clock or system_clock
        self.key_provider = key_provider
        self._handlers: Dict[Type, Callable[..., SignatureArtifact]] = {
            TransactionsRSARequest: self._sign_transactions_rsa,
            TransactionsHMACRequest: self._sign_transactions_hmac,
            TokenRequest: self._sign_token,
        }

    @property
    def has_default_key(self) -> bool:
        return self.key_provider is not None

    def sign(self, request: SigningRequest) -> SignatureArtifact:
        """
        Sign a request.

        Args:
            request: One of the signing request variants

        Returns:
            SignatureArtifact: Signature, timestamp, string-to-sign and headers

        Raises:
            KeyFormatError, KeyParseError, KeyTypeError: If the RSA key cannot be decoded
            KeyLoadError: If no key was supplied and the default key cannot be loaded
            SerializationError: If the body cannot be serialized or minified
            SigningError: If the signing operation fails
        """
        handler = self._handlers.get(type(request))
        if handler is None:
            raise ValidationError(
                f"Unsupported signing request: {type(request).__name__}",
                field="signatureRequestType"
            )

        timestamp = request.timestamp or generate_timestamp(self.clock)
        return handler(request, timestamp)

    def _sign_transactions_rsa(self, request: TransactionsRSARequest, timestamp: str) -> SignatureArtifact:
        string_to_sign = build_transactions_rsa_string(request, timestamp)
        private_key = decode_private_key(self._resolve_private_key(request.private_key_pem))
        signature = sign_rsa_sha256(string_to_sign, private_key)
        return SignatureArtifact(signature=signature, timestamp=timestamp, string_to_sign=string_to_sign)

    def _sign_transactions_hmac(self, request: TransactionsHMACRequest, timestamp: str) -> SignatureArtifact:
        string_to_sign = build_transactions_hmac_string(request, timestamp)
        signature = sign_hmac_sha512(request.secret_key, string_to_sign)
        return SignatureArtifact(signature=signature, timestamp=timestamp, string_to_sign=string_to_sign)

    def _sign_token(self, request: TokenRequest, timestamp: str) -> SignatureArtifact:
        string_to_sign = build_token_string(request, timestamp)
        private_key = decode_private_key(self._resolve_private_key(request.private_key_pem))
        signature = sign_rsa_sha256(string_to_sign, private_key)
        return SignatureArtifact(signature=signature, timestamp=timestamp, string_to_sign=string_to_sign)

    def _resolve_private_key(self, pem_text: Optional[str]) -> str:
        if pem_text:
            return pem_text
        if self.key_provider is None:
            raise KeyLoadError("no private key supplied and no default key configured")
        return self.key_provider.load_private_key()


def create_engine(clock: Optional[Clock] = None, key_provider: Optional[KeyProvider] = None) -> SignatureEngine:
    """
    Create a new signature engine.

    Args:
        clock: Time source for generated timestamps
        key_provider: Default key source for RSA requests

    Returns:
        SignatureEngine: Configured engine instance
    """
    return SignatureEngine(clock=clock, key_provider=key_provider)


def sign(request: SigningRequest, clock: Optional[Clock] = None,
         key_provider: Optional[KeyProvider] = None) -> SignatureArtifact:
    """
    Sign a request with a one-off engine.

    Args:
        request: Signing request
        clock: Time source for generated timestamps
        key_provider: Default key source for RSA requests

    Returns:
        SignatureArtifact: Signing result
    """
    return create_engine(clock, key_provider).sign(request)
