"""
Signature service boundary

Decodes wire payloads into signing requests, validates them, runs the
signature engine and maps results and errors to (status, body) pairs that
any transport can return as JSON.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import KeyLoadError, SnapSignerError, ValidationError
from .signing.engine import SignatureEngine
from .signing.types import (
    SignatureType,
    SigningRequest,
    TokenRequest,
    TransactionsHMACRequest,
    TransactionsRSARequest,
)

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_INTERNAL_SERVER_ERROR = 500

ServiceResult = Tuple[int, Dict[str, Any]]


def _require(payload: Mapping[str, Any], field: str, message: str) -> None:
    value = payload.get(field)
    if value is None or value == "":
        raise ValidationError(message, field=field)


def _optional_text(payload: Mapping[str, Any], field: str) -> Optional[str]:
    value = payload.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field=field)
    return value


def _text(payload: Mapping[str, Any], field: str) -> str:
    return _optional_text(payload, field) or ""


def validate_payload(payload: Mapping[str, Any], default_key_available: bool = False) -> SignatureType:
    """
    Check that a payload carries the fields its signature type needs.

    Args:
        payload: Decoded request payload
        default_key_available: Whether a default key can stand in for privateKey

    Returns:
        SignatureType: The requested signature type

    Raises:
        ValidationError: On the first missing or invalid field
    """
    raw_type = payload.get("signatureRequestType")
    if not raw_type:
        raise ValidationError("signatureRequestType is required", field="signatureRequestType")

    try:
        signature_type = SignatureType(raw_type)
    except ValueError:
        raise ValidationError("invalid signature type", field="signatureRequestType") from None

    has_key = bool(payload.get("privateKey")) or default_key_available

    if signature_type in (SignatureType.TRANSACTIONS_RSA_SHA256, SignatureType.TRANSACTIONS_HMAC_SHA512):
        _require(payload, "method", "method is required for transactions")
        _require(payload, "url", "url is required for transactions")
        if payload.get("body") is None:
            raise ValidationError("body is required for transactions", field="body")

    if signature_type == SignatureType.TRANSACTIONS_RSA_SHA256:
        if not has_key:
            raise ValidationError("privateKey is required for RSA signatures", field="privateKey")

    elif signature_type == SignatureType.TRANSACTIONS_HMAC_SHA512:
        _require(payload, "accessToken", "accessToken is required for HMAC signatures")
        _require(payload, "secretKey", "secretKey is required for HMAC signatures")

    elif signature_type == SignatureType.TOKEN_RSA_SHA256:
        _require(payload, "clientID", "clientID is required for token generation")
        if not has_key:
            raise ValidationError("privateKey is required for token generation", field="privateKey")

    return signature_type


def parse_signature_request(payload: Mapping[str, Any], default_key_available: bool = False) -> SigningRequest:
    """
    Decode and validate a wire payload into a signing request.

    Args:
        payload: Decoded JSON object with signatureRequestType, method, url,
            body, clientID, timestamp, privateKey, accessToken, secretKey
        default_key_available: Whether a default key can stand in for privateKey

    Returns:
        SigningRequest: The matching request variant

    Raises:
        ValidationError: If the payload is incomplete or malformed
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Invalid request body")

    signature_type = validate_payload(payload, default_key_available)
    timestamp = _optional_text(payload, "timestamp")

    if signature_type == SignatureType.TRANSACTIONS_RSA_SHA256:
        return TransactionsRSARequest(
            method=_text(payload, "method"),
            url=_text(payload, "url"),
            body=payload.get("body"),
            private_key_pem=_optional_text(payload, "privateKey"),
            timestamp=timestamp,
        )

    if signature_type == SignatureType.TRANSACTIONS_HMAC_SHA512:
        return TransactionsHMACRequest(
            method=_text(payload, "method"),
            url=_text(payload, "url"),
            body=payload.get("body"),
            access_token=_text(payload, "accessToken"),
            secret_key=_text(payload, "secretKey"),
            timestamp=timestamp,
        )

    return TokenRequest(
        client_id=_text(payload, "clientID"),
        private_key_pem=_optional_text(payload, "privateKey"),
        timestamp=timestamp,
    )


def error_body(message: str) -> Dict[str, Any]:
    return {"error": message}


class SignatureService:
    """
    Transport-neutral signature service

    Wraps a signature engine and returns (status, body) pairs for the
    generate and health operations.
    """

    def __init__(self, engine: SignatureEngine):
        self.engine = engine

    def generate(self, payload: Union[Mapping[str, Any], str, bytes]) -> ServiceResult:
        """
        Generate a signature for a wire payload.

        Args:
            payload: JSON object, or JSON text to decode

        Returns:
            ServiceResult: (200, artifact) on success, (400|500, {"error": ...}) otherwise
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except (ValueError, RecursionError):
                logger.warning("Rejected request: body is not valid JSON")
                return HTTP_BAD_REQUEST, error_body("Invalid request body")

        if not isinstance(payload, Mapping):
            logger.warning("Rejected request: body is not a JSON object")
            return HTTP_BAD_REQUEST, error_body("Invalid request body")

        try:
            request = parse_signature_request(payload, self.engine.has_default_key)
        except ValidationError as e:
            logger.warning(f"Rejected request: {e.message} (field: {e.field})")
            return HTTP_BAD_REQUEST, error_body(e.message)

        logger.debug(f"Generating {request.signature_type.value} signature")

        try:
            artifact = self.engine.sign(request)
        except KeyLoadError as e:
            logger.error(f"Default private key unavailable: {e.message}")
            return HTTP_INTERNAL_SERVER_ERROR, error_body(f"Error loading default private key: {e.message}")
        except SnapSignerError as e:
            logger.error(f"Signature generation failed ({e.error_code}): {e.message}")
            return HTTP_INTERNAL_SERVER_ERROR, error_body(e.message)

        return HTTP_OK, artifact.to_dict()

    def health(self) -> ServiceResult:
        """
        Report service health.

        Returns:
            ServiceResult: (200, {"status": "ok", "keyLoaded": bool})
        """
        key_loaded = self.engine.key_provider is not None and self.engine.key_provider.is_available()
        return HTTP_OK, {"status": "ok", "keyLoaded": key_loaded}


def create_service(engine: Optional[SignatureEngine] = None) -> SignatureService:
    """
    Create a signature service.

    Args:
        engine: Engine to wrap (an engine without default key if None)

    Returns:
        SignatureService: Service instance
    """
    return SignatureService(engine or SignatureEngine())
