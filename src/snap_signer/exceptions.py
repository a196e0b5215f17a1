"""
Exception classes for the SNAP signer
"""

from typing import Optional, Dict, Any


class ErrorCodes:
    """Standard error codes for signing operations"""

    # Key material errors
    KEY_FORMAT_ERROR = "KEY_FORMAT_ERROR"
    KEY_PARSE_ERROR = "KEY_PARSE_ERROR"
    KEY_TYPE_ERROR = "KEY_TYPE_ERROR"
    KEY_LOAD_ERROR = "KEY_LOAD_ERROR"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"
    SERIALIZATION_FAILED = "SERIALIZATION_FAILED"

    # Boundary errors
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_CONFIG = "INVALID_CONFIG"


class SnapSignerError(Exception):
    """Base exception for all SNAP signer errors"""

    default_code = "UNKNOWN_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', error_code='{self.error_code}')"


class KeyFormatError(SnapSignerError):
    """Exception raised when the key text contains no PEM block"""
    default_code = ErrorCodes.KEY_FORMAT_ERROR


class KeyParseError(SnapSignerError):
    """Exception raised when the PEM payload is not a PKCS#8 private key"""
    default_code = ErrorCodes.KEY_PARSE_ERROR


class KeyTypeError(SnapSignerError):
    """Exception raised when the parsed key is not an RSA key"""
    default_code = ErrorCodes.KEY_TYPE_ERROR


class KeyLoadError(SnapSignerError):
    """Exception raised when the default private key cannot be loaded"""
    default_code = ErrorCodes.KEY_LOAD_ERROR


class SigningError(SnapSignerError):
    """Exception raised when the cryptographic signing operation fails"""
    default_code = ErrorCodes.SIGNING_FAILED


class SerializationError(SnapSignerError):
    """Exception raised when a request body cannot be serialized or minified"""
    default_code = ErrorCodes.SERIALIZATION_FAILED


class ValidationError(SnapSignerError):
    """Exception raised for request validation failures"""

    default_code = ErrorCodes.INVALID_REQUEST

    def __init__(self, message: str, field: Optional[str] = None,
                 error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.field = field


class ConfigurationError(SnapSignerError):
    """Exception raised for unreadable or invalid settings"""
    default_code = ErrorCodes.INVALID_CONFIG
