"""
Default private key providers

A key provider hands the signature engine PEM text for RSA requests that
carry no key of their own. Providers return text only; decoding happens per
signing call and decoded key objects are never cached.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from .exceptions import KeyLoadError

DEFAULT_PRIVATE_KEY_PATH = "keys/privateKey.pem"


class KeyProvider(ABC):
    """Source of the default PEM-encoded private key"""

    @abstractmethod
    def load_private_key(self) -> str:
        """
        Return the default private key as PEM text.

        Raises:
            KeyLoadError: If the key cannot be loaded
        """

    def is_available(self) -> bool:
        """Check whether the default key can currently be loaded"""
        try:
            self.load_private_key()
        except KeyLoadError:
            return False
        return True


class StaticKeyProvider(KeyProvider):
    """Provider holding PEM text supplied at construction"""

    def __init__(self, pem_text: str):
        self._pem_text = pem_text

    def load_private_key(self) -> str:
        if not self._pem_text:
            raise KeyLoadError("private key not configured")
        return self._pem_text


class FileKeyProvider(KeyProvider):
    """Provider reading PEM text from a file on every call"""

    def __init__(self, path: Union[str, Path] = DEFAULT_PRIVATE_KEY_PATH):
        self.path = Path(path)

    def load_private_key(self) -> str:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError as e:
            raise KeyLoadError(
                "private key file not found",
                details={"path": str(self.path)}
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise KeyLoadError(
                f"error reading private key file: {e}",
                details={"path": str(self.path)}
            ) from e

    def __repr__(self) -> str:
        return f"FileKeyProvider(path='{self.path}')"
