"""
Settings management for the SNAP signer

Settings come from built-in defaults, an optional JSON file and the
environment, in increasing order of precedence.
"""

import os
import json
import logging
from typing import Any, Dict, Mapping, Optional, Union
from dataclasses import dataclass, fields, replace
from pathlib import Path

from ..exceptions import ConfigurationError
from ..keys import DEFAULT_PRIVATE_KEY_PATH, FileKeyProvider
from ..signing.engine import SignatureEngine
from ..signing.types import Clock
from ..signing.utils import system_clock, utc_clock

ENV_PRIVATE_KEY_PATH = "SNAP_PRIVATE_KEY_PATH"
ENV_LOG_LEVEL = "SNAP_LOG_LEVEL"
ENV_TIMESTAMP_UTC = "SNAP_TIMESTAMP_UTC"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}

# JSON keys accepted in settings files
_JSON_KEYS = {
    "private_key_path": "private_key_path",
    "privateKeyPath": "private_key_path",
    "log_level": "log_level",
    "logLevel": "log_level",
    "use_utc": "use_utc",
    "useUtc": "use_utc",
}


@dataclass
class SignerSettings:
    """
    Signer settings

    Attributes:
        private_key_path: Path of the default PEM private key
        log_level: Logging level name for the CLI
        use_utc: Generate timestamps in UTC instead of the local zone
    """
    private_key_path: str = DEFAULT_PRIVATE_KEY_PATH
    log_level: str = "INFO"
    use_utc: bool = False

    def __post_init__(self):
        """Validate settings"""
        if not self.private_key_path:
            raise ConfigurationError("private_key_path cannot be empty")

        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}", details={"log_level": self.log_level})

        if not isinstance(self.use_utc, bool):
            raise ConfigurationError("use_utc must be a boolean")

    def create_key_provider(self) -> FileKeyProvider:
        """Key provider for the configured default key file"""
        return FileKeyProvider(self.private_key_path)

    def create_clock(self) -> Clock:
        """Clock for generated timestamps"""
        return utc_clock if self.use_utc else system_clock

    def create_engine(self) -> SignatureEngine:
        """Signature engine wired with the configured clock and default key"""
        return SignatureEngine(clock=self.create_clock(), key_provider=self.create_key_provider())

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got '{value}'")


def load_settings_from_json(json_string: str, base: Optional[SignerSettings] = None) -> SignerSettings:
    """
    Load settings from a JSON object string.

    Args:
        json_string: JSON object with settings keys
        base: Settings to override (defaults if None)

    Returns:
        SignerSettings: Merged settings

    Raises:
        ConfigurationError: If the JSON is invalid or holds unknown keys
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse settings JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Settings JSON must be an object")

    overrides = {}
    for key, value in data.items():
        if key not in _JSON_KEYS:
            raise ConfigurationError(f"Unknown settings key: {key}", details={"key": key})
        overrides[_JSON_KEYS[key]] = value

    return replace(base or SignerSettings(), **overrides)


def load_settings_from_file(file_path: Union[str, Path], base: Optional[SignerSettings] = None) -> SignerSettings:
    """
    Load settings from a JSON file.

    Args:
        file_path: Settings file path
        base: Settings to override (defaults if None)

    Returns:
        SignerSettings: Merged settings

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(Path(file_path), 'r', encoding='utf-8') as f:
            json_string = f.read()
    except OSError as e:
        raise ConfigurationError(f"Failed to read settings file: {e}", details={"path": str(file_path)}) from e

    return load_settings_from_json(json_string, base)


def apply_environment(settings: SignerSettings, environ: Optional[Mapping[str, str]] = None) -> SignerSettings:
    """
    Override settings from environment variables.

    Args:
        settings: Settings to override
        environ: Environment mapping (os.environ if None)

    Returns:
        SignerSettings: Settings with environment overrides applied
    """
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    if env.get(ENV_PRIVATE_KEY_PATH):
        overrides["private_key_path"] = env[ENV_PRIVATE_KEY_PATH]
    if env.get(ENV_LOG_LEVEL):
        overrides["log_level"] = env[ENV_LOG_LEVEL]
    if ENV_TIMESTAMP_UTC in env:
        overrides["use_utc"] = _parse_bool(ENV_TIMESTAMP_UTC, env[ENV_TIMESTAMP_UTC])

    if not overrides:
        return settings
    return replace(settings, **overrides)


def load_settings(config_file: Optional[Union[str, Path]] = None,
                  environ: Optional[Mapping[str, str]] = None) -> SignerSettings:
    """
    Load settings from defaults, an optional file and the environment.

    Args:
        config_file: Optional JSON settings file
        environ: Environment mapping (os.environ if None)

    Returns:
        SignerSettings: Effective settings
    """
    settings = SignerSettings()
    if config_file is not None:
        settings = load_settings_from_file(config_file, settings)
    return apply_environment(settings, environ)
