"""
Configuration management for the SNAP signer
"""

from .settings import (
    ENV_LOG_LEVEL,
    ENV_PRIVATE_KEY_PATH,
    ENV_TIMESTAMP_UTC,
    SignerSettings,
    apply_environment,
    load_settings,
    load_settings_from_file,
    load_settings_from_json,
)

__all__ = [
    'ENV_LOG_LEVEL',
    'ENV_PRIVATE_KEY_PATH',
    'ENV_TIMESTAMP_UTC',
    'SignerSettings',
    'apply_environment',
    'load_settings',
    'load_settings_from_file',
    'load_settings_from_json',
]
