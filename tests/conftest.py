"""
Shared fixtures for SNAP signer tests
"""

from datetime import datetime, timedelta, timezone

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa


@pytest.fixture(scope="session")
def rsa_private_key():
    """RSA-2048 test key"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_public_key(rsa_private_key):
    return rsa_private_key.public_key()


@pytest.fixture(scope="session")
def pkcs8_pem(rsa_private_key):
    """RSA key as unencrypted PKCS#8 PEM text"""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


@pytest.fixture(scope="session")
def pkcs1_pem(rsa_private_key):
    """Same RSA key as PKCS#1 ("RSA PRIVATE KEY") PEM text"""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


@pytest.fixture(scope="session")
def encrypted_pkcs8_pem(rsa_private_key):
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.BestAvailableEncryption(b"passphrase")
    ).decode('ascii')


@pytest.fixture(scope="session")
def ec_pkcs8_pem():
    """P-256 key as PKCS#8 PEM text"""
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-01-15 10:30:00.123 +07:00"""
    moment = datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone(timedelta(hours=7)))
    return lambda: moment


@pytest.fixture
def key_file(tmp_path, pkcs8_pem):
    path = tmp_path / "privateKey.pem"
    path.write_text(pkcs8_pem, encoding='utf-8')
    return path
