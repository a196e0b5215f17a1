"""
Unit tests for hashing and signing primitives
"""

import base64
import hashlib
import hmac
from unittest.mock import Mock

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from snap_signer.crypto.primitives import hex_sha256, sign_hmac_sha512, sign_rsa_sha256
from snap_signer.exceptions import ErrorCodes, SigningError


class TestHexSha256:
    """Test cases for the SHA-256 body hasher"""

    def test_known_digest(self):
        assert hex_sha256(b"abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    def test_empty_payload(self):
        assert hex_sha256(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_lowercase_and_length(self):
        digest = hex_sha256(bytes(range(256)))

        assert len(digest) == 64
        assert digest == digest.lower()

    def test_text_is_hashed_as_utf8(self):
        assert hex_sha256("héllo") == hashlib.sha256("héllo".encode('utf-8')).hexdigest()

    def test_lone_surrogate_becomes_replacement_character(self):
        assert hex_sha256("a\ud800b") == hashlib.sha256("a\ufffdb".encode('utf-8')).hexdigest()


class TestSignRsaSha256:
    """Test cases for SHA256withRSA signing"""

    def test_signature_verifies_with_public_key(self, rsa_private_key, rsa_public_key):
        message = b"POST:/v1.0/debit::2024-01-15T10:30:00.000+07:00"

        signature = sign_rsa_sha256(message, rsa_private_key)

        rsa_public_key.verify(base64.b64decode(signature), message, padding.PKCS1v15(), hashes.SHA256())

    def test_signature_length_matches_key_size(self, rsa_private_key):
        signature = sign_rsa_sha256("message", rsa_private_key)
        assert len(base64.b64decode(signature)) == 256

    def test_pkcs1v15_signatures_are_deterministic(self, rsa_private_key):
        assert sign_rsa_sha256("message", rsa_private_key) == sign_rsa_sha256("message", rsa_private_key)

    def test_signature_does_not_verify_other_message(self, rsa_private_key, rsa_public_key):
        signature = base64.b64decode(sign_rsa_sha256("message", rsa_private_key))

        with pytest.raises(InvalidSignature):
            rsa_public_key.verify(signature, b"other message", padding.PKCS1v15(), hashes.SHA256())

    def test_unusable_key_raises_signing_error(self):
        """Failures inside the key's sign operation surface as SigningError"""
        key = Mock(spec=rsa.RSAPrivateKey)
        key.sign.side_effect = ValueError("Digest too big for RSA key")

        with pytest.raises(SigningError, match="Digest too big") as exc_info:
            sign_rsa_sha256("message", key)

        assert exc_info.value.error_code == ErrorCodes.SIGNING_FAILED
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestSignHmacSha512:
    """Test cases for HMAC-SHA512 signing"""

    def test_matches_standard_hmac(self):
        message = b"POST:/v1.0/debit:tok-123:abc:2024-01-15T10:30:00.000+07:00"
        expected = base64.b64encode(hmac.new(b"s3cr3t", message, hashlib.sha512).digest()).decode('ascii')

        assert sign_hmac_sha512("s3cr3t", message) == expected

    def test_mac_length(self):
        assert len(base64.b64decode(sign_hmac_sha512("key", "data"))) == 64

    def test_secret_is_utf8_encoded(self):
        expected = base64.b64encode(
            hmac.new("clé".encode('utf-8'), b"data", hashlib.sha512).digest()
        ).decode('ascii')

        assert sign_hmac_sha512("clé", b"data") == expected

    def test_lone_surrogate_in_secret(self):
        assert sign_hmac_sha512("s\udc00", b"data") == base64.b64encode(
            hmac.new("s\ufffd".encode('utf-8'), b"data", hashlib.sha512).digest()
        ).decode('ascii')

    def test_empty_secret_and_message(self):
        """Total function: empty inputs still produce a MAC"""
        assert sign_hmac_sha512("", b"")
