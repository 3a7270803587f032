"""AES-GCM cipher adapter for caller tokens.

Tokens are encrypted with a pre-shared AES key using AES-GCM, which gives
both confidentiality and tamper detection. The output layout is
``nonce (12 bytes) || ciphertext || tag (16 bytes)``.

The adapter only stores the immutable key. A fresh AESGCM context is built
for every call, so one instance can be shared by any number of threads.
"""

import base64
import binascii
import os
from typing import Protocol

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from caller_token.domain.exceptions import DecryptionError, EncryptionError
from caller_token.logging_config import get_logger

logger = get_logger(__name__)

NONCE_SIZE = 12
TAG_SIZE = 16
VALID_KEY_SIZES = (16, 24, 32)


class TokenCipher(Protocol):
    """Symmetric cipher contract used by the token facade."""

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt token bytes, raising EncryptionError on failure."""
        ...

    def decrypt(self, token: bytes) -> bytes:
        """Decrypt token bytes.

        Raises:
            DecryptionError: On any failure (tampered data, wrong key, bad
                padding or length). The token facade treats any other
                exception raised here as a DecryptionError.
        """
        ...


class AESTokenCipher:
    """Pre-shared key AES-GCM cipher.

    Security notes:
        - 96-bit random nonce per encryption, prepended to the ciphertext
        - Authentication tag is verified on every decryption
        - Key material never appears in logs or exception messages
    """

    def __init__(self, key: bytes) -> None:
        """Initialize the cipher.

        Args:
            key: 16, 24 or 32 byte AES key

        Raises:
            ValueError: If the key has an unsupported length
        """
        if len(key) not in VALID_KEY_SIZES:
            raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        self._key = bytes(key)

    @classmethod
    def from_base64(cls, encoded_key: str) -> "AESTokenCipher":
        """Create a cipher from a base64-encoded key.

        Args:
            encoded_key: Base64 text of the pre-shared key

        Returns:
            AESTokenCipher instance

        Raises:
            ValueError: If the text is not valid base64 or decodes to a bad key
        """
        try:
            key = base64.b64decode(encoded_key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("Invalid base64 AES key") from e
        return cls(key)

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt token bytes.

        Args:
            plaintext: Encoded CallerInfo bytes

        Returns:
            nonce || ciphertext || tag

        Raises:
            EncryptionError: If encryption fails
        """
        try:
            nonce = os.urandom(NONCE_SIZE)
            ciphertext = AESGCM(self._key).encrypt(nonce, plaintext, associated_data=None)
        except Exception as e:
            logger.error("token_encryption_failed", error_kind=type(e).__name__)
            raise EncryptionError("Failed to encrypt token") from e

        return nonce + ciphertext

    def decrypt(self, token: bytes) -> bytes:
        """Decrypt and authenticate token bytes.

        Args:
            token: Output of ``encrypt``

        Returns:
            Plaintext token bytes

        Raises:
            DecryptionError: If the token is too short, was tampered with or
                was encrypted with another key
        """
        if len(token) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionError("Failed to decrypt token - invalid key or corrupted data")

        nonce, ciphertext = token[:NONCE_SIZE], token[NONCE_SIZE:]
        try:
            return AESGCM(self._key).decrypt(nonce, ciphertext, associated_data=None)
        except (InvalidTag, ValueError) as e:
            # Don't expose detailed error messages for security
            raise DecryptionError("Failed to decrypt token - invalid key or corrupted data") from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key_bits={len(self._key) * 8})"


def generate_key(size: int = 32) -> str:
    """Generate a new pre-shared key.

    Args:
        size: Key length in bytes (16, 24 or 32)

    Returns:
        Base64-encoded key suitable for ``AESTokenCipher.from_base64``

    Raises:
        ValueError: If size is not a valid AES key length
    """
    if size not in VALID_KEY_SIZES:
        raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {size}")
    return base64.b64encode(os.urandom(size)).decode("ascii")
