"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- A fresh AES key and cipher per test
- A token service built on that cipher
- Sample caller records
"""

import os
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from caller_token.domain.caller import CallerInfo
from caller_token.domain.encryption import AESTokenCipher, generate_key
from caller_token.domain.services import CallerTokenService


@pytest.fixture
def aes_key_b64() -> str:
    """Base64-encoded 256-bit key."""
    return generate_key()


@pytest.fixture
def cipher(aes_key_b64: str) -> AESTokenCipher:
    return AESTokenCipher.from_base64(aes_key_b64)


@pytest.fixture
def token_service(cipher: AESTokenCipher) -> CallerTokenService:
    return CallerTokenService(cipher)


@pytest.fixture
def sample_caller() -> CallerInfo:
    """Caller with neither key nor oauthid (encodes to 36 bytes)."""
    return CallerInfo(
        expire=1700000000000,
        security_level=1,
        appid=42,
        device_id=123456789,
        uid=987654321,
    )


@pytest.fixture
def full_caller() -> CallerInfo:
    """Caller with every optional field set."""
    return CallerInfo(
        expire=4102444800000,
        security_level=7,
        appid=1001,
        device_id=-5,
        uid=2**63 - 1,
        key=os.urandom(16),
        oauthid="wx:oT3g-用户",
    )
