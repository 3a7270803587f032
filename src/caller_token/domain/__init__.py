"""Caller token domain layer.

This package contains the caller identity record, the binary struct codec,
the cipher and text adapters, and the token facade built on top of them.
"""

from caller_token.domain.caller import CallerInfo
from caller_token.domain.codec import CURRENT_VERSION, decode, encode, register_decoder
from caller_token.domain.encryption import AESTokenCipher, TokenCipher, generate_key
from caller_token.domain.exceptions import (
    CallerTokenError,
    DecodeError,
    DecryptionError,
    EncodeError,
    EncodingError,
    EncryptionError,
    FieldRangeError,
    InvalidLengthError,
    TrailingDataError,
    TruncatedInputError,
    VersionMismatchError,
)
from caller_token.domain.services import CallerTokenService, ParseResult
from caller_token.domain.transport import decode_text, encode_text

__all__ = [
    # Record
    "CallerInfo",
    # Struct codec
    "CURRENT_VERSION",
    "encode",
    "decode",
    "register_decoder",
    # Adapters
    "AESTokenCipher",
    "TokenCipher",
    "generate_key",
    "encode_text",
    "decode_text",
    # Facade
    "CallerTokenService",
    "ParseResult",
    # Exceptions
    "CallerTokenError",
    "DecodeError",
    "VersionMismatchError",
    "TruncatedInputError",
    "TrailingDataError",
    "EncodingError",
    "InvalidLengthError",
    "DecryptionError",
    "EncodeError",
    "FieldRangeError",
    "EncryptionError",
]
