"""Custom exceptions for the caller token codec.

Decode-path errors (everything under ``DecodeError`` plus ``DecryptionError``)
are caught by the token facade and reported as an invalid token. Encode-path
errors (``EncodeError`` and ``EncryptionError``) always propagate: a broken
token must never be handed out.
"""


class CallerTokenError(Exception):
    """Base exception for caller token errors."""

    pass


class DecodeError(CallerTokenError):
    """Base exception for struct or text decoding failures."""

    pass


class VersionMismatchError(DecodeError):
    """
    Raised when the version tag has no registered decoder.

    No other byte of the payload is interpreted once this is raised.
    """

    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported token version: {version}")
        self.version = version


class TruncatedInputError(DecodeError):
    """Raised when the buffer ends before a fixed-width field or length-prefixed value."""

    pass


class TrailingDataError(DecodeError):
    """Raised when bytes remain after every field has been consumed."""

    def __init__(self, remaining: int) -> None:
        super().__init__(f"{remaining} unexpected trailing byte(s)")
        self.remaining = remaining


class EncodingError(DecodeError):
    """Raised on malformed UTF-8 in a string field or malformed base64 text."""

    pass


class InvalidLengthError(DecodeError):
    """Raised when a 16-bit length prefix is negative."""

    pass


class DecryptionError(CallerTokenError):
    """
    Raised when a token cannot be decrypted.

    Tampered ciphertext, a wrong key and a short buffer all end up here;
    the message never says which.
    """

    pass


class EncodeError(CallerTokenError):
    """Base exception for errors while encoding a CallerInfo."""

    pass


class FieldRangeError(EncodeError, ValueError):
    """Raised when a field does not fit its wire width or length prefix."""

    pass


class EncryptionError(CallerTokenError):
    """Raised when encrypting a token fails."""

    pass
