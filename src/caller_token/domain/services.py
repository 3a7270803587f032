"""Token facade: generate and parse caller tokens.

Generation is ``CallerInfo -> encode -> encrypt -> (base64)``; parsing runs
the same steps backwards. Parsing never raises: every decode-path failure
turns into an invalid result, with the failure kind kept for logging only.
"""

from typing import NamedTuple, Optional

from caller_token.config import Settings
from caller_token.domain import codec, transport
from caller_token.domain.caller import CallerInfo
from caller_token.domain.encryption import AESTokenCipher, TokenCipher
from caller_token.domain.exceptions import DecodeError, DecryptionError
from caller_token.logging_config import get_logger

logger = get_logger(__name__)


class ParseResult(NamedTuple):
    """Outcome of parsing a token.

    Attributes:
        caller: Decoded record, None when the token is invalid
        error: Failure raised by the stage that rejected the token
        stage: Name of the failing stage ("text", "decrypt" or "struct")
    """

    caller: Optional[CallerInfo]
    error: Optional[Exception] = None
    stage: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.caller is not None


class CallerTokenService:
    """Issues and validates caller tokens with a shared cipher.

    One instance is built per process and shared by all request handlers.
    It holds no mutable state of its own.
    """

    def __init__(self, cipher: TokenCipher) -> None:
        self._cipher = cipher

    @classmethod
    def from_base64_key(cls, encoded_key: str) -> "CallerTokenService":
        """Create a service from a base64 pre-shared AES key."""
        return cls(AESTokenCipher.from_base64(encoded_key))

    @classmethod
    def from_settings(cls, settings: Settings) -> "CallerTokenService":
        """Create a service from application settings.

        Raises:
            ValueError: If no AES key is configured
        """
        if not settings.aes_key:
            raise ValueError("CALLER_TOKEN_AES_KEY is not configured")
        return cls.from_base64_key(settings.aes_key)

    def generate_user_token(self, caller: CallerInfo) -> bytes:
        """Encode and encrypt a caller record.

        Raises:
            FieldRangeError: If a field does not fit the wire format
            EncryptionError: If encryption fails
        """
        return self._cipher.encrypt(codec.encode(caller))

    def generate_device_token(self, caller: CallerInfo) -> bytes:
        """Generate a token for ``caller`` with no user bound.

        The caller's record is left untouched; a copy with ``uid`` 0 is
        encoded instead.
        """
        return self.generate_user_token(caller.as_device())

    def generate_string_user_token(self, caller: CallerInfo) -> str:
        return transport.encode_text(self.generate_user_token(caller))

    def generate_string_device_token(self, caller: CallerInfo) -> str:
        return transport.encode_text(self.generate_device_token(caller))

    def parse_token_result(self, token: str | bytes) -> ParseResult:
        """Parse a token and report which stage rejected it, if any.

        ``str`` input is treated as base64 text; ``bytes`` input as the raw
        encrypted token.
        """
        if isinstance(token, str):
            try:
                token = transport.decode_text(token)
            except DecodeError as e:
                return ParseResult(caller=None, error=e, stage="text")
        elif not isinstance(token, (bytes, bytearray)):
            error = TypeError(f"token must be str or bytes, got {type(token).__name__}")
            return ParseResult(caller=None, error=error, stage="text")

        try:
            plaintext = self._cipher.decrypt(token)
        except DecryptionError as e:
            return ParseResult(caller=None, error=e, stage="decrypt")
        except Exception as e:
            # Injected ciphers may raise outside the TokenCipher contract
            error = DecryptionError(f"Cipher raised {type(e).__name__}")
            error.__cause__ = e
            return ParseResult(caller=None, error=error, stage="decrypt")

        try:
            caller = codec.decode(plaintext)
        except DecodeError as e:
            return ParseResult(caller=None, error=e, stage="struct")

        return ParseResult(caller=caller)

    def parse_token(self, token: str | bytes) -> Optional[CallerInfo]:
        """Parse a token into a CallerInfo.

        Args:
            token: Base64 token text or raw encrypted token bytes

        Returns:
            The caller, or None when the token is invalid for any reason
        """
        result = self.parse_token_result(token)
        if not result.is_valid:
            logger.warning(
                "token_parse_failed",
                stage=result.stage,
                error_kind=type(result.error).__name__,
            )
        return result.caller
