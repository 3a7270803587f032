"""Base64 text transport for opaque token bytes."""

import base64
import binascii

from caller_token.domain.exceptions import EncodingError


def encode_text(data: bytes) -> str:
    """Encode bytes as standard-alphabet, padded base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_text(text: str | bytes) -> bytes:
    """Decode base64 text back into bytes.

    Raises:
        EncodingError: If the text is not valid standard base64
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 token text: {e}") from e
