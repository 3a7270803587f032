"""Binary struct codec for CallerInfo.

Layout (version 10, big-endian, no field tags):

    version    int16
    expire     int64
    security   int32
    appid      int32
    device_id  int64
    uid        int64
    key_len    int16, followed by key_len bytes
    oauth_len  int16, followed by oauth_len UTF-8 bytes (only if oauthid is set)

The oauthid block is positional: it is read only when bytes remain after the
key. Decoders are looked up by version tag in ``DECODERS`` so older layouts can
stay readable while tokens roll over to a newer one.
"""

import struct
from typing import Callable

from caller_token.domain.caller import CallerInfo
from caller_token.domain.exceptions import (
    EncodingError,
    FieldRangeError,
    InvalidLengthError,
    TrailingDataError,
    TruncatedInputError,
    VersionMismatchError,
)

TOKEN_VERSION_1_0 = 10
CURRENT_VERSION = TOKEN_VERSION_1_0

# Largest key or oauthid accepted by a signed 16-bit length prefix
MAX_FIELD_LENGTH = 0x7FFF

_VERSION = struct.Struct(">h")
_LENGTH = struct.Struct(">h")
_FIXED_FIELDS = struct.Struct(">qiiqq")

# version + fixed fields + key length prefix
MIN_ENCODED_SIZE = _VERSION.size + _FIXED_FIELDS.size + _LENGTH.size


class ByteReader:
    """Sequential reader over an immutable byte buffer.

    Every read checks the remaining length first and raises
    TruncatedInputError instead of returning a short result.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise TruncatedInputError(
                f"Expected {size} bytes at offset {self._offset}, {self.remaining} available"
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.read(fmt.size))

    def read_length(self) -> int:
        (length,) = self.unpack(_LENGTH)
        if length < 0:
            raise InvalidLengthError(f"Negative length prefix {length} at offset {self._offset - 2}")
        return length


Decoder = Callable[[ByteReader], CallerInfo]


def _decode_v10(reader: ByteReader) -> CallerInfo:
    expire, security_level, appid, device_id, uid = reader.unpack(_FIXED_FIELDS)

    key = None
    key_len = reader.read_length()
    if key_len > 0:
        key = reader.read(key_len)

    oauthid = None
    if reader.remaining > 0:
        oauth_len = reader.read_length()
        if oauth_len > 0:
            raw = reader.read(oauth_len)
            try:
                oauthid = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise EncodingError(f"oauthid is not valid UTF-8: {e.reason}") from e

    return CallerInfo(
        expire=expire,
        security_level=security_level,
        appid=appid,
        device_id=device_id,
        uid=uid,
        key=key,
        oauthid=oauthid,
    )


DECODERS: dict[int, Decoder] = {
    TOKEN_VERSION_1_0: _decode_v10,
}


def register_decoder(version: int, decoder: Decoder) -> None:
    """Register a decoder for an additional layout version.

    Args:
        version: Version tag written in the first two bytes
        decoder: Callable reading the fields that follow the tag

    Raises:
        ValueError: If the version does not fit in the 16-bit tag or is
            already registered
    """
    if not -0x8000 <= version <= 0x7FFF:
        raise ValueError(f"Version tag must fit in 16 bits, got {version}")
    if version in DECODERS:
        raise ValueError(f"Decoder for version {version} already registered")
    DECODERS[version] = decoder


def supported_versions() -> tuple[int, ...]:
    """Return the version tags that ``decode`` accepts."""
    return tuple(sorted(DECODERS))


def _length_prefixed(name: str, value: bytes) -> bytes:
    if len(value) > MAX_FIELD_LENGTH:
        raise FieldRangeError(
            f"{name} must be at most {MAX_FIELD_LENGTH} bytes, got {len(value)}"
        )
    return _LENGTH.pack(len(value)) + value


def encode(caller: CallerInfo) -> bytes:
    """Encode a CallerInfo with the current layout.

    Args:
        caller: Record to encode

    Returns:
        Encoded bytes (36 bytes when neither key nor oauthid is set)

    Raises:
        FieldRangeError: If an integer does not fit its field or key/oauthid
            is longer than 32767 bytes
    """
    try:
        head = _VERSION.pack(CURRENT_VERSION) + _FIXED_FIELDS.pack(
            caller.expire,
            caller.security_level,
            caller.appid,
            caller.device_id,
            caller.uid,
        )
    except struct.error as e:
        raise FieldRangeError(f"Integer field out of range: {e}") from e

    parts = [head, _length_prefixed("key", caller.key or b"")]
    if caller.oauthid:
        parts.append(_length_prefixed("oauthid", caller.oauthid.encode("utf-8")))
    return b"".join(parts)


def decode(data: bytes) -> CallerInfo:
    """Decode bytes produced by ``encode`` (or a registered older layout).

    Args:
        data: Plaintext token bytes

    Returns:
        Decoded CallerInfo

    Raises:
        VersionMismatchError: If the version tag has no decoder
        TruncatedInputError: If the buffer ends early
        InvalidLengthError: If a length prefix is negative
        EncodingError: If oauthid is not valid UTF-8
        TrailingDataError: If bytes remain after the last field
    """
    reader = ByteReader(data)
    (version,) = reader.unpack(_VERSION)

    decoder = DECODERS.get(version)
    if decoder is None:
        raise VersionMismatchError(version)

    caller = decoder(reader)

    if reader.remaining > 0:
        raise TrailingDataError(reader.remaining)
    return caller
