"""Caller identity record carried inside a token."""

import time
from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class CallerInfo:
    """Identity and access attributes of a caller.

    The record is immutable. Derive modified copies with ``as_device()`` or
    ``dataclasses.replace`` instead of assigning to fields.

    Attributes:
        expire: Absolute expiry timestamp (epoch milliseconds)
        security_level: Caller trust tier
        appid: Issuing application id
        device_id: Device identifier
        uid: User id, 0 when no user is bound (device token)
        key: Optional per-caller symmetric key material
        oauthid: Optional external identity reference
    """

    expire: int
    security_level: int
    appid: int
    device_id: int
    uid: int = 0
    key: Optional[bytes] = field(default=None, repr=False)
    oauthid: Optional[str] = None

    def __post_init__(self):
        """Normalize empty optional fields to None.

        An empty key or oauthid has the same wire form as an absent one.
        """
        if self.key is not None:
            if not isinstance(self.key, (bytes, bytearray, memoryview)):
                raise TypeError("key must be bytes")
            object.__setattr__(self, "key", bytes(self.key) or None)

        if self.oauthid is not None:
            if not isinstance(self.oauthid, str):
                raise TypeError("oauthid must be str")
            if not self.oauthid:
                object.__setattr__(self, "oauthid", None)

    @property
    def is_device(self) -> bool:
        """True when no user is bound to this caller."""
        return self.uid == 0

    def as_device(self) -> "CallerInfo":
        """Return a copy of this record with ``uid`` set to 0."""
        return replace(self, uid=0)

    def is_expired(self, now_ms: Optional[int] = None) -> bool:
        """Check if the caller has expired.

        Args:
            now_ms: Current time in epoch milliseconds (defaults to wall clock)

        Returns:
            True if ``expire`` is in the past, False otherwise
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return now_ms > self.expire
