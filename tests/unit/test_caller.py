"""Unit tests for the CallerInfo record."""

import dataclasses

import pytest

from caller_token.domain.caller import CallerInfo


class TestCallerInfo:
    """Tests for CallerInfo construction and helpers."""

    def test_defaults(self):
        caller = CallerInfo(expire=1, security_level=2, appid=3, device_id=4)

        assert caller.uid == 0
        assert caller.key is None
        assert caller.oauthid is None

    def test_empty_key_normalized_to_none(self):
        """Test that an empty key has the same value as an absent one."""
        caller = CallerInfo(expire=1, security_level=2, appid=3, device_id=4, key=b"")

        assert caller.key is None
        assert caller == CallerInfo(expire=1, security_level=2, appid=3, device_id=4)

    def test_bytearray_key_converted_to_bytes(self):
        caller = CallerInfo(expire=1, security_level=2, appid=3, device_id=4, key=bytearray(b"ab"))

        assert caller.key == b"ab"
        assert isinstance(caller.key, bytes)

    def test_non_bytes_key_rejected(self):
        with pytest.raises(TypeError, match="key must be bytes"):
            CallerInfo(expire=1, security_level=2, appid=3, device_id=4, key="secret")

    @pytest.mark.parametrize("oauthid", [b"github|1", 12345])
    def test_non_str_oauthid_rejected(self, oauthid):
        with pytest.raises(TypeError, match="oauthid must be str"):
            CallerInfo(expire=1, security_level=2, appid=3, device_id=4, oauthid=oauthid)

    def test_empty_oauthid_normalized_to_none(self):
        caller = CallerInfo(expire=1, security_level=2, appid=3, device_id=4, oauthid="")

        assert caller.oauthid is None

    def test_record_is_immutable(self, sample_caller):
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_caller.uid = 0

    def test_as_device_returns_copy(self, sample_caller):
        """Test that as_device leaves the original record untouched."""
        device = sample_caller.as_device()

        assert device.uid == 0
        assert device.is_device
        assert sample_caller.uid == 987654321
        assert not sample_caller.is_device
        assert dataclasses.replace(device, uid=sample_caller.uid) == sample_caller

    def test_repr_hides_key(self, full_caller):
        """Test that key material never appears in the repr."""
        assert "key=" not in repr(full_caller)
        assert repr(full_caller.key) not in repr(full_caller)

    def test_is_expired(self, sample_caller):
        assert sample_caller.is_expired(now_ms=1700000000001)
        assert not sample_caller.is_expired(now_ms=1700000000000)
        assert not sample_caller.is_expired(now_ms=1600000000000)

    def test_is_expired_uses_wall_clock(self, sample_caller, full_caller):
        # 2023-11-14 is in the past, 2100-01-01 is not
        assert sample_caller.is_expired()
        assert not full_caller.is_expired()
