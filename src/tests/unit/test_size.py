"""Tests for capacity parsing."""

import pytest

from openvolume.errors import ErrorCode, InvalidSizeError
from openvolume.runtime.size import MAX_SIZE_BYTES, parse_size, resolve_size


class TestParseSize:
    """Tests for parse_size."""

    @pytest.mark.parametrize("value", ["1", "1073741824", "+42", str(MAX_SIZE_BYTES)])
    def test_valid_byte_counts(self, value: str) -> None:
        """Positive base-10 integers parse to themselves."""
        assert parse_size(value) == int(value)

    @pytest.mark.parametrize("value", ["0", "-1", "-1073741824", "+0"])
    def test_non_positive_rejected(self, value: str) -> None:
        with pytest.raises(InvalidSizeError) as exc_info:
            parse_size(value)
        assert exc_info.value.code == ErrorCode.INVALID_SIZE

    @pytest.mark.parametrize("value", ["", "abc", "1G", "1.5", " 10", "1_000", "0x10", "١٢"])
    def test_non_numeric_rejected(self, value: str) -> None:
        """Anything but plain ASCII digits is rejected, unit suffixes included."""
        with pytest.raises(InvalidSizeError):
            parse_size(value)

    def test_too_large_rejected(self) -> None:
        with pytest.raises(InvalidSizeError, match="too large"):
            parse_size(str(MAX_SIZE_BYTES + 1))


class TestResolveSize:
    """Tests for resolve_size."""

    def test_option_wins_over_default(self) -> None:
        assert resolve_size("2048", "1024") == 2048

    def test_default_used_when_option_missing(self) -> None:
        assert resolve_size(None, "1024") == 1024

    def test_empty_option_does_not_fall_back(self) -> None:
        """An explicit empty option is still an explicit option."""
        with pytest.raises(InvalidSizeError):
            resolve_size("", "1024")

    def test_invalid_default_rejected(self) -> None:
        with pytest.raises(InvalidSizeError):
            resolve_size(None, "ten gigabytes")

    def test_nothing_to_resolve(self) -> None:
        with pytest.raises(InvalidSizeError, match="no size option"):
            resolve_size(None, None)
