"""Capacity string parsing."""

import re

from openvolume.errors import InvalidSizeError

# Largest length truncate(1) accepts (off_t)
MAX_SIZE_BYTES = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_size(value: str) -> int:
    """Parse a base-10 byte count.

    Raises:
        InvalidSizeError: Not an integer, not positive, or too large.
    """
    if not _INTEGER.fullmatch(value):
        raise InvalidSizeError(f"Invalid size specified: {value!r} is not a byte count")

    size = int(value)
    if size <= 0:
        raise InvalidSizeError(f"Invalid size specified: {value!r} must be greater than zero")
    if size > MAX_SIZE_BYTES:
        raise InvalidSizeError(f"Invalid size specified: {value!r} is too large")
    return size


def resolve_size(option: str | None, default: str | None) -> int:
    """Resolve the capacity for a request.

    An explicit option wins, even when it is empty; otherwise the configured
    default is used.
    """
    value = option if option is not None else default
    if value is None:
        raise InvalidSizeError("Invalid size specified: no size option given")
    return parse_size(value)
