"""Time-sortable id generation for new entities."""

from __future__ import annotations

import secrets
import time

# ULID base32 alphabet (Crockford's)
_ENCODING = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_ENCODING_LEN = len(_ENCODING)


def _encode_base32(value: int, length: int) -> str:
    """Encode integer to base32 string of fixed length."""
    result = []
    for _ in range(length):
        result.append(_ENCODING[value % _ENCODING_LEN])
        value //= _ENCODING_LEN
    return "".join(reversed(result))


def generate_ulid() -> str:
    """
    Generate a ULID-like identifier.

    Format: 26 characters, base32 encoded, time-sortable. Fits the
    ``VARCHAR(32)`` id columns created by the JSON persistence.
    """
    # Time component: milliseconds since epoch (48 bits -> 10 chars)
    timestamp_chars = _encode_base32(int(time.time() * 1000), 10)

    # Random component (80 bits -> 16 chars)
    random_part = "".join(secrets.choice(_ENCODING) for _ in range(16))

    return timestamp_chars + random_part


class UlidGenerator:
    """Default id generator used by identifiable persistences."""

    def next_id(self) -> str:
        return generate_ulid()


class SequenceIdGenerator:
    """Deterministic ``<prefix><n>`` ids, handy in tests and fixtures."""

    def __init__(self, prefix: str = "id", start: int = 1):
        self._prefix = prefix
        self._next = start

    def next_id(self) -> str:
        value = f"{self._prefix}{self._next}"
        self._next += 1
        return value


__all__ = [
    "generate_ulid",
    "UlidGenerator",
    "SequenceIdGenerator",
]
