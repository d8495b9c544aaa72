"""Normalisation of user-supplied world seeds."""

from __future__ import annotations

import re

from .errors import InvalidSeedFormat
from .java_random import to_signed64

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

NUMERIC_SEED_PAT = re.compile(r"[+-]?[0-9]+")


def java_string_hash(text: str) -> int:
    """Return Java's ``String.hashCode`` for ``text`` (signed 32-bit)."""
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    value = 0
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        value = (31 * value + unit) & 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def normalize_seed(raw: str) -> int:
    """Convert a seed as typed by a player into the signed 64-bit world seed.

    Decimal integers inside the 64-bit range are used as-is. Anything else,
    including numbers that overflow a long, is hashed the way the game hashes
    text seeds. Only an empty (or blank) string is rejected.
    """
    text = raw.strip()
    if not text:
        raise InvalidSeedFormat("Seed must not be empty")

    if NUMERIC_SEED_PAT.fullmatch(text):
        value = int(text)
        if _INT64_MIN <= value <= _INT64_MAX:
            return value

    return to_signed64(java_string_hash(text))
