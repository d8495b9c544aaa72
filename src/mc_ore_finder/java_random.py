"""Java-compatible ``java.util.Random`` and the seed-mixing helpers built on it."""

from __future__ import annotations

from functools import lru_cache

_MULTIPLIER = 0x5DEECE66D
_ADDEND = 0xB
_MASK = (1 << 48) - 1

_INT_MAX = (1 << 31) - 1
_DOUBLE_UNIT = 1.0 / (1 << 53)
_FLOAT_UNIT = 1.0 / (1 << 24)

CHUNK_X_MULTIPLIER = 341873128
CHUNK_Z_MULTIPLIER = 132897987
Y_MULTIPLIER = 268582165


def to_signed64(value: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    value &= (1 << 64) - 1
    return value - (1 << 64) if value >= 1 << 63 else value


def _to_signed32(value: int) -> int:
    value &= (1 << 32) - 1
    return value - (1 << 32) if value >= 1 << 31 else value


class JavaRandom:
    """48-bit linear congruential generator, bit-identical to ``java.util.Random``."""

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = 0
        self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        self._state = (seed ^ _MULTIPLIER) & _MASK

    def _next(self, bits: int) -> int:
        self._state = (self._state * _MULTIPLIER + _ADDEND) & _MASK
        return _to_signed32(self._state >> (48 - bits))

    def next_int(self, bound: int | None = None) -> int:
        """Return the next int, uniformly in ``[0, bound)`` when a bound is given."""
        if bound is None:
            return self._next(32)
        if bound <= 0:
            raise ValueError("bound must be positive")

        if bound & -bound == bound:
            return (bound * self._next(31)) >> 31

        while True:
            bits = self._next(31)
            value = bits % bound
            # Java rejects when this sum overflows a signed 32-bit int.
            if bits - value + (bound - 1) <= _INT_MAX:
                return value

    def next_long(self) -> int:
        return to_signed64((self._next(32) << 32) + self._next(32))

    def next_double(self) -> float:
        return ((self._next(26) << 27) + self._next(27)) * _DOUBLE_UNIT

    def next_float(self) -> float:
        return self._next(24) * _FLOAT_UNIT

    def next_bool(self) -> bool:
        return self._next(1) != 0


@lru_cache(maxsize=64)
def world_long(seed: int) -> int:
    """First ``next_long`` of the world seed; every chunk stream is mixed from it."""
    return JavaRandom(seed).next_long()


def chunk_random(seed: int, chunk_x: int, chunk_z: int) -> JavaRandom:
    """Random stream for one chunk: the world seed's first long mixed with the chunk position."""
    mixed = world_long(seed) ^ (chunk_x * CHUNK_X_MULTIPLIER + chunk_z * CHUNK_Z_MULTIPLIER)
    return JavaRandom(to_signed64(mixed))


def coordinate_random(seed: int, x: int, y: int, z: int, salt: int = 0) -> JavaRandom:
    """Random stream for a single block, decorrelated across ore types by ``salt``."""
    mixed = seed ^ (x * CHUNK_X_MULTIPLIER + z * CHUNK_Z_MULTIPLIER + y * Y_MULTIPLIER + salt)
    return JavaRandom(to_signed64(mixed))
