"""Seeded lattice-gradient noise used to give ore densities a vein-like shape."""

from __future__ import annotations

import math
from functools import lru_cache

from .java_random import JavaRandom

# Blocks to lattice units; y varies faster so veins stay flat.
DEFAULT_SCALE = (0.01, 0.02, 0.01)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(t: float, a: float, b: float) -> float:
    return a + t * (b - a)


def _grad(hash_value: int, x: float, y: float, z: float) -> float:
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h in (12, 14):
        v = x
    else:
        v = z
    return (u if h & 1 == 0 else -u) + (v if h & 2 == 0 else -v)


class PerlinNoise:
    """Improved Perlin noise whose permutation table is shuffled by a :class:`JavaRandom`."""

    __slots__ = ("_perm",)

    def __init__(self, seed: int) -> None:
        random = JavaRandom(seed)
        table = list(range(256))
        for i in range(255, 0, -1):
            j = random.next_int(i + 1)
            table[i], table[j] = table[j], table[i]
        self._perm: tuple[int, ...] = tuple(table + table)

    def noise3d(self, x: float, y: float, z: float) -> float:
        p = self._perm
        fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)
        xi, yi, zi = fx & 255, fy & 255, fz & 255
        x -= fx
        y -= fy
        z -= fz

        u, v, w = _fade(x), _fade(y), _fade(z)

        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        return _lerp(
            w,
            _lerp(
                v,
                _lerp(u, _grad(p[aa], x, y, z), _grad(p[ba], x - 1, y, z)),
                _lerp(u, _grad(p[ab], x, y - 1, z), _grad(p[bb], x - 1, y - 1, z)),
            ),
            _lerp(
                v,
                _lerp(u, _grad(p[aa + 1], x, y, z - 1), _grad(p[ba + 1], x - 1, y, z - 1)),
                _lerp(u, _grad(p[ab + 1], x, y - 1, z - 1), _grad(p[bb + 1], x - 1, y - 1, z - 1)),
            ),
        )


class NoiseField:
    """Noise sampler for one world seed, clamped to ``[-1, 1]``.

    :meth:`sample` takes block coordinates and applies ``scale`` itself;
    :meth:`octave` takes coordinates that are already scaled.
    """

    __slots__ = ("seed", "scale", "_perlin")

    def __init__(self, seed: int, scale: tuple[float, float, float] = DEFAULT_SCALE) -> None:
        self.seed = seed
        self.scale = scale
        self._perlin = PerlinNoise(seed)

    def sample(self, x: float, y: float, z: float) -> float:
        sx, sy, sz = self.scale
        return max(-1.0, min(1.0, self._perlin.noise3d(x * sx, y * sy, z * sz)))

    def octave(self, x: float, y: float, z: float, octaves: int = 3, persistence: float = 0.5) -> float:
        """Sum ``octaves`` doubling frequencies, normalised by the total amplitude."""
        total = 0.0
        amplitude = 1.0
        frequency = 1.0
        max_value = 0.0
        for _ in range(octaves):
            total += self._perlin.noise3d(x * frequency, y * frequency, z * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency *= 2
        return max(-1.0, min(1.0, total / max_value))


@lru_cache(maxsize=32)
def noise_field(seed: int) -> NoiseField:
    """Shared, immutable field for ``seed``; building the permutation is the costly part."""
    return NoiseField(seed)


def sample(seed: int, x: float, y: float, z: float) -> float:
    return noise_field(seed).sample(x, y, z)
