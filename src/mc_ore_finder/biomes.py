"""Coarse, seed-derived biome estimation per chunk.

Biomes are rolled once per region of ``REGION_CHUNKS`` x ``REGION_CHUNKS`` chunks,
so neighbouring chunks share a label and the map shows contiguous patches.
"""

from __future__ import annotations

from .java_random import CHUNK_X_MULTIPLIER, CHUNK_Z_MULTIPLIER, JavaRandom, to_signed64
from .models import Biome, Dimension

REGION_CHUNKS = 4
BIOME_SALT = 0x2B4A5E1

# Share of chunks that land in the gold-rich bonus biome.
BADLANDS_FREQUENCY = 0.05

BIOME_WEIGHTS: tuple[tuple[Biome, float], ...] = (
    (Biome.desert, 0.12),
    (Biome.jungle, 0.10),
    (Biome.ocean, 0.10),
    (Biome.swamp, 0.08),
    (Biome.taiga, 0.10),
    (Biome.savanna, 0.10),
    (Biome.badlands, BADLANDS_FREQUENCY),
    (Biome.forest, 0.12),
    (Biome.mountains, 0.10),
    (Biome.plains, 0.13),
)


def _thresholds() -> tuple[tuple[float, Biome], ...]:
    total = 0.0
    thresholds = []
    for biome, weight in BIOME_WEIGHTS:
        total += weight
        thresholds.append((total, biome))
    return tuple(thresholds)


_THRESHOLDS = _thresholds()


def region_of(chunk_x: int, chunk_z: int) -> tuple[int, int]:
    return chunk_x // REGION_CHUNKS, chunk_z // REGION_CHUNKS


def classify(seed: int, chunk_x: int, chunk_z: int, dimension: Dimension = Dimension.overworld) -> Biome:
    """Return the biome label of a chunk; always the same for the same seed and chunk."""
    if dimension is Dimension.nether:
        return Biome.nether
    if dimension is Dimension.end:
        return Biome.end

    region_x, region_z = region_of(chunk_x, chunk_z)
    mixed = seed ^ (region_x * CHUNK_X_MULTIPLIER + region_z * CHUNK_Z_MULTIPLIER + BIOME_SALT)
    roll = JavaRandom(to_signed64(mixed)).next_double()

    for threshold, biome in _THRESHOLDS:
        if roll < threshold:
            return biome
    return Biome.unknown


NETHER_REGION_BLOCKS = 128
NETHER_SALT = 0x3C6EF35
# Share of regions that also search nether gold when a request includes the nether.
NETHER_REGION_FREQUENCY = 0.2


def is_nether_region(seed: int, x: int, z: int) -> bool:
    """Whether block column ``(x, z)`` lies in a region rolled as nether."""
    region_x, region_z = x // NETHER_REGION_BLOCKS, z // NETHER_REGION_BLOCKS
    mixed = seed ^ (region_x * CHUNK_X_MULTIPLIER + region_z * CHUNK_Z_MULTIPLIER + NETHER_SALT)
    return JavaRandom(to_signed64(mixed)).next_double() >= 1.0 - NETHER_REGION_FREQUENCY
