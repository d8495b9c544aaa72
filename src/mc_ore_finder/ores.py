"""Ore profiles and the density model that turns them into per-block probabilities."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .java_random import chunk_random, coordinate_random, to_signed64
from .models import Biome, Dimension, OreType
from .noise import noise_field
from .seed import java_string_hash

_SALTS = {ore: java_string_hash(ore.value) for ore in OreType}

CHUNK_WEIGHT = 0.3
COORDINATE_WEIGHT = 0.2
NOISE_WEIGHT = 0.3
# The remaining 0.2 keeps the combined factor strictly below 1.0.
HEADROOM = 1.0 - (CHUNK_WEIGHT + COORDINATE_WEIGHT + NOISE_WEIGHT)

NETHERITE_RARITY = 0.8


@dataclass(frozen=True, slots=True)
class Band:
    min_y: int
    max_y: int
    base: float

    def contains(self, y: int) -> bool:
        return self.min_y <= y <= self.max_y


@dataclass(frozen=True, slots=True)
class BiomeBonus:
    biome: Biome
    multiplier: float
    min_y: int
    max_y: int


@dataclass(frozen=True, slots=True)
class OreProfile:
    ore: OreType
    min_y: int
    max_y: int
    bands: tuple[Band, ...]
    y_step: int
    noise_scale: tuple[float, float, float]
    octaves: int = 3
    persistence: float = 0.5
    dimension: Dimension = Dimension.overworld
    bonuses: tuple[BiomeBonus, ...] = ()
    rarity_multiplier: float = 1.0

    @property
    def salt(self) -> int:
        return _SALTS[self.ore]

    def band_for(self, y: int) -> Band | None:
        for band in self.bands:
            if band.contains(y):
                return band
        return None

    def y_levels(self, step: int | None = None) -> range:
        return range(self.min_y, self.max_y + 1, step or self.y_step)


ORE_PROFILES: dict[OreType, OreProfile] = {
    OreType.diamond: OreProfile(
        ore=OreType.diamond,
        min_y=-64,
        max_y=16,
        bands=(
            Band(-64, -54, 0.8),
            Band(-53, -48, 0.6),
            Band(-47, -32, 0.4),
            Band(-31, 16, 0.2),
        ),
        y_step=4,
        noise_scale=(0.01, 0.02, 0.01),
    ),
    OreType.gold: OreProfile(
        ore=OreType.gold,
        min_y=-64,
        max_y=256,
        bands=(
            Band(-64, -48, 0.4),
            Band(-47, -16, 0.6),
            Band(-15, 32, 0.3),
            Band(33, 256, 0.05),
        ),
        y_step=4,
        noise_scale=(0.008, 0.015, 0.008),
        persistence=0.6,
        bonuses=(BiomeBonus(Biome.badlands, 6.0, 32, 256),),
    ),
    OreType.netherite: OreProfile(
        ore=OreType.netherite,
        min_y=8,
        max_y=22,
        bands=(
            Band(8, 9, 0.5),
            Band(10, 12, 0.7),
            Band(13, 17, 0.9),
            Band(18, 19, 0.7),
            Band(20, 22, 0.5),
        ),
        y_step=1,
        noise_scale=(0.005, 0.03, 0.005),
        octaves=2,
        persistence=0.7,
        dimension=Dimension.nether,
        rarity_multiplier=NETHERITE_RARITY,
    ),
    OreType.iron: OreProfile(
        ore=OreType.iron,
        min_y=-64,
        max_y=256,
        bands=(
            Band(-64, -25, 0.4),
            Band(-24, -5, 0.6),
            Band(-4, 34, 0.9),
            Band(35, 56, 0.6),
            Band(57, 127, 0.3),
            Band(128, 199, 0.5),
            Band(200, 256, 0.8),
        ),
        y_step=8,
        noise_scale=(0.012, 0.008, 0.012),
        octaves=4,
    ),
    OreType.redstone: OreProfile(
        ore=OreType.redstone,
        min_y=-64,
        max_y=15,
        bands=(
            Band(-64, -59, 0.9),
            Band(-58, -48, 0.7),
            Band(-47, -32, 0.5),
            Band(-31, 15, 0.3),
        ),
        y_step=4,
        noise_scale=(0.009, 0.02, 0.009),
    ),
    OreType.coal: OreProfile(
        ore=OreType.coal,
        min_y=0,
        max_y=256,
        bands=(
            Band(0, 79, 0.6),
            Band(80, 89, 0.75),
            Band(90, 102, 0.9),
            Band(103, 136, 0.75),
            Band(137, 256, 0.6),
        ),
        y_step=8,
        noise_scale=(0.015, 0.01, 0.015),
        persistence=0.6,
    ),
    OreType.lapis: OreProfile(
        ore=OreType.lapis,
        min_y=-64,
        max_y=64,
        bands=(
            Band(-64, -33, 0.3),
            Band(-32, -9, 0.6),
            Band(-8, 8, 0.8),
            Band(9, 32, 0.6),
            Band(33, 64, 0.3),
        ),
        y_step=4,
        noise_scale=(0.01, 0.02, 0.01),
    ),
}

# Profiles used instead of ORE_PROFILES when the biome label is nether.
NETHER_ORE_PROFILES: dict[OreType, OreProfile] = {
    OreType.gold: OreProfile(
        ore=OreType.gold,
        min_y=10,
        max_y=117,
        bands=(Band(10, 117, 0.8),),
        y_step=4,
        noise_scale=(0.008, 0.015, 0.008),
        persistence=0.6,
        dimension=Dimension.nether,
    ),
}


def profile_for(ore: OreType, biome: Biome) -> OreProfile:
    if biome is Biome.nether and ore in NETHER_ORE_PROFILES:
        return NETHER_ORE_PROFILES[ore]
    return ORE_PROFILES[ore]


def check_band_partition(profile: OreProfile) -> None:
    """Raise ``ValueError`` unless the bands tile ``[min_y, max_y]`` exactly, in order."""
    expected = profile.min_y
    for band in profile.bands:
        if band.min_y != expected or band.max_y < band.min_y:
            raise ValueError(f"{profile.ore.value}: band {band} does not start at Y={expected}")
        expected = band.max_y + 1
    if expected != profile.max_y + 1:
        raise ValueError(f"{profile.ore.value}: bands end at Y={expected - 1}, expected {profile.max_y}")


for _profile in (*ORE_PROFILES.values(), *NETHER_ORE_PROFILES.values()):
    check_band_partition(_profile)


def ore_biome(profile: OreProfile, biome: Biome) -> bool:
    """Whether ``biome`` belongs to the dimension the ore generates in."""
    if profile.dimension is Dimension.nether:
        return biome is Biome.nether
    if profile.dimension is Dimension.end:
        return biome is Biome.end
    return biome not in (Biome.nether, Biome.end)


@lru_cache(maxsize=4096)
def _chunk_roll(seed: int, salt: int, chunk_x: int, chunk_z: int) -> float:
    """Per-chunk term shared by every block of a column scan."""
    return chunk_random(to_signed64(seed ^ salt), chunk_x, chunk_z).next_double()


class OreDensityModel:
    """Composite density function: Y band, chunk roll, block roll, vein noise, biome bonus."""

    def probability(self, seed: int, ore: OreType, x: int, y: int, z: int, biome: Biome) -> float:
        profile = profile_for(ore, biome)
        if y < profile.min_y or y > profile.max_y:
            return 0.0
        if not ore_biome(profile, biome):
            return 0.0

        band = profile.band_for(y)
        if band is None:
            return 0.0

        salt = profile.salt
        chunk_term = _chunk_roll(seed, salt, x // 16, z // 16)
        coordinate_term = coordinate_random(seed, x, y, z, salt).next_double()
        sx, sy, sz = profile.noise_scale
        vein = noise_field(seed).octave(x * sx, y * sy, z * sz, profile.octaves, profile.persistence)
        noise_term = (vein + 1.0) / 2.0

        factor = CHUNK_WEIGHT * chunk_term + COORDINATE_WEIGHT * coordinate_term + NOISE_WEIGHT * noise_term
        probability = band.base * factor

        for bonus in profile.bonuses:
            if bonus.biome is biome and bonus.min_y <= y <= bonus.max_y:
                probability *= bonus.multiplier
        probability = min(1.0, max(0.0, probability))

        return probability * profile.rarity_multiplier


_MODEL = OreDensityModel()


def probability(seed: int, ore: OreType, x: int, y: int, z: int, biome: Biome) -> float:
    return _MODEL.probability(seed, ore, x, y, z, biome)
