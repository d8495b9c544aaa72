from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .seed import normalize_seed


class Dimension(str, Enum):
    overworld = "overworld"
    nether = "nether"
    end = "end"


class Biome(str, Enum):
    """Coarse biome labels produced by the estimator."""

    plains = "plains"
    desert = "desert"
    jungle = "jungle"
    ocean = "ocean"
    swamp = "swamp"
    taiga = "taiga"
    savanna = "savanna"
    badlands = "badlands"
    forest = "forest"
    mountains = "mountains"
    nether = "nether"
    end = "end"
    unknown = "unknown"


class OreType(str, Enum):
    diamond = "diamond"
    gold = "gold"
    netherite = "netherite"
    iron = "iron"
    redstone = "redstone"
    coal = "coal"
    lapis = "lapis"


class StructureType(str, Enum):
    village = "village"
    stronghold = "stronghold"
    end_city = "end_city"
    nether_fortress = "nether_fortress"
    bastion_remnant = "bastion_remnant"
    ancient_city = "ancient_city"
    ocean_monument = "ocean_monument"
    woodland_mansion = "woodland_mansion"
    pillager_outpost = "pillager_outpost"
    ruined_portal = "ruined_portal"
    shipwreck = "shipwreck"
    buried_treasure = "buried_treasure"
    desert_temple = "desert_temple"
    jungle_temple = "jungle_temple"
    witch_hut = "witch_hut"


class Rarity(str, Enum):
    """Display-only rarity class of a structure."""

    very_common = "very common"
    common = "common"
    uncommon = "uncommon"
    rare = "rare"
    very_rare = "very rare"


@dataclass(frozen=True, slots=True)
class Coordinate:
    x: int
    y: int
    z: int

    @property
    def chunk_x(self) -> int:
        return self.x // 16

    @property
    def chunk_z(self) -> int:
        return self.z // 16

    def distance_sq(self, other: Coordinate) -> int:
        return (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2


@dataclass(frozen=True, slots=True)
class OreLocation:
    """A predicted ore sample."""

    x: int
    y: int
    z: int
    chunk_x: int
    chunk_z: int
    ore: OreType
    probability: float
    biome: Biome

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.x, self.y, self.z)

    @property
    def kind(self) -> str:
        return self.ore.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "chunk_x": self.chunk_x,
            "chunk_z": self.chunk_z,
            "ore": self.ore.value,
            "probability": self.probability,
            "biome": self.biome.value,
        }


@dataclass(frozen=True, slots=True)
class StructureLocation:
    """A predicted structure at the centre block of its chunk."""

    x: int
    y: int
    z: int
    chunk_x: int
    chunk_z: int
    structure: StructureType
    probability: float
    biome: Biome

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.x, self.y, self.z)

    @property
    def kind(self) -> str:
        return self.structure.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "chunk_x": self.chunk_x,
            "chunk_z": self.chunk_z,
            "structure": self.structure.value,
            "probability": self.probability,
            "biome": self.biome.value,
        }


def ranking_key(location: OreLocation | StructureLocation, center: Coordinate) -> tuple:
    """Sort key: probability descending, then distance from ``center``, then position, then type."""
    return (
        -location.probability,
        location.coordinate.distance_sq(center),
        location.x,
        location.y,
        location.z,
        location.kind,
    )


@dataclass(frozen=True, slots=True)
class SearchRequest:
    seed: int
    center: Coordinate
    radius: int
    ore_types: frozenset[OreType] = field(default_factory=frozenset)
    structure_types: frozenset[StructureType] = field(default_factory=frozenset)
    comprehensive: bool = False
    include_nether: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "ore_types", frozenset(OreType(o) for o in self.ore_types))
        object.__setattr__(
            self, "structure_types", frozenset(StructureType(s) for s in self.structure_types)
        )

    @classmethod
    def from_input(
        cls,
        *,
        seed: str,
        x: int,
        y: int,
        z: int,
        radius: int,
        ore_types: Iterable[OreType | str] = (),
        structure_types: Iterable[StructureType | str] = (),
        comprehensive: bool = False,
        include_nether: bool = False,
    ) -> SearchRequest:
        """Build a request from raw caller input, normalising the seed text."""
        return cls(
            seed=normalize_seed(seed),
            center=Coordinate(x, y, z),
            radius=radius,
            ore_types=frozenset(ore_types),
            structure_types=frozenset(structure_types),
            comprehensive=comprehensive,
            include_nether=include_nether,
        )


@dataclass(frozen=True, slots=True)
class SearchResult:
    center: Coordinate
    ores: tuple[OreLocation, ...] = ()
    structures: tuple[StructureLocation, ...] = ()

    def combined(self) -> list[OreLocation | StructureLocation]:
        """Ores and structures merged under the same ranking rule."""
        return sorted([*self.ores, *self.structures], key=lambda loc: ranking_key(loc, self.center))

    def to_dict(self) -> dict[str, Any]:
        return {
            "center": {"x": self.center.x, "y": self.center.y, "z": self.center.z},
            "ores": [ore.to_dict() for ore in self.ores],
            "structures": [structure.to_dict() for structure in self.structures],
        }


@dataclass(slots=True)
class NetheriteStats:
    total_locations: int
    average_probability: float
    max_probability: float
    search_area: str
