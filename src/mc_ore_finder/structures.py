"""Structure profiles and the spacing-grid placement model.

The chunk plane is cut into square cells of ``spacing`` chunks. Every cell owns
exactly one candidate chunk, offset from the cell corner by a seeded roll in
``[0, spacing - separation)`` on each axis, which gives the regular-but-offset
pattern structures show in game. A candidate only hosts the structure when its
biome is allowed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .biomes import classify
from .java_random import CHUNK_X_MULTIPLIER, CHUNK_Z_MULTIPLIER, JavaRandom, to_signed64
from .models import Biome, Dimension, Rarity, StructureLocation, StructureType

REGION_X_MULTIPLIER = 341873128712
REGION_Z_MULTIPLIER = 132897987541

_SURFACE_BIOMES = frozenset({Biome.plains, Biome.desert, Biome.savanna, Biome.taiga})


@dataclass(frozen=True, slots=True)
class StructureProfile:
    structure: StructureType
    name: str
    spacing: int
    separation: int
    salt: int
    y: int
    base_probability: float
    rarity: Rarity
    biomes: frozenset[Biome] | None = None
    dimension: Dimension = Dimension.overworld
    biome_modifiers: dict[Biome, float] = field(default_factory=dict)

    @property
    def jitter(self) -> int:
        """Width of the candidate offset range inside a cell."""
        return self.spacing - self.separation

    def allows(self, biome: Biome) -> bool:
        if self.dimension is Dimension.nether:
            return biome is Biome.nether
        if self.dimension is Dimension.end:
            return biome is Biome.end
        return self.biomes is None or biome in self.biomes


def _profile(
    structure: StructureType,
    name: str,
    spacing: int,
    salt: int,
    y: int,
    base: float,
    rarity: Rarity,
    **kwargs,
) -> StructureProfile:
    return StructureProfile(
        structure=structure,
        name=name,
        spacing=spacing,
        separation=spacing // 4,
        salt=salt,
        y=y,
        base_probability=base,
        rarity=rarity,
        **kwargs,
    )


STRUCTURE_PROFILES: dict[StructureType, StructureProfile] = {
    p.structure: p
    for p in (
        _profile(
            StructureType.village, "Village", 32, 10387312, 64, 0.6, Rarity.common,
            biomes=_SURFACE_BIOMES,
            biome_modifiers={Biome.plains: 1.2, Biome.desert: 1.2, Biome.savanna: 1.2},
        ),
        _profile(StructureType.stronghold, "Stronghold", 128, 10387311, -20, 0.15, Rarity.rare),
        _profile(StructureType.end_city, "End City", 24, 10387313, 60, 0.25, Rarity.rare, dimension=Dimension.end),
        _profile(
            StructureType.nether_fortress, "Nether Fortress", 24, 30084232, 64, 0.4, Rarity.uncommon,
            dimension=Dimension.nether,
        ),
        _profile(
            StructureType.bastion_remnant, "Bastion Remnant", 24, 30084233, 64, 0.35, Rarity.uncommon,
            dimension=Dimension.nether,
        ),
        _profile(StructureType.ancient_city, "Ancient City", 96, 20083232, -52, 0.08, Rarity.very_rare),
        _profile(
            StructureType.ocean_monument, "Ocean Monument", 64, 10387314, 40, 0.2, Rarity.rare,
            biomes=frozenset({Biome.ocean}),
            biome_modifiers={Biome.ocean: 1.3},
        ),
        _profile(
            StructureType.woodland_mansion, "Woodland Mansion", 256, 10387319, 80, 0.05, Rarity.very_rare,
            biomes=frozenset({Biome.forest}),
        ),
        _profile(
            StructureType.pillager_outpost, "Pillager Outpost", 48, 165745296, 64, 0.5, Rarity.common,
            biomes=_SURFACE_BIOMES,
        ),
        _profile(StructureType.ruined_portal, "Ruined Portal", 24, 34222645, 64, 0.8, Rarity.very_common),
        _profile(
            StructureType.shipwreck, "Shipwreck", 24, 165745295, 50, 0.7, Rarity.common,
            biomes=frozenset({Biome.ocean}),
        ),
        _profile(
            StructureType.buried_treasure, "Buried Treasure", 24, 10387320, 55, 0.4, Rarity.uncommon,
            biomes=frozenset({Biome.ocean}),
        ),
        _profile(
            StructureType.desert_temple, "Desert Temple", 24, 14357617, 64, 0.3, Rarity.uncommon,
            biomes=frozenset({Biome.desert}),
            biome_modifiers={Biome.desert: 1.5},
        ),
        _profile(
            StructureType.jungle_temple, "Jungle Temple", 24, 14357619, 64, 0.25, Rarity.rare,
            biomes=frozenset({Biome.jungle}),
            biome_modifiers={Biome.jungle: 1.5},
        ),
        _profile(
            StructureType.witch_hut, "Witch Hut", 24, 14357620, 64, 0.2, Rarity.rare,
            biomes=frozenset({Biome.swamp}),
            biome_modifiers={Biome.swamp: 1.5},
        ),
    )
}

_STRUCTURE_INDEX = {structure: index for index, structure in enumerate(StructureType)}


def _chebyshev(ax: int, az: int, bx: int, bz: int) -> int:
    return max(abs(ax - bx), abs(az - bz))


class StructureSpacingModel:
    """Deterministic spacing-grid placement with biome gating and a seeded strength roll."""

    def cell_of(self, structure: StructureType, chunk_x: int, chunk_z: int) -> tuple[int, int]:
        spacing = STRUCTURE_PROFILES[structure].spacing
        return chunk_x // spacing, chunk_z // spacing

    def candidate(self, seed: int, structure: StructureType, cell_x: int, cell_z: int) -> tuple[int, int]:
        """The single chunk of grid cell ``(cell_x, cell_z)`` allowed to host ``structure``."""
        profile = STRUCTURE_PROFILES[structure]
        region_seed = cell_x * REGION_X_MULTIPLIER + cell_z * REGION_Z_MULTIPLIER + seed + profile.salt
        random = JavaRandom(to_signed64(region_seed))
        offset_x = random.next_int(profile.jitter)
        offset_z = random.next_int(profile.jitter)
        return cell_x * profile.spacing + offset_x, cell_z * profile.spacing + offset_z

    def nearest_candidate(self, seed: int, structure: StructureType, chunk_x: int, chunk_z: int) -> tuple[int, int]:
        """Closest grid candidate (Chebyshev) among the query's cell and its eight neighbours."""
        cell_x, cell_z = self.cell_of(structure, chunk_x, chunk_z)
        candidates = [
            self.candidate(seed, structure, cell_x + dx, cell_z + dz) for dx in (-1, 0, 1) for dz in (-1, 0, 1)
        ]
        return min(candidates, key=lambda c: _chebyshev(c[0], c[1], chunk_x, chunk_z))

    def biome_at(self, seed: int, structure: StructureType, chunk_x: int, chunk_z: int) -> Biome:
        return classify(seed, chunk_x, chunk_z, STRUCTURE_PROFILES[structure].dimension)

    def candidate_probability(self, seed: int, structure: StructureType, chunk_x: int, chunk_z: int) -> float:
        """Probability that a known grid candidate actually hosts ``structure``; 0 when ineligible."""
        profile = STRUCTURE_PROFILES[structure]
        biome = self.biome_at(seed, structure, chunk_x, chunk_z)
        if not profile.allows(biome):
            return 0.0

        mixed = seed ^ (
            chunk_x * CHUNK_X_MULTIPLIER + chunk_z * CHUNK_Z_MULTIPLIER + _STRUCTURE_INDEX[structure] * 1_000_000
        )
        strength = 0.6 + JavaRandom(to_signed64(mixed)).next_double() * 0.8
        probability = profile.base_probability * strength * profile.biome_modifiers.get(biome, 1.0)
        return min(1.0, probability)

    def evaluate(
        self,
        seed: int,
        structure: StructureType,
        chunk_x: int,
        chunk_z: int,
        tolerance: int = 0,
    ) -> float:
        cx, cz = self.nearest_candidate(seed, structure, chunk_x, chunk_z)
        if _chebyshev(cx, cz, chunk_x, chunk_z) > tolerance:
            return 0.0
        return self.candidate_probability(seed, structure, cx, cz)

    def locate(
        self,
        seed: int,
        structure: StructureType,
        chunk_x: int,
        chunk_z: int,
        tolerance: int = 0,
    ) -> StructureLocation | None:
        """Like :meth:`evaluate`, but reports the matched candidate chunk."""
        cx, cz = self.nearest_candidate(seed, structure, chunk_x, chunk_z)
        if _chebyshev(cx, cz, chunk_x, chunk_z) > tolerance:
            return None
        return self._location(seed, structure, cx, cz)

    def nearest(
        self,
        seed: int,
        structure: StructureType,
        chunk_x: int,
        chunk_z: int,
        max_cells: int = 8,
    ) -> StructureLocation | None:
        """Closest eligible instance to a chunk, scanning grid cells ring by ring."""
        profile = STRUCTURE_PROFILES[structure]
        cell_x, cell_z = self.cell_of(structure, chunk_x, chunk_z)
        best: StructureLocation | None = None
        best_distance = math.inf

        for ring in range(max_cells + 1):
            if best is not None and best_distance <= (ring - 1) * profile.spacing:
                break
            for dx in range(-ring, ring + 1):
                for dz in range(-ring, ring + 1):
                    if max(abs(dx), abs(dz)) != ring:
                        continue
                    cx, cz = self.candidate(seed, structure, cell_x + dx, cell_z + dz)
                    location = self._location(seed, structure, cx, cz)
                    if location is None:
                        continue
                    distance = math.dist((cx, cz), (chunk_x, chunk_z))
                    if distance < best_distance:
                        best, best_distance = location, distance
        return best

    def _location(self, seed: int, structure: StructureType, chunk_x: int, chunk_z: int) -> StructureLocation | None:
        probability = self.candidate_probability(seed, structure, chunk_x, chunk_z)
        if probability <= 0.0:
            return None
        return StructureLocation(
            x=chunk_x * 16 + 8,
            y=STRUCTURE_PROFILES[structure].y,
            z=chunk_z * 16 + 8,
            chunk_x=chunk_x,
            chunk_z=chunk_z,
            structure=structure,
            probability=round(probability, 2),
            biome=self.biome_at(seed, structure, chunk_x, chunk_z),
        )


_MODEL = StructureSpacingModel()


def evaluate(seed: int, structure: StructureType, chunk_x: int, chunk_z: int, tolerance: int = 0) -> float:
    return _MODEL.evaluate(seed, structure, chunk_x, chunk_z, tolerance)
