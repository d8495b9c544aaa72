from __future__ import annotations

import asyncio
import itertools

import pytest

from mc_ore_finder.biomes import NETHER_REGION_BLOCKS, is_nether_region
from mc_ore_finder.config import Settings
from mc_ore_finder.errors import InvalidSearchRequest, SearchCancelled
from mc_ore_finder.models import Biome, Coordinate, OreType, SearchRequest, StructureType, ranking_key
from mc_ore_finder.search import CancellationToken, SearchEngine, netherite_stats, run_search
from mc_ore_finder.seed import normalize_seed
from mc_ore_finder.structures import STRUCTURE_PROFILES, StructureSpacingModel

SEED = "8674308105921866736"


def _request(**overrides) -> SearchRequest:
    params = {"seed": SEED, "x": 0, "y": -59, "z": 0, "radius": 50, "ore_types": [OreType.diamond]}
    params.update(overrides)
    return SearchRequest.from_input(**params)


def _small_settings(**overrides) -> Settings:
    values = {"comprehensive_radius": 96, "comprehensive_step": 16}
    values.update(overrides)
    return Settings(**values)


def test_diamond_search_scenario() -> None:
    result = SearchEngine(_request()).run()

    assert result.ores
    assert result.structures == ()
    for location in result.ores:
        assert location.ore is OreType.diamond
        assert -64 <= location.y <= 16
        assert location.probability >= 0.15
        assert (location.chunk_x, location.chunk_z) == (location.x // 16, location.z // 16)
    probabilities = [location.probability for location in result.ores]
    assert probabilities == sorted(probabilities, reverse=True)


def test_runs_are_identical() -> None:
    request = _request(
        ore_types=[OreType.diamond, OreType.redstone],
        structure_types=[StructureType.ruined_portal],
        radius=200,
    )
    first = SearchEngine(request).run()
    second = SearchEngine(request).run()
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_ties_are_broken_by_distance_then_coordinate() -> None:
    request = _request(ore_types=[OreType.diamond, OreType.lapis], radius=120)
    result = SearchEngine(request).run()
    center = request.center
    assert list(result.ores) == sorted(result.ores, key=lambda location: ranking_key(location, center))
    for a, b in zip(result.ores, result.ores[1:]):
        if a.probability == b.probability:
            key_a = (a.coordinate.distance_sq(center), a.x, a.y, a.z, a.ore.value)
            key_b = (b.coordinate.distance_sq(center), b.x, b.y, b.z, b.ore.value)
            assert key_a <= key_b


def test_result_count_is_capped() -> None:
    settings = Settings(max_results=5)
    result = SearchEngine(_request(radius=200), settings=settings).run()
    assert len(result.ores) == 5


def test_samples_stay_inside_the_square() -> None:
    result = SearchEngine(_request(x=1000, z=-300, radius=64)).run()
    for location in result.ores:
        assert 1000 - 64 <= location.x <= 1000 + 64
        assert -300 - 64 <= location.z <= -300 + 64


@pytest.mark.parametrize("radius", [0, -5, 1001])
def test_out_of_range_radius_is_rejected(radius: int) -> None:
    with pytest.raises(InvalidSearchRequest):
        SearchEngine(_request(radius=radius))


def test_empty_selection_is_rejected() -> None:
    with pytest.raises(InvalidSearchRequest):
        SearchEngine(_request(ore_types=[], structure_types=[]))


def test_comprehensive_netherite_ignores_other_selections() -> None:
    request = _request(ore_types=[OreType.diamond, OreType.gold, OreType.netherite], comprehensive=True)
    result = SearchEngine(request, settings=_small_settings()).run()

    assert result.ores
    assert result.structures == ()
    for location in result.ores:
        assert location.ore is OreType.netherite
        assert 8 <= location.y <= 22
        assert location.probability >= 0.05
        assert location.biome is Biome.nether


def test_comprehensive_covers_a_fixed_region_and_every_y_level() -> None:
    settings = _small_settings(comprehensive_threshold=0.0, comprehensive_max_results=10_000)
    request = _request(ore_types=[], structure_types=[StructureType.village], comprehensive=True, radius=1)
    result = SearchEngine(request, settings=settings).run()
    assert {location.y for location in result.ores} == set(range(8, 23))
    assert max(location.x for location in result.ores) == 96
    assert min(location.z for location in result.ores) == -96


def test_comprehensive_cap() -> None:
    settings = _small_settings(comprehensive_max_results=7)
    result = SearchEngine(_request(comprehensive=True), settings=settings).run()
    assert len(result.ores) == 7


def test_structure_search_respects_spacing_and_region() -> None:
    request = _request(ore_types=[], structure_types=list(StructureType), radius=1000)
    result = SearchEngine(request).run()

    assert result.structures
    assert all(location.probability > 0 for location in result.structures)
    for location in result.structures:
        assert -1000 // 16 <= location.chunk_x <= 1000 // 16
        assert -1000 // 16 <= location.chunk_z <= 1000 // 16
        assert location.y == STRUCTURE_PROFILES[location.structure].y

    by_type: dict[StructureType, list] = {}
    for location in result.structures:
        by_type.setdefault(location.structure, []).append(location)
    for structure, locations in by_type.items():
        profile = STRUCTURE_PROFILES[structure]
        assert len({(loc.chunk_x, loc.chunk_z) for loc in locations}) == len(locations)
        for a, b in itertools.combinations(locations, 2):
            gap = max(abs(a.chunk_x - b.chunk_x), abs(a.chunk_z - b.chunk_z))
            assert gap >= profile.spacing - profile.jitter


def test_structure_search_finds_every_candidate_in_range() -> None:
    request = _request(ore_types=[], structure_types=[StructureType.ruined_portal], radius=600)
    result = SearchEngine(request, settings=Settings(max_results=1000)).run()
    found = {(loc.chunk_x, loc.chunk_z) for loc in result.structures}

    model = StructureSpacingModel()
    lo, hi = -600 // 16, 600 // 16
    expected = set()
    for cell_x, cell_z in itertools.product(range(-3, 3), repeat=2):
        cx, cz = model.candidate(request.seed, StructureType.ruined_portal, cell_x, cell_z)
        if lo <= cx <= hi and lo <= cz <= hi:
            expected.add((cx, cz))
    assert found == expected


def test_desert_structures_never_reported_in_ocean() -> None:
    request = _request(ore_types=[], structure_types=[StructureType.desert_temple], radius=1000)
    for location in SearchEngine(request).run().structures:
        assert location.biome is Biome.desert


def test_progress_and_cancellation() -> None:
    events = []
    token = CancellationToken()

    def on_progress(progress) -> None:
        events.append(progress)
        if len(events) == 3:
            token.cancel()

    with pytest.raises(SearchCancelled):
        SearchEngine(_request(radius=200)).run(progress=on_progress, cancel=token)
    assert len(events) == 3
    assert events[-1].completed == 3
    assert 0.0 < events[-1].fraction < 1.0


def test_async_run_matches_sync_run() -> None:
    request = _request(ore_types=[OreType.diamond], structure_types=[StructureType.village], radius=150)
    settings = Settings(yield_every=2)

    async def _run():
        return await SearchEngine(request, settings=settings).run_async()

    assert asyncio.run(_run()) == SearchEngine(request, settings=settings).run()


def test_combined_view_and_serialisation() -> None:
    request = _request(structure_types=[StructureType.ruined_portal], radius=400)
    result = run_search(request)
    merged = result.combined()
    assert len(merged) == len(result.ores) + len(result.structures)
    assert [m.probability for m in merged] == sorted((m.probability for m in merged), reverse=True)

    payload = result.to_dict()
    assert payload["center"] == {"x": 0, "y": -59, "z": 0}
    assert payload["ores"][0]["ore"] == "diamond"
    assert isinstance(payload["ores"][0]["biome"], str)


def test_request_normalises_text_seed() -> None:
    request = SearchRequest.from_input(seed="hello", x=1, y=2, z=3, radius=10, ore_types=["gold"])
    assert request.seed == 99162322
    assert request.center == Coordinate(1, 2, 3)
    assert request.ore_types == frozenset({OreType.gold})


def test_netherite_stats() -> None:
    stats = netherite_stats(12345, sample_radius=96)
    assert stats.total_locations > 0
    assert 0.1 <= stats.average_probability <= stats.max_probability <= 1.0
    assert stats.search_area == "192x192 blocks"


def test_include_nether_adds_nether_gold_in_nether_regions() -> None:
    seed = normalize_seed(SEED)
    region_x = next(
        x for x in range(0, NETHER_REGION_BLOCKS * 400, NETHER_REGION_BLOCKS) if is_nether_region(seed, x, 0)
    )
    centre = {"x": region_x + 64, "y": 60, "z": 64, "radius": 40, "ore_types": [OreType.gold]}

    result = SearchEngine(_request(include_nether=True, **centre)).run()
    assert result.ores
    assert all(loc.biome is Biome.nether and 10 <= loc.y <= 117 for loc in result.ores)

    overworld = SearchEngine(_request(**centre)).run()
    assert all(loc.biome is not Biome.nether for loc in overworld.ores)


def test_include_nether_leaves_other_ores_alone() -> None:
    seed = normalize_seed(SEED)
    region_x = next(
        x for x in range(0, NETHER_REGION_BLOCKS * 400, NETHER_REGION_BLOCKS) if is_nether_region(seed, x, 0)
    )
    centre = {"x": region_x + 64, "y": -59, "z": 64, "radius": 40, "ore_types": [OreType.diamond]}
    assert SearchEngine(_request(include_nether=True, **centre)).run() == SearchEngine(_request(**centre)).run()
