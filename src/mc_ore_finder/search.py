"""Sampling search over ores and structures around a centre point."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Generator

from .biomes import classify, is_nether_region
from .config import Settings, settings as default_settings
from .errors import InvalidSearchRequest, SearchCancelled
from .models import (
    Biome,
    Coordinate,
    NetheriteStats,
    OreLocation,
    OreType,
    SearchRequest,
    SearchResult,
    StructureLocation,
    StructureType,
    ranking_key,
)
from .ores import NETHER_ORE_PROFILES, ORE_PROFILES, OreDensityModel, OreProfile
from .structures import StructureSpacingModel

COMPREHENSIVE_ORE = OreType.netherite


@dataclass(slots=True)
class SearchProgress:
    """Snapshot handed to progress callbacks after every scanned row."""

    phase: str
    completed: int
    total: int
    found: int

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 1.0


ProgressCallback = Callable[[SearchProgress], None]


class CancellationToken:
    """Set by the caller to stop a running search at the next row boundary."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def validate_request(request: SearchRequest, config: Settings) -> None:
    if request.radius <= 0 or request.radius > config.max_radius:
        raise InvalidSearchRequest(f"Radius must be between 1 and {config.max_radius}, got {request.radius}")
    if not request.comprehensive and not request.ore_types and not request.structure_types:
        raise InvalidSearchRequest("Select at least one ore or structure type")


class SearchEngine:
    """Runs exactly one :class:`SearchRequest`; the request is validated on construction."""

    def __init__(
        self,
        request: SearchRequest,
        *,
        settings: Settings | None = None,
        ore_model: OreDensityModel | None = None,
        structure_model: StructureSpacingModel | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or default_settings
        validate_request(request, self._settings)
        self._request = request
        self._ore_model = ore_model or OreDensityModel()
        self._structure_model = structure_model or StructureSpacingModel()
        self._logger = logger or logging.getLogger("mc_ore_finder.search")
        self._visited: set[tuple[StructureType, int, int]] = set()

    @property
    def request(self) -> SearchRequest:
        return self._request

    def run(
        self,
        *,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> SearchResult:
        """Scan synchronously and return the ranked result."""
        scan = self._scan(progress, cancel)
        while True:
            try:
                next(scan)
            except StopIteration as done:
                return done.value

    async def run_async(
        self,
        *,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> SearchResult:
        """Same scan as :meth:`run`, handing control back to the event loop between row batches."""
        scan = self._scan(progress, cancel)
        rows = 0
        while True:
            try:
                next(scan)
            except StopIteration as done:
                return done.value
            rows += 1
            if rows % self._settings.yield_every == 0:
                await asyncio.sleep(0)

    def _scan(
        self,
        progress: ProgressCallback | None,
        cancel: CancellationToken | None,
    ) -> Generator[None, None, SearchResult]:
        request = self._request
        self._visited.clear()
        self._logger.info(
            "search_started",
            extra={
                "radius": request.radius,
                "ores": sorted(o.value for o in request.ore_types),
                "structures": sorted(s.value for s in request.structure_types),
                "comprehensive": request.comprehensive,
                "include_nether": request.include_nether,
            },
        )

        if request.comprehensive:
            result = yield from self._scan_comprehensive(progress, cancel)
        else:
            result = yield from self._scan_normal(progress, cancel)

        self._logger.info(
            "search_finished",
            extra={"ores_found": len(result.ores), "structures_found": len(result.structures)},
        )
        return result

    def _scan_normal(
        self,
        progress: ProgressCallback | None,
        cancel: CancellationToken | None,
    ) -> Generator[None, None, SearchResult]:
        request = self._request
        config = self._settings
        center = request.center
        radius = request.radius

        xs = range(center.x - radius, center.x + radius + 1, config.ore_step)
        zs = range(center.z - radius, center.z + radius + 1, config.ore_step)

        stride = config.structure_chunk_stride
        chunk_lo_x, chunk_hi_x = (center.x - radius) // 16, (center.x + radius) // 16
        chunk_lo_z, chunk_hi_z = (center.z - radius) // 16, (center.z + radius) // 16
        sample_xs = range(chunk_lo_x, chunk_hi_x + stride, stride)
        sample_zs = range(chunk_lo_z, chunk_hi_z + stride, stride)

        ore_types = sorted(request.ore_types, key=lambda o: o.value)
        structure_types = sorted(request.structure_types, key=lambda s: s.value)
        total = len(ore_types) * len(xs) + (len(sample_xs) if structure_types else 0)
        completed = 0

        ores: list[OreLocation] = []
        for ore in ore_types:
            profile = ORE_PROFILES[ore]
            nether_profile = NETHER_ORE_PROFILES.get(ore) if request.include_nether else None
            for x in xs:
                self._check_cancel(cancel, "ores")
                for z in zs:
                    column_profile = profile
                    if nether_profile is not None and is_nether_region(request.seed, x, z):
                        column_profile = nether_profile
                    ores.extend(
                        self._scan_column(column_profile, x, z, column_profile.y_step, config.ore_threshold)
                    )
                completed += 1
                self._report(progress, "ores", completed, total, len(ores))
                yield

        structures: list[StructureLocation] = []
        if structure_types:
            tolerance = stride // 2
            for chunk_x in sample_xs:
                self._check_cancel(cancel, "structures")
                for chunk_z in sample_zs:
                    for structure in structure_types:
                        location = self._structure_model.locate(request.seed, structure, chunk_x, chunk_z, tolerance)
                        if location is None:
                            continue
                        if not (
                            chunk_lo_x <= location.chunk_x <= chunk_hi_x
                            and chunk_lo_z <= location.chunk_z <= chunk_hi_z
                        ):
                            continue
                        key = (structure, location.chunk_x, location.chunk_z)
                        if key in self._visited:
                            continue
                        self._visited.add(key)
                        structures.append(location)
                completed += 1
                self._report(progress, "structures", completed, total, len(structures))
                yield

        return SearchResult(
            center=center,
            ores=tuple(self._rank(ores, center, config.max_results)),
            structures=tuple(self._rank(structures, center, config.max_results)),
        )

    def _scan_comprehensive(
        self,
        progress: ProgressCallback | None,
        cancel: CancellationToken | None,
    ) -> Generator[None, None, SearchResult]:
        request = self._request
        config = self._settings
        center = request.center
        profile = ORE_PROFILES[COMPREHENSIVE_ORE]
        half = config.comprehensive_radius
        step = config.comprehensive_step

        ignored = sorted(o.value for o in request.ore_types if o is not COMPREHENSIVE_ORE)
        ignored += sorted(s.value for s in request.structure_types)
        if ignored:
            self._logger.info("comprehensive_ignores_selection", extra={"ignored": ignored})

        xs = range(center.x - half, center.x + half + 1, step)
        zs = range(center.z - half, center.z + half + 1, step)
        ores: list[OreLocation] = []
        for completed, x in enumerate(xs, start=1):
            self._check_cancel(cancel, "comprehensive")
            for z in zs:
                ores.extend(self._scan_column(profile, x, z, 1, config.comprehensive_threshold))
            self._report(progress, "comprehensive", completed, len(xs), len(ores))
            if completed % 100 == 0:
                self._logger.info(
                    "comprehensive_progress",
                    extra={"completed": completed, "total": len(xs), "found": len(ores)},
                )
            yield

        return SearchResult(
            center=center,
            ores=tuple(self._rank(ores, center, config.comprehensive_max_results)),
        )

    def _scan_column(self, profile: OreProfile, x: int, z: int, y_step: int, threshold: float) -> list[OreLocation]:
        seed = self._request.seed
        chunk_x, chunk_z = x // 16, z // 16
        biome = classify(seed, chunk_x, chunk_z, profile.dimension)
        found = []
        for y in profile.y_levels(y_step):
            probability = self._ore_model.probability(seed, profile.ore, x, y, z, biome)
            if probability >= threshold:
                found.append(
                    OreLocation(
                        x=x,
                        y=y,
                        z=z,
                        chunk_x=chunk_x,
                        chunk_z=chunk_z,
                        ore=profile.ore,
                        probability=round(probability, 2),
                        biome=biome,
                    )
                )
        return found

    @staticmethod
    def _rank(locations: list, center: Coordinate, limit: int) -> list:
        return sorted(locations, key=lambda location: ranking_key(location, center))[:limit]

    def _check_cancel(self, cancel: CancellationToken | None, phase: str) -> None:
        if cancel is not None and cancel.cancelled:
            self._logger.info("search_cancelled", extra={"phase": phase})
            raise SearchCancelled(f"Search cancelled during {phase} scan")

    @staticmethod
    def _report(progress: ProgressCallback | None, phase: str, completed: int, total: int, found: int) -> None:
        if progress is not None:
            progress(SearchProgress(phase=phase, completed=completed, total=total, found=found))


def run_search(request: SearchRequest, *, settings: Settings | None = None) -> SearchResult:
    return SearchEngine(request, settings=settings).run()


def netherite_stats(
    seed: int,
    sample_radius: int = 1000,
    *,
    ore_model: OreDensityModel | None = None,
) -> NetheriteStats:
    """Coarse sampling of ancient debris likelihood around the origin."""
    model = ore_model or OreDensityModel()
    probabilities: list[float] = []
    for x in range(-sample_radius, sample_radius + 1, 32):
        for z in range(-sample_radius, sample_radius + 1, 32):
            for y in range(8, 23, 2):
                probability = model.probability(seed, OreType.netherite, x, y, z, Biome.nether)
                if probability >= 0.1:
                    probabilities.append(probability)

    return NetheriteStats(
        total_locations=len(probabilities),
        average_probability=sum(probabilities) / len(probabilities) if probabilities else 0.0,
        max_probability=max(probabilities, default=0.0),
        search_area=f"{sample_radius * 2}x{sample_radius * 2} blocks",
    )
