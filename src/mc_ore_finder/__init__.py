"""Seed-based ore and structure location prediction."""

from .errors import InvalidSearchRequest, InvalidSeedFormat, OreFinderError, SearchCancelled
from .java_random import JavaRandom
from .models import (
    Biome,
    Coordinate,
    Dimension,
    OreLocation,
    OreType,
    SearchRequest,
    SearchResult,
    StructureLocation,
    StructureType,
)
from .search import CancellationToken, SearchEngine, SearchProgress, netherite_stats, run_search
from .seed import normalize_seed

__all__ = [
    "Biome",
    "CancellationToken",
    "Coordinate",
    "Dimension",
    "InvalidSearchRequest",
    "InvalidSeedFormat",
    "JavaRandom",
    "OreFinderError",
    "OreLocation",
    "OreType",
    "SearchCancelled",
    "SearchEngine",
    "SearchProgress",
    "SearchRequest",
    "SearchResult",
    "StructureLocation",
    "StructureType",
    "netherite_stats",
    "normalize_seed",
    "run_search",
]
