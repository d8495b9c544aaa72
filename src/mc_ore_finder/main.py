"""CLI entrypoint for the ore finder."""

from __future__ import annotations

import logging
from dataclasses import asdict

import typer
from rich import print
from rich.logging import RichHandler

from mc_ore_finder.config import settings
from mc_ore_finder.errors import OreFinderError
from mc_ore_finder.models import OreType, SearchRequest, StructureType
from mc_ore_finder.search import SearchEngine, netherite_stats
from mc_ore_finder.seed import normalize_seed
from mc_ore_finder.structures import STRUCTURE_PROFILES, StructureSpacingModel

app = typer.Typer(help="Predict ore and structure locations from a world seed")


@app.callback()
def main(log_level: str = typer.Option(None, help="Override MC_ORE_FINDER_LOG_LEVEL")) -> None:
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _fail(exc: OreFinderError) -> None:
    print({"error": str(exc)})
    raise typer.Exit(code=1)


def _run(request_kwargs: dict) -> dict:
    try:
        request = SearchRequest.from_input(**request_kwargs)
        result = SearchEngine(request).run()
    except OreFinderError as exc:
        _fail(exc)
    return {"seed": request.seed, **result.to_dict()}


@app.command()
def start() -> None:
    """Show the active search limits."""
    print(settings.model_dump())


@app.command("seed")
def seed_command(seed: str = typer.Argument(..., help="Seed as typed in the world creation screen")) -> None:
    """Show the 64-bit seed a seed string maps to."""
    try:
        print({"input": seed, "seed": normalize_seed(seed)})
    except OreFinderError as exc:
        _fail(exc)


@app.command()
def search(
    seed: str = typer.Option(..., help="World seed (number or text)"),
    x: int = typer.Option(0, help="Centre X"),
    y: int = typer.Option(-59, help="Centre Y"),
    z: int = typer.Option(0, help="Centre Z"),
    radius: int = typer.Option(300, help="Search radius in blocks"),
    ore: list[OreType] = typer.Option([], "--ore", help="Ore type to look for (repeatable)"),
    structure: list[StructureType] = typer.Option([], "--structure", help="Structure type (repeatable)"),
    include_nether: bool = typer.Option(False, help="Also search nether gold in nether-rolled regions"),
    limit: int = typer.Option(10, help="How many entries of each list to print"),
) -> None:
    """Rank likely ore and structure locations around a point."""
    payload = _run(
        {
            "seed": seed,
            "x": x,
            "y": y,
            "z": z,
            "radius": radius,
            "ore_types": ore,
            "structure_types": structure,
            "include_nether": include_nether,
        }
    )
    payload["ores"] = payload["ores"][:limit]
    payload["structures"] = payload["structures"][:limit]
    print(payload)


@app.command()
def netherite(
    seed: str = typer.Option(..., help="World seed (number or text)"),
    x: int = typer.Option(0, help="Centre X"),
    z: int = typer.Option(0, help="Centre Z"),
    limit: int = typer.Option(20, help="How many entries to print"),
) -> None:
    """Comprehensive ancient debris scan over a wide fixed region."""
    payload = _run(
        {
            "seed": seed,
            "x": x,
            "y": 15,
            "z": z,
            "radius": 1,
            "ore_types": [OreType.netherite],
            "comprehensive": True,
        }
    )
    print({"seed": payload["seed"], "netherite": payload["ores"][:limit]})


@app.command()
def stats(
    seed: str = typer.Option(..., help="World seed (number or text)"),
    sample_radius: int = typer.Option(1000, help="Half-width of the sampled square"),
) -> None:
    """Summarise netherite likelihood around the origin."""
    try:
        world_seed = normalize_seed(seed)
    except OreFinderError as exc:
        _fail(exc)
    print(asdict(netherite_stats(world_seed, sample_radius)))


@app.command("nearest-structure")
def nearest_structure(
    structure: StructureType = typer.Option(..., help="Structure type, e.g. village"),
    seed: str = typer.Option(..., help="World seed (number or text)"),
    x: int = typer.Option(..., help="Current X"),
    z: int = typer.Option(..., help="Current Z"),
    max_cells: int = typer.Option(8, help="How many spacing-grid rings to search"),
) -> None:
    try:
        world_seed = normalize_seed(seed)
    except OreFinderError as exc:
        _fail(exc)

    location = StructureSpacingModel().nearest(world_seed, structure, x // 16, z // 16, max_cells=max_cells)
    if location is None:
        print({"nearest_structure": None, "name": STRUCTURE_PROFILES[structure].name})
        raise typer.Exit(code=1)

    print(
        {
            "nearest_structure": location.to_dict(),
            "name": STRUCTURE_PROFILES[structure].name,
            "rarity": STRUCTURE_PROFILES[structure].rarity.value,
        }
    )


if __name__ == "__main__":
    app()
