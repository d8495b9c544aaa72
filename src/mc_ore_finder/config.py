"""Runtime configuration for the ore finder."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven search limits and thresholds."""

    model_config = SettingsConfigDict(env_prefix="MC_ORE_FINDER_", env_file=".env", extra="ignore")

    app_name: str = "mc-ore-finder"
    log_level: str = "INFO"
    max_radius: int = Field(default=1000, gt=0, description="Largest accepted search radius, in blocks.")
    ore_step: int = Field(default=8, gt=0, description="Horizontal ore sampling stride, in blocks.")
    structure_chunk_stride: int = Field(default=4, gt=0, description="Structure sampling stride, in chunks.")
    ore_threshold: float = Field(default=0.15, ge=0.0, le=1.0)
    comprehensive_threshold: float = Field(default=0.05, ge=0.0, le=1.0)
    comprehensive_radius: int = Field(default=2000, gt=0, description="Half-width of the comprehensive scan.")
    comprehensive_step: int = Field(default=16, gt=0)
    max_results: int = Field(default=100, gt=0)
    comprehensive_max_results: int = Field(default=300, gt=0)
    yield_every: int = Field(default=8, gt=0, description="Columns scanned between cooperative yields.")


settings = Settings()
