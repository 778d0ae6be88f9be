"""Configuration module for ImpactSim.

Loads environment-backed configuration with sensible defaults for classroom
and demo deployments. Uses python-dotenv to enable `.env` files during local
runs while keeping runtime dependencies explicit.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import os

from dotenv import load_dotenv

# Load environment variables from a `.env` file if present.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)


def _env_flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


@dataclass(frozen=True)
class Settings:
    """Container for tunable runtime parameters."""

    debug: bool = field(default_factory=lambda: _env_flag("IMPACTSIM_DEBUG", "0"))
    default_asteroid_id: str = field(default_factory=lambda: os.getenv("IMPACTSIM_ASTEROID_ID", "2099942"))
    default_latitude: float = field(default_factory=lambda: float(os.getenv("IMPACTSIM_DEFAULT_LAT", "20.0")))
    default_longitude: float = field(default_factory=lambda: float(os.getenv("IMPACTSIM_DEFAULT_LON", "-40.0")))
    orbit_sample_points: int = field(default_factory=lambda: int(os.getenv("IMPACTSIM_ORBIT_SAMPLES", "100")))
    angle_model: str = field(default_factory=lambda: os.getenv("IMPACTSIM_ANGLE_MODEL", "uniform"))
    population_density: float = field(default_factory=lambda: float(os.getenv("IMPACTSIM_POPULATION_DENSITY", "50")))
    nasa_api_key: str = field(default_factory=lambda: os.getenv("NASA_API_KEY", "DEMO_KEY"))
    use_live_apis: bool = field(default_factory=lambda: _env_flag("IMPACTSIM_USE_LIVE_APIS", "0"))


def get_settings() -> Settings:
    """Factory returning immutable settings instance."""

    return Settings()
