"""Backend package for ImpactSim.

Exposes the impact physics calculator, orbital kinematics and the asteroid
data service.
"""
from __future__ import annotations

from .data_mock import MockDataManager
from .data_service import AsteroidDataService
from .deflection import (
    DeflectionMethod,
    deflection_requirement,
    score_deflection_methods,
)
from .errors import DomainError
from .impact_physics import (
    ImpactBody,
    ImpactLocation,
    ImpactResult,
    calculate_impact,
    compute_kinetic_energy,
    crater_diameter_km,
    energy_to_megatons_tnt,
    estimate_casualties,
    affected_areas,
    seismic_magnitude,
    tsunami_risk,
)
from .nasa_client import AsteroidRecord, NASAAPIError, NASAClient
from .orbital_kinematics import (
    OrbitState,
    Position3,
    get_angle_model,
    orbital_period,
    orbital_position,
    sample_deflected_path,
    sample_orbit_path,
)
from .regional import default_impact_site, rank_cities
from .simulation import SimulationClock, SimulationParameters, evaluate_frame

__all__ = [
    "MockDataManager",
    "AsteroidDataService",
    "AsteroidRecord",
    "NASAClient",
    "NASAAPIError",
    "DomainError",
    "DeflectionMethod",
    "deflection_requirement",
    "score_deflection_methods",
    "ImpactBody",
    "ImpactLocation",
    "ImpactResult",
    "calculate_impact",
    "compute_kinetic_energy",
    "energy_to_megatons_tnt",
    "crater_diameter_km",
    "seismic_magnitude",
    "tsunami_risk",
    "affected_areas",
    "estimate_casualties",
    "OrbitState",
    "Position3",
    "get_angle_model",
    "orbital_position",
    "orbital_period",
    "sample_orbit_path",
    "sample_deflected_path",
    "default_impact_site",
    "rank_cities",
    "SimulationClock",
    "SimulationParameters",
    "evaluate_frame",
]
