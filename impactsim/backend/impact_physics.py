"""Impact physics utilities powering the ImpactSim simulation backend."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Optional

import math

from .errors import DomainError, require, require_finite

# -----------------------------------------------------------------------------
# Shared constants
# -----------------------------------------------------------------------------
JOULES_PER_TON_TNT = 4.184e9
MEGATON_TNT_JOULES = JOULES_PER_TON_TNT * 1e6
MAX_SEISMIC_MAGNITUDE = 10.0
DEFAULT_POPULATION_DENSITY = 50.0  # people per km^2
DEFAULT_IMPACT_ANGLE_DEG = 45.0
ASTEROID_DENSITY_KG_M3 = 2000.0


class TsunamiRisk(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# -----------------------------------------------------------------------------
# Value types
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ImpactBody:
    """Physical description of an impactor for a single calculation."""

    mass_kg: float
    velocity_kms: float
    diameter_km: float
    impact_angle_deg: float = DEFAULT_IMPACT_ANGLE_DEG

    def __post_init__(self) -> None:
        for name in ("mass_kg", "velocity_kms", "diameter_km", "impact_angle_deg"):
            require_finite(getattr(self, name), name)
        require(self.mass_kg > 0, f"mass_kg must be positive, got {self.mass_kg}")
        require(self.velocity_kms > 0, f"velocity_kms must be positive, got {self.velocity_kms}")
        require(self.diameter_km > 0, f"diameter_km must be positive, got {self.diameter_km}")
        require(
            0.0 <= self.impact_angle_deg <= 90.0,
            f"impact_angle_deg must lie in [0, 90], got {self.impact_angle_deg}",
        )


@dataclass(frozen=True)
class ImpactLocation:
    is_ocean: bool = False
    population_density: Optional[float] = None


@dataclass(frozen=True)
class TsunamiAssessment:
    risk: TsunamiRisk
    wave_height_m: float


@dataclass(frozen=True)
class AffectedAreas:
    primary_km2: float
    secondary_km2: float
    tertiary_km2: float


@dataclass(frozen=True)
class CasualtyEstimate:
    immediate: int
    secondary: int
    affected: int


@dataclass(frozen=True)
class ImpactResult:
    energy_joules: float
    tnt_megatons: float
    crater_diameter_km: float
    seismic_magnitude: float
    tsunami: TsunamiAssessment
    affected_area: AffectedAreas
    casualties: CasualtyEstimate

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["tsunami"]["risk"] = self.tsunami.risk.value
        return payload


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def estimate_mass_kg(diameter_km: float, density_kg_m3: float = ASTEROID_DENSITY_KG_M3) -> float:
    """Mass of a homogeneous sphere with the given diameter."""

    require_finite(diameter_km, "diameter_km")
    require(diameter_km > 0, f"diameter_km must be positive, got {diameter_km}")
    radius_m = diameter_km * 500.0
    volume_m3 = (4.0 / 3.0) * math.pi * radius_m**3
    return require_finite(volume_m3 * density_kg_m3, "mass_kg")


def compute_kinetic_energy(mass_kg: float, velocity_kms: float) -> float:
    """Return kinetic energy in Joules for a mass moving at ``velocity_kms``."""

    require(mass_kg > 0, f"mass_kg must be positive, got {mass_kg}")
    require_finite(mass_kg, "mass_kg")
    require_finite(velocity_kms, "velocity_kms")
    require(velocity_kms >= 0, f"velocity_kms must be non-negative, got {velocity_kms}")
    velocity_ms = velocity_kms * 1000.0
    try:
        energy = 0.5 * mass_kg * velocity_ms**2
    except OverflowError as exc:
        raise DomainError(f"kinetic energy overflows for mass {mass_kg} kg at {velocity_kms} km/s") from exc
    return require_finite(energy, "kinetic energy")


def energy_to_megatons_tnt(joules: float) -> float:
    require_finite(joules, "energy")
    require(joules >= 0, f"energy must be non-negative, got {joules}")
    return joules / MEGATON_TNT_JOULES


def crater_diameter_km(joules: float, angle_deg: float = DEFAULT_IMPACT_ANGLE_DEG) -> float:
    """Estimate crater diameter in kilometres.

    Simplified yield scaling, attenuated by the sine of the impact angle so a
    grazing (0 degree) impact leaves no crater.
    """

    require(0.0 <= angle_deg <= 180.0, f"angle_deg must lie in [0, 180], got {angle_deg}")
    tnt = energy_to_megatons_tnt(joules)
    angle_efficiency = math.sin(math.radians(angle_deg))
    return tnt**0.25 * 0.1 * angle_efficiency


def seismic_magnitude(joules: float) -> float:
    """Approximate seismic magnitude from impact energy.

    Capped at 10. Yields below one megaton produce negative magnitudes which
    are returned as is.
    """

    require(joules > 0, f"energy must be positive to derive a magnitude, got {joules}")
    tnt = energy_to_megatons_tnt(joules)
    magnitude = 0.67 * math.log10(tnt) + 3.87
    return min(magnitude, MAX_SEISMIC_MAGNITUDE)


def tsunami_risk(is_ocean: bool, joules: float) -> TsunamiAssessment:
    if not is_ocean:
        return TsunamiAssessment(risk=TsunamiRisk.NONE, wave_height_m=0.0)

    tnt = energy_to_megatons_tnt(joules)
    wave_height_m = tnt**0.2 * 2.0
    if wave_height_m >= 10.0:
        risk = TsunamiRisk.HIGH
    elif wave_height_m >= 5.0:
        risk = TsunamiRisk.MEDIUM
    else:
        risk = TsunamiRisk.LOW
    return TsunamiAssessment(risk=risk, wave_height_m=wave_height_m)


def affected_areas(crater_km: float, magnitude: float) -> AffectedAreas:
    """Return the three concentric damage zones in square kilometres."""

    # Primary: crater and immediate ejecta. Secondary: seismic and thermal.
    # Tertiary: atmospheric effects.
    primary_radius = crater_km * 2.0
    secondary_radius = primary_radius + magnitude * 5.0
    tertiary_radius = secondary_radius + magnitude * 10.0
    return AffectedAreas(
        primary_km2=math.pi * primary_radius**2,
        secondary_km2=math.pi * secondary_radius**2,
        tertiary_km2=math.pi * tertiary_radius**2,
    )


def estimate_casualties(areas: AffectedAreas, population_density: Optional[float] = None) -> CasualtyEstimate:
    density = DEFAULT_POPULATION_DENSITY if population_density is None else population_density
    require_finite(density, "population_density")
    require(density >= 0, f"population_density must be non-negative, got {density}")
    return CasualtyEstimate(
        immediate=math.floor(require_finite(areas.primary_km2 * density * 0.9, "immediate casualties")),
        secondary=math.floor(require_finite(areas.secondary_km2 * density * 0.3, "secondary casualties")),
        affected=math.floor(require_finite(areas.tertiary_km2 * density * 0.1, "affected population")),
    )


def calculate_impact(body: ImpactBody, location: Optional[ImpactLocation] = None) -> ImpactResult:
    """Run the full impact chain for ``body`` striking ``location``."""

    location = location or ImpactLocation()

    energy_joules = compute_kinetic_energy(body.mass_kg, body.velocity_kms)
    crater_km = crater_diameter_km(energy_joules, body.impact_angle_deg)
    magnitude = seismic_magnitude(energy_joules)
    areas = affected_areas(crater_km, magnitude)

    return ImpactResult(
        energy_joules=energy_joules,
        tnt_megatons=energy_to_megatons_tnt(energy_joules),
        crater_diameter_km=crater_km,
        seismic_magnitude=magnitude,
        tsunami=tsunami_risk(location.is_ocean, energy_joules),
        affected_area=areas,
        casualties=estimate_casualties(areas, location.population_density),
    )

