"""Deflection planning helpers: required delta-v and method viability."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

import math

from .errors import DomainError, require, require_finite

BASE_DELTA_V_KMS = 0.1
DAYS_PER_YEAR = 365.0

READINESS_MULTIPLIERS = {
    "high": 1.2,
    "medium": 1.0,
    "low": 0.8,
}


class DeflectionMethod(str, Enum):
    KINETIC = "kinetic"
    ION = "ion"
    NUCLEAR = "nuclear"
    GRAVITY_TRACTOR = "gravityTractor"


@dataclass(frozen=True)
class DeflectionProfile:
    """Static characteristics of a deflection technique."""

    name: str
    description: str
    delta_v_efficiency: float
    min_lead_time_days: float
    tech_readiness: str


@dataclass(frozen=True)
class DeflectionRequirement:
    required_delta_v_kms: float
    energy_joules: float
    feasibility: str


@dataclass(frozen=True)
class MethodAssessment:
    method: DeflectionMethod
    profile: DeflectionProfile
    viable: bool
    score: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "method": self.method.value,
            "name": self.profile.name,
            "description": self.profile.description,
            "delta_v_efficiency": self.profile.delta_v_efficiency,
            "min_lead_time_days": self.profile.min_lead_time_days,
            "tech_readiness": self.profile.tech_readiness,
            "viable": self.viable,
            "score": self.score,
        }


METHOD_PROFILES: Dict[DeflectionMethod, DeflectionProfile] = {
    DeflectionMethod.KINETIC: DeflectionProfile(
        name="Kinetic Impactor",
        description="Direct collision to change velocity",
        delta_v_efficiency=0.7,
        min_lead_time_days=180,
        tech_readiness="high",
    ),
    DeflectionMethod.ION: DeflectionProfile(
        name="Ion Beam Thruster",
        description="Slow continuous push",
        delta_v_efficiency=0.9,
        min_lead_time_days=730,
        tech_readiness="medium",
    ),
    DeflectionMethod.NUCLEAR: DeflectionProfile(
        name="Nuclear Blast",
        description="High energy deflection",
        delta_v_efficiency=1.5,
        min_lead_time_days=90,
        tech_readiness="low",
    ),
    DeflectionMethod.GRAVITY_TRACTOR: DeflectionProfile(
        name="Gravity Tractor",
        description="Gravitational pull deflection",
        delta_v_efficiency=0.3,
        min_lead_time_days=1460,
        tech_readiness="medium",
    ),
}


def deflection_requirement(mass_kg: float, lead_time_days: float) -> DeflectionRequirement:
    """Return the velocity change needed to deflect ``mass_kg`` given the warning time.

    The required delta-v falls off with the square root of the lead time in
    years, starting from 0.1 km/s for a single year of warning.
    """

    require_finite(mass_kg, "mass_kg")
    require_finite(lead_time_days, "lead_time_days")
    require(mass_kg > 0, f"mass_kg must be positive, got {mass_kg}")
    require(lead_time_days > 0, f"lead_time_days must be positive, got {lead_time_days}")

    time_years = lead_time_days / DAYS_PER_YEAR
    require(time_years > 0, f"lead_time_days is too small to evaluate, got {lead_time_days}")
    required_delta_v = BASE_DELTA_V_KMS / math.sqrt(time_years)
    try:
        energy_joules = require_finite(0.5 * mass_kg * (required_delta_v * 1000.0) ** 2, "deflection energy")
    except OverflowError as exc:
        raise DomainError(f"deflection energy overflows for a {lead_time_days} day lead time") from exc

    if required_delta_v < 1.0:
        feasibility = "high"
    elif required_delta_v < 5.0:
        feasibility = "medium"
    else:
        feasibility = "low"

    return DeflectionRequirement(
        required_delta_v_kms=required_delta_v,
        energy_joules=energy_joules,
        feasibility=feasibility,
    )


def score_deflection_methods(lead_time_days: float) -> Dict[DeflectionMethod, MethodAssessment]:
    require_finite(lead_time_days, "lead_time_days")
    require(lead_time_days >= 0, f"lead_time_days must be non-negative, got {lead_time_days}")

    assessments: Dict[DeflectionMethod, MethodAssessment] = {}
    for method, profile in METHOD_PROFILES.items():
        viable = lead_time_days >= profile.min_lead_time_days
        score = profile.delta_v_efficiency * READINESS_MULTIPLIERS[profile.tech_readiness] if viable else 0.0
        assessments[method] = MethodAssessment(method=method, profile=profile, viable=viable, score=score)
    return assessments


def best_deflection_method(lead_time_days: float) -> MethodAssessment | None:
    """Highest scoring viable method, or ``None`` when nothing is viable yet."""

    viable = [item for item in score_deflection_methods(lead_time_days).values() if item.viable]
    if not viable:
        return None
    return max(viable, key=lambda item: item.score)
