"""Per-frame evaluation of the approach and impact scene.

The caller owns all mutable state: it keeps a :class:`SimulationClock` and a
:class:`SimulationParameters` snapshot and asks :func:`evaluate_frame` for
the derived view on every rendered frame.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

import logging

from .deflection import DeflectionMethod
from .errors import require, require_finite
from .impact_physics import DEFAULT_IMPACT_ANGLE_DEG, ImpactBody, ImpactLocation, ImpactResult, calculate_impact
from .nasa_client import AsteroidRecord
from .orbital_kinematics import OrbitState, Position3, UniformAngleModel, orbital_angle, position_for_state

logger = logging.getLogger(__name__)

KM_PER_SCENE_UNIT = 150000.0
SECONDS_PER_DAY = 86400.0
EARTH_SCENE_RADIUS = 2.0
MIN_EFFECTIVE_VELOCITY_KMS = 0.001  # 1 m/s
SAFE_DISTANCE_KM = 800000.0
DEFLECTION_SUCCESS_RATIO = 0.05
CLOCK_RATE = 0.5


@dataclass(frozen=True)
class SimulationParameters:
    """Snapshot of everything the user can tune for a simulation run."""

    mass_kg: float = 1.5e12
    velocity_kms: float = 20.0
    diameter_km: float = 1.0
    angle_deg: float = DEFAULT_IMPACT_ANGLE_DEG
    delta_v_kms: float = 0.0
    deflection_method: DeflectionMethod = DeflectionMethod.KINETIC
    orbit: OrbitState = field(default_factory=lambda: OrbitState(semi_major_axis_au=1.5, eccentricity=0.2))
    location: ImpactLocation = field(default_factory=ImpactLocation)

    def __post_init__(self) -> None:
        require_finite(self.velocity_kms, "velocity_kms")
        require_finite(self.delta_v_kms, "delta_v_kms")
        require(self.velocity_kms > 0, f"velocity_kms must be positive, got {self.velocity_kms}")
        require(self.delta_v_kms >= 0, f"delta_v_kms must be non-negative, got {self.delta_v_kms}")

    @classmethod
    def from_asteroid(cls, record: AsteroidRecord, **overrides) -> "SimulationParameters":
        params = cls(
            mass_kg=record.mass_kg,
            velocity_kms=record.velocity_kms,
            diameter_km=record.diameter_km,
            orbit=OrbitState(semi_major_axis_au=record.semi_major_axis_au, eccentricity=record.eccentricity),
        )
        return params.updated(**overrides) if overrides else params

    def updated(self, **changes) -> "SimulationParameters":
        return replace(self, **changes)

    def with_deflection(self, method: DeflectionMethod, delta_v_kms: float) -> "SimulationParameters":
        return replace(self, deflection_method=method, delta_v_kms=delta_v_kms)


@dataclass(frozen=True)
class FrameSnapshot:
    time: float
    angle_rad: float
    position: Position3
    distance_from_earth_km: float
    current_velocity_kms: float
    time_to_impact_days: float
    impact: ImpactResult
    mission_status: str
    collision: bool
    impact_point: Optional[Position3]

    def to_dict(self) -> Dict[str, object]:
        return {
            "time": self.time,
            "angle_rad": self.angle_rad,
            "position": self.position.as_dict(),
            "position_km": {
                "x": self.position.x * KM_PER_SCENE_UNIT,
                "y": self.position.y * KM_PER_SCENE_UNIT,
                "z": self.position.z * KM_PER_SCENE_UNIT,
            },
            "distance_from_earth_km": self.distance_from_earth_km,
            "current_velocity_kms": self.current_velocity_kms,
            "time_to_impact_days": self.time_to_impact_days,
            "impact": self.impact.to_dict(),
            "mission_status": self.mission_status,
            "collision": self.collision,
            "impact_point": self.impact_point.as_dict() if self.impact_point else None,
        }


class SimulationClock:
    """Accumulates scene time from frame deltas."""

    def __init__(self, rate: float = CLOCK_RATE) -> None:
        self.rate = rate
        self.time = 0.0
        self.paused = False

    def tick(self, delta_seconds: float) -> float:
        if not self.paused:
            self.time += delta_seconds * self.rate
        return self.time

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def reset(self) -> None:
        self.time = 0.0


def effective_velocity_kms(velocity_kms: float, delta_v_kms: float) -> float:
    return max(velocity_kms - delta_v_kms, MIN_EFFECTIVE_VELOCITY_KMS)


def world_size_for_diameter(diameter_km: float) -> float:
    """Scene radius used for an asteroid: 10 km per unit, clamped to [0.1, 2.0]."""

    return max(0.1, min((diameter_km or 0.0) / 10.0, 2.0))


def is_deflected(params: SimulationParameters, distance_km: float) -> bool:
    return params.delta_v_kms >= params.velocity_kms * DEFLECTION_SUCCESS_RATIO or distance_km > SAFE_DISTANCE_KM


def evaluate_frame(params: SimulationParameters, time: float, model=None) -> FrameSnapshot:
    model = model or UniformAngleModel()
    angle = model.true_anomaly(orbital_angle(time, params.orbit.phase_rad), params.orbit.eccentricity)
    position = position_for_state(time, params.orbit, model)
    scene_distance = position.magnitude()
    distance_km = scene_distance * KM_PER_SCENE_UNIT

    current_velocity = effective_velocity_kms(params.velocity_kms, params.delta_v_kms)
    body = ImpactBody(
        mass_kg=params.mass_kg,
        velocity_kms=current_velocity,
        diameter_km=params.diameter_km,
        impact_angle_deg=params.angle_deg,
    )
    impact = calculate_impact(body, params.location)

    deflected = is_deflected(params, distance_km)
    collision_threshold = EARTH_SCENE_RADIUS + world_size_for_diameter(params.diameter_km)
    collision = not deflected and scene_distance <= collision_threshold

    impact_point = None
    if collision:
        impact_point = Position3(
            x=position.x / scene_distance * EARTH_SCENE_RADIUS,
            y=position.y / scene_distance * EARTH_SCENE_RADIUS,
            z=position.z / scene_distance * EARTH_SCENE_RADIUS,
        )
        logger.debug("Collision at t=%.3f, impact point %s", time, impact_point)

    return FrameSnapshot(
        time=time,
        angle_rad=angle,
        position=position,
        distance_from_earth_km=distance_km,
        current_velocity_kms=current_velocity,
        time_to_impact_days=distance_km / params.velocity_kms / SECONDS_PER_DAY,
        impact=impact,
        mission_status="success" if deflected else "impact",
        collision=collision,
        impact_point=impact_point,
    )
