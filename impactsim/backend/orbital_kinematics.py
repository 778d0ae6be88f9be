"""Orbital kinematics for the animated approach scene.

Positions follow a fixed, non-precessing conic r(theta) = a(1 - e^2) / (1 + e cos theta)
drawn in the ecliptic plane and scaled into scene units. How elapsed time maps
onto the orbital angle is delegated to an angle model so the legacy uniform
sweep and a Kepler-equation solution can be swapped without touching callers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import logging
import math

from scipy import optimize

from .errors import DomainError, require, require_finite

logger = logging.getLogger(__name__)

SCENE_SCALE = 3.0
ANGULAR_RATE = 0.5  # radians per unit of simulation time
TWO_PI = 2.0 * math.pi
DEFAULT_PATH_SEGMENTS = 100
MAX_PATH_SEGMENTS = 10000
MAX_SEMI_MAJOR_AXIS_AU = 1.0e6
DEFLECTED_ECCENTRICITY_FACTOR = 1.3
DEFLECTED_PATH_HEIGHT = 0.5
MAX_DEFLECTED_ECCENTRICITY = 0.99


@dataclass(frozen=True)
class OrbitState:
    semi_major_axis_au: float
    eccentricity: float
    phase_rad: float = 0.0

    def __post_init__(self) -> None:
        _validate_shape(self.semi_major_axis_au, self.eccentricity)


@dataclass(frozen=True)
class Position3:
    x: float
    y: float
    z: float

    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def as_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


# -----------------------------------------------------------------------------
# Angle models
# -----------------------------------------------------------------------------
class UniformAngleModel:
    """Feeds the uniformly advancing angle straight into the conic equation.

    Traces the right shape at a non-physical rate. This is the behaviour the
    visualisation was tuned against and stays the default.
    """

    name = "uniform"

    def true_anomaly(self, mean_angle: float, eccentricity: float) -> float:
        return mean_angle


class KeplerAngleModel:
    """Treats the advancing angle as mean anomaly and solves Kepler's equation."""

    name = "kepler"

    def __init__(self, tolerance: float = 1e-12, max_iterations: int = 50) -> None:
        self.tolerance = tolerance
        self.max_iterations = max_iterations

    def eccentric_anomaly(self, mean_anomaly: float, eccentricity: float) -> float:
        initial_guess = mean_anomaly if eccentricity < 0.8 else math.pi
        return optimize.newton(
            lambda anomaly: anomaly - eccentricity * math.sin(anomaly) - mean_anomaly,
            initial_guess,
            fprime=lambda anomaly: 1.0 - eccentricity * math.cos(anomaly),
            tol=self.tolerance,
            maxiter=self.max_iterations,
        )

    def true_anomaly(self, mean_angle: float, eccentricity: float) -> float:
        if eccentricity == 0.0:
            return mean_angle
        eccentric = self.eccentric_anomaly(mean_angle, eccentricity)
        true = 2.0 * math.atan2(
            math.sqrt(1.0 + eccentricity) * math.sin(eccentric / 2.0),
            math.sqrt(1.0 - eccentricity) * math.cos(eccentric / 2.0),
        )
        return true % TWO_PI


ANGLE_MODELS = {
    UniformAngleModel.name: UniformAngleModel,
    KeplerAngleModel.name: KeplerAngleModel,
}


def get_angle_model(name: str):
    try:
        return ANGLE_MODELS[name.lower()]()
    except KeyError as exc:
        raise DomainError(f"Unknown angle model '{name}'; expected one of {sorted(ANGLE_MODELS)}") from exc


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def _validate_shape(semi_major_axis_au: float, eccentricity: float) -> None:
    require(
        0 < semi_major_axis_au <= MAX_SEMI_MAJOR_AXIS_AU,
        f"semi_major_axis_au must lie in (0, {MAX_SEMI_MAJOR_AXIS_AU:g}], got {semi_major_axis_au}",
    )
    require(0.0 <= eccentricity < 1.0, f"eccentricity must lie in [0, 1), got {eccentricity}")


def _radius_at_angle(semi_major_axis_au: float, eccentricity: float, angle_rad: float) -> float:
    return semi_major_axis_au * (1 - eccentricity**2) / (1 + eccentricity * math.cos(angle_rad))


def orbital_angle(time: float, phase: float = 0.0) -> float:
    """Angle swept after ``time`` units, wrapped into [0, 2 pi)."""

    require_finite(time, "time")
    require_finite(phase, "phase")
    return require_finite(time * ANGULAR_RATE + phase, "orbital angle") % TWO_PI


def orbital_position(
    time: float,
    semi_major_axis_au: float,
    eccentricity: float,
    phase: float = 0.0,
    model=None,
) -> Position3:
    _validate_shape(semi_major_axis_au, eccentricity)
    model = model or UniformAngleModel()

    angle = model.true_anomaly(orbital_angle(time, phase), eccentricity)
    r = _radius_at_angle(semi_major_axis_au, eccentricity, angle)
    return Position3(
        x=r * math.cos(angle) * SCENE_SCALE,
        y=0.0,
        z=r * math.sin(angle) * SCENE_SCALE,
    )


def position_for_state(time: float, state: OrbitState, model=None) -> Position3:
    return orbital_position(time, state.semi_major_axis_au, state.eccentricity, state.phase_rad, model)


def orbital_period(semi_major_axis_au: float) -> float:
    """Orbital period in years from Kepler's third law (solar-mass primary)."""

    require(
        0 < semi_major_axis_au <= MAX_SEMI_MAJOR_AXIS_AU,
        f"semi_major_axis_au must lie in (0, {MAX_SEMI_MAJOR_AXIS_AU:g}], got {semi_major_axis_au}",
    )
    return math.sqrt(semi_major_axis_au**3)


def sample_orbit_path(
    semi_major_axis_au: float,
    eccentricity: float,
    segments: int = DEFAULT_PATH_SEGMENTS,
    *,
    height: float = 0.0,
) -> List[Position3]:
    """Closed polyline of ``segments + 1`` points around the orbit."""

    _validate_shape(semi_major_axis_au, eccentricity)
    require(
        0 < segments <= MAX_PATH_SEGMENTS,
        f"segments must lie in [1, {MAX_PATH_SEGMENTS}], got {segments}",
    )

    points: List[Position3] = []
    for i in range(segments + 1):
        angle = (i / segments) * TWO_PI
        r = _radius_at_angle(semi_major_axis_au, eccentricity, angle)
        points.append(
            Position3(
                x=r * math.cos(angle) * SCENE_SCALE,
                y=height,
                z=r * math.sin(angle) * SCENE_SCALE,
            )
        )
    return points


def deflected_eccentricity(eccentricity: float) -> float:
    return min(eccentricity * DEFLECTED_ECCENTRICITY_FACTOR, MAX_DEFLECTED_ECCENTRICITY)


def sample_deflected_path(
    semi_major_axis_au: float,
    eccentricity: float,
    segments: int = DEFAULT_PATH_SEGMENTS,
) -> List[Position3]:
    """Illustrative post-deflection track: stretched eccentricity, lifted off the plane."""

    _validate_shape(semi_major_axis_au, eccentricity)
    stretched = deflected_eccentricity(eccentricity)
    if stretched != eccentricity * DEFLECTED_ECCENTRICITY_FACTOR:
        logger.debug("Deflected eccentricity capped at %.2f (from %.3f)", stretched, eccentricity)
    return sample_orbit_path(semi_major_axis_au, stretched, segments, height=DEFLECTED_PATH_HEIGHT)
