"""Exception types shared by the ImpactSim numeric core."""
from __future__ import annotations

import math


class DomainError(ValueError):
    """Raised when an input lies outside the domain of a physics formula."""


def require(condition: bool, message: str) -> None:
    if not condition:
        raise DomainError(message)


def require_finite(value: float, name: str) -> float:
    """Reject NaN and infinities; returns ``value`` so it can wrap an expression."""

    if not math.isfinite(value):
        raise DomainError(f"{name} must be finite, got {value}")
    return value
