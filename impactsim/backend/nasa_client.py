"""NASA Near-Earth Object API integration helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import logging

import requests

from .impact_physics import estimate_mass_kg

logger = logging.getLogger(__name__)

NASA_API_ROOT = "https://api.nasa.gov/neo/rest/v1"
DEFAULT_TIMEOUT = 10

# Values used when the NEO payload leaves a field out.
DEFAULT_DIAMETER_KM = 1.0
DEFAULT_VELOCITY_KMS = 20.0
DEFAULT_MISS_DISTANCE_KM = 500000.0
DEFAULT_ABSOLUTE_MAGNITUDE = 20.0
DEFAULT_SEMI_MAJOR_AXIS_AU = 1.5
DEFAULT_ECCENTRICITY = 0.2
DEFAULT_INCLINATION_DEG = 15.0


class NASAAPIError(RuntimeError):
    """Raised when the NASA NEO API request fails."""


@dataclass(frozen=True)
class AsteroidRecord:
    """Asteroid attributes the simulator needs, normalised from a NEO payload."""

    asteroid_id: str
    name: str
    diameter_km: float
    mass_kg: float
    velocity_kms: float
    absolute_magnitude_h: float
    is_potentially_hazardous: bool
    miss_distance_km: float
    close_approach_date: Optional[str]
    semi_major_axis_au: float
    eccentricity: float
    inclination_deg: float
    nasa_jpl_url: Optional[str]
    source: str = "nasa"

    def to_dict(self) -> Dict[str, object]:
        return dict(self.__dict__)


def record_from_payload(payload: Dict[str, object], *, source: str = "nasa") -> AsteroidRecord:
    """Normalise a NEO feed/lookup object into an :class:`AsteroidRecord`."""

    kilometres = (payload.get("estimated_diameter") or {}).get("kilometers") or {}
    diameter_km = _safe_float(kilometres.get("estimated_diameter_max")) or DEFAULT_DIAMETER_KM

    approaches = payload.get("close_approach_data") or []
    first_approach = approaches[0] if approaches else {}
    velocity_kms = _safe_float((first_approach.get("relative_velocity") or {}).get("kilometers_per_second"))
    miss_distance_km = _safe_float((first_approach.get("miss_distance") or {}).get("kilometers"))

    asteroid_id = str(payload.get("id") or "")
    return AsteroidRecord(
        asteroid_id=asteroid_id,
        name=payload.get("name") or payload.get("designation") or f"Asteroid {asteroid_id}",
        diameter_km=diameter_km,
        mass_kg=estimate_mass_kg(diameter_km),
        velocity_kms=velocity_kms or DEFAULT_VELOCITY_KMS,
        absolute_magnitude_h=_safe_float(payload.get("absolute_magnitude_h")) or DEFAULT_ABSOLUTE_MAGNITUDE,
        is_potentially_hazardous=bool(payload.get("is_potentially_hazardous_asteroid", False)),
        miss_distance_km=miss_distance_km or DEFAULT_MISS_DISTANCE_KM,
        close_approach_date=first_approach.get("close_approach_date"),
        # The scene draws every object on the same simplified orbit.
        semi_major_axis_au=DEFAULT_SEMI_MAJOR_AXIS_AU,
        eccentricity=DEFAULT_ECCENTRICITY,
        inclination_deg=DEFAULT_INCLINATION_DEG,
        nasa_jpl_url=payload.get("nasa_jpl_url"),
        source=source,
    )


class NASAClient:
    """Lightweight NASA NEO API wrapper with caching."""

    def __init__(self, api_key: str, session: Optional[requests.Session] = None) -> None:
        self.api_key = api_key or "DEMO_KEY"
        self.session = session or requests.Session()
        self._neo_cache: Dict[str, AsteroidRecord] = {}
        self._browse_cache: Dict[tuple[int, int], List[AsteroidRecord]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fetch_asteroid(self, asteroid_id: str) -> AsteroidRecord:
        if asteroid_id in self._neo_cache:
            return self._neo_cache[asteroid_id]
        record = record_from_payload(self._request_json(f"/neo/{asteroid_id}"))
        self._neo_cache[asteroid_id] = record
        return record

    def browse(self, *, page: int = 0, page_size: int = 50) -> List[AsteroidRecord]:
        cache_key = (page, page_size)
        if cache_key in self._browse_cache:
            return self._browse_cache[cache_key]

        payload = self._request_json("/neo/browse", params={"page": page, "size": page_size})
        records: List[AsteroidRecord] = []
        for item in payload.get("near_earth_objects", []):
            try:
                records.append(record_from_payload(item))
            except (TypeError, ValueError, AttributeError) as exc:
                logger.debug("Skipping unparseable NEO entry %s: %s", item.get("id"), exc)
        self._browse_cache[cache_key] = records
        return records

    def feed(self, start_date: str, end_date: str) -> List[AsteroidRecord]:
        """Objects making close approaches between two ISO dates."""

        payload = self._request_json("/feed", params={"start_date": start_date, "end_date": end_date})
        records: List[AsteroidRecord] = []
        for day in sorted(payload.get("near_earth_objects", {})):
            for item in payload["near_earth_objects"][day]:
                records.append(record_from_payload(item))
        return records

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _request_json(self, path: str, params: Optional[Dict[str, object]] = None) -> Dict[str, object]:
        url = f"{NASA_API_ROOT}{path}"
        merged_params = {"api_key": self.api_key}
        if params:
            merged_params.update(params)
        try:
            response = self.session.get(url, params=merged_params, timeout=DEFAULT_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise NASAAPIError(str(exc)) from exc


def _safe_float(value: object) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None
