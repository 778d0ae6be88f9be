"""Regional impact predictions for major cities around the globe."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import math

from .errors import require

EARTH_RADIUS_KM = 6371.0
INFLUENCE_RADIUS_KM = 10000.0
DEFAULT_SEISMIC_BASE = 7.5
DEFAULT_IMPACT_SITE = (20.0, -40.0)

# Peak effects at ground zero, scaled down linearly with distance.
PEAK_TSUNAMI_HEIGHT_M = 15.0
PEAK_WIND_SPEED_KMH = 200.0
PEAK_TEMPERATURE_RISE_C = 50.0


@dataclass(frozen=True)
class City:
    name: str
    country: str
    lat: float
    lon: float
    population: int
    coastal: bool


@dataclass(frozen=True)
class CityImpact:
    city: City
    distance_km: float
    seismic_magnitude: float
    tsunami_height_m: float
    wind_speed_kmh: float
    temperature_rise_c: float
    affected_population: int
    risk_level: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.city.name,
            "country": self.city.country,
            "lat": self.city.lat,
            "lon": self.city.lon,
            "distance_km": round(self.distance_km),
            "seismic_magnitude": round(self.seismic_magnitude, 2),
            "tsunami_height_m": round(self.tsunami_height_m, 1),
            "wind_speed_kmh": round(self.wind_speed_kmh),
            "temperature_rise_c": round(self.temperature_rise_c, 1),
            "affected_population": self.affected_population,
            "risk_level": self.risk_level,
        }


MAJOR_CITIES: Tuple[City, ...] = (
    City("Mumbai", "India", 19.07, 72.87, 20411000, True),
    City("Delhi", "India", 28.61, 77.20, 16787000, False),
    City("Chennai", "India", 13.08, 80.27, 7088000, True),
    City("New York", "USA", 40.71, -74.00, 8336000, True),
    City("Los Angeles", "USA", 34.05, -118.24, 3979000, True),
    City("Chicago", "USA", 41.87, -87.62, 2716000, False),
    City("Shanghai", "China", 31.23, 121.47, 24256800, True),
    City("Beijing", "China", 39.90, 116.40, 21516000, False),
    City("Tokyo", "Japan", 35.68, 139.69, 13960000, True),
    City("Osaka", "Japan", 34.69, 135.50, 2725000, True),
    City("London", "UK", 51.50, -0.12, 8982000, False),
    City("Manchester", "UK", 53.48, -2.24, 547627, False),
    City("São Paulo", "Brazil", -23.55, -46.63, 12325000, False),
    City("Rio de Janeiro", "Brazil", -22.90, -43.17, 6748000, True),
    City("Sydney", "Australia", -33.86, 151.20, 5312000, True),
    City("Melbourne", "Australia", -37.81, 144.96, 5078000, True),
    City("Paris", "France", 48.85, 2.35, 2161000, False),
    City("Marseille", "France", 43.29, 5.36, 869815, True),
    City("Berlin", "Germany", 52.52, 13.40, 3645000, False),
    City("Hamburg", "Germany", 53.55, 9.99, 1841000, True),
    City("Toronto", "Canada", 43.65, -79.38, 2930000, False),
    City("Vancouver", "Canada", 49.28, -123.12, 631486, True),
    City("Mexico City", "Mexico", 19.43, -99.13, 8918000, False),
    City("Cancún", "Mexico", 21.16, -86.85, 628306, True),
    City("Seoul", "South Korea", 37.56, 126.97, 9776000, False),
    City("Busan", "South Korea", 35.17, 129.07, 3449000, True),
    City("Rome", "Italy", 41.90, 12.49, 2873000, False),
    City("Naples", "Italy", 40.85, 14.26, 967069, True),
    City("Madrid", "Spain", 40.41, -3.70, 3223000, False),
    City("Barcelona", "Spain", 41.38, 2.17, 1620000, True),
    City("Moscow", "Russia", 55.75, 37.61, 12506000, False),
    City("Saint Petersburg", "Russia", 59.93, 30.36, 5384000, True),
)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points on a spherical Earth."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _risk_level(distance_factor: float) -> str:
    if distance_factor > 0.7:
        return "critical"
    if distance_factor > 0.4:
        return "high"
    if distance_factor > 0.2:
        return "moderate"
    return "low"


def predict_city_impact(
    city: City,
    impact_lat: float,
    impact_lon: float,
    seismic_magnitude: Optional[float] = None,
) -> CityImpact:
    distance_km = haversine_km(city.lat, city.lon, impact_lat, impact_lon)
    distance_factor = max(0.0, 1.0 - distance_km / INFLUENCE_RADIUS_KM)
    # A zero or missing magnitude falls back to a representative large event.
    base_seismic = seismic_magnitude or DEFAULT_SEISMIC_BASE

    return CityImpact(
        city=city,
        distance_km=distance_km,
        seismic_magnitude=max(0.0, base_seismic * distance_factor),
        tsunami_height_m=PEAK_TSUNAMI_HEIGHT_M * distance_factor if city.coastal else 0.0,
        wind_speed_kmh=PEAK_WIND_SPEED_KMH * distance_factor,
        temperature_rise_c=PEAK_TEMPERATURE_RISE_C * distance_factor,
        affected_population=math.floor(city.population * distance_factor),
        risk_level=_risk_level(distance_factor),
    )


def rank_cities(
    impact_lat: float,
    impact_lon: float,
    seismic_magnitude: Optional[float] = None,
    *,
    query: Optional[str] = None,
    limit: Optional[int] = None,
    cities: Iterable[City] = MAJOR_CITIES,
) -> List[CityImpact]:
    """Predictions for every matching city, nearest first."""

    require(limit is None or limit >= 0, f"limit must be non-negative, got {limit}")
    needle = (query or "").strip().lower()
    selected = [
        city for city in cities
        if not needle or needle in city.name.lower() or needle in city.country.lower()
    ]
    predictions = sorted(
        (predict_city_impact(city, impact_lat, impact_lon, seismic_magnitude) for city in selected),
        key=lambda item: item.distance_km,
    )
    return predictions[:limit] if limit is not None else predictions


def default_impact_site(asteroid_id: Optional[str] = None, diameter_km: Optional[float] = None) -> Tuple[float, float]:
    """Deterministic map location for an asteroid, so each object lands somewhere different."""

    if asteroid_id is None and diameter_km is None:
        return DEFAULT_IMPACT_SITE
    try:
        numeric_id = int(asteroid_id or "0")
    except ValueError:
        numeric_id = 0
    base = numeric_id + math.floor((diameter_km or 1.0) * 100 + 0.5)
    return round(math.sin(base) * 60, 2), round(math.cos(base) * 180, 2)
