"""Bundled asteroid catalogue used when the NASA NEO API is unavailable.

Entries are stored in the same shape the NEO API returns so they flow through
the regular payload normaliser.
"""
from __future__ import annotations

from typing import Dict, List

from .nasa_client import AsteroidRecord, record_from_payload

FALLBACK_NEO_PAYLOADS: List[Dict[str, object]] = [
    {
        "id": "2099942",
        "name": "99942 Apophis (2004 MN4)",
        "nasa_jpl_url": "http://ssd.jpl.nasa.gov/sbdb.cgi?sstr=2099942",
        "absolute_magnitude_h": 19.7,
        "estimated_diameter": {"kilometers": {"estimated_diameter_min": 0.31, "estimated_diameter_max": 0.69}},
        "is_potentially_hazardous_asteroid": True,
        "close_approach_data": [
            {
                "close_approach_date": "2029-04-13",
                "relative_velocity": {"kilometers_per_second": "7.42"},
                "miss_distance": {"kilometers": "38000"},
            }
        ],
    },
    {
        "id": "101955",
        "name": "101955 Bennu (1999 RQ36)",
        "nasa_jpl_url": "http://ssd.jpl.nasa.gov/sbdb.cgi?sstr=101955",
        "absolute_magnitude_h": 20.9,
        "estimated_diameter": {"kilometers": {"estimated_diameter_min": 0.45, "estimated_diameter_max": 0.51}},
        "is_potentially_hazardous_asteroid": True,
        "close_approach_data": [
            {
                "close_approach_date": "2135-09-25",
                "relative_velocity": {"kilometers_per_second": "11.2"},
                "miss_distance": {"kilometers": "750000"},
            }
        ],
    },
    {
        "id": "65803",
        "name": "65803 Didymos (1996 GT)",
        "nasa_jpl_url": "http://ssd.jpl.nasa.gov/sbdb.cgi?sstr=65803",
        "absolute_magnitude_h": 18.2,
        "estimated_diameter": {"kilometers": {"estimated_diameter_min": 0.7, "estimated_diameter_max": 0.85}},
        "is_potentially_hazardous_asteroid": False,
        "close_approach_data": [
            {
                "close_approach_date": "2123-05-05",
                "relative_velocity": {"kilometers_per_second": "8.9"},
                "miss_distance": {"kilometers": "5900000"},
            }
        ],
    },
    {
        "id": "4179",
        "name": "4179 Toutatis (1989 AC)",
        "nasa_jpl_url": "http://ssd.jpl.nasa.gov/sbdb.cgi?sstr=4179",
        "absolute_magnitude_h": 15.3,
        "estimated_diameter": {"kilometers": {"estimated_diameter_min": 4.6, "estimated_diameter_max": 5.4}},
        "is_potentially_hazardous_asteroid": True,
        "close_approach_data": [
            {
                "close_approach_date": "2069-11-05",
                "relative_velocity": {"kilometers_per_second": "13.5"},
                "miss_distance": {"kilometers": "3000000"},
            }
        ],
    },
]


class MockDataManager:
    """Provides the deterministic offline catalogue."""

    def __init__(self) -> None:
        self._catalog: Dict[str, AsteroidRecord] = {}
        for payload in FALLBACK_NEO_PAYLOADS:
            record = record_from_payload(payload, source="mock")
            self._catalog[record.asteroid_id] = record
        self.default_asteroid_id = next(iter(self._catalog))

    def get_asteroid(self, asteroid_id: str | None) -> AsteroidRecord:
        """Return the requested asteroid, or the default one when unknown."""

        return self._catalog.get(asteroid_id or "", self._catalog[self.default_asteroid_id])

    def has_asteroid(self, asteroid_id: str) -> bool:
        return asteroid_id in self._catalog

    def catalog_snapshot(self, *, limit: int = 30) -> List[AsteroidRecord]:
        return list(self._catalog.values())[:limit]
