"""High-level data service combining the NASA NEO API with bundled fallbacks."""
from __future__ import annotations

from typing import List, Optional

import logging

from .data_mock import MockDataManager
from .impact_physics import DEFAULT_IMPACT_ANGLE_DEG, ImpactBody
from .nasa_client import AsteroidRecord, NASAAPIError, NASAClient

logger = logging.getLogger(__name__)


class AsteroidDataService:
    """Coordinates live NEO lookups with the deterministic offline catalogue."""

    def __init__(
        self,
        *,
        nasa_api_key: str,
        enable_live_apis: bool = False,
        default_asteroid_id: Optional[str] = None,
        nasa_client: Optional[NASAClient] = None,
    ) -> None:
        self.enable_live_apis = enable_live_apis
        self.mock_manager = MockDataManager()
        self.default_asteroid_id = default_asteroid_id or self.mock_manager.default_asteroid_id
        if nasa_client is None and enable_live_apis:
            nasa_client = NASAClient(nasa_api_key)
        self.nasa_client = nasa_client if enable_live_apis else None

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    def get_asteroid(self, asteroid_id: Optional[str] = None) -> AsteroidRecord:
        resolved_id = asteroid_id or self.default_asteroid_id

        if self.nasa_client is not None and not self.mock_manager.has_asteroid(resolved_id):
            try:
                return self.nasa_client.fetch_asteroid(resolved_id)
            except NASAAPIError as exc:
                logger.warning("NASA NEO lookup failed for %s, using bundled catalogue: %s", resolved_id, exc)
        return self.mock_manager.get_asteroid(resolved_id)

    def list_catalog(self, *, limit: int = 30) -> List[AsteroidRecord]:
        records: List[AsteroidRecord] = []
        if self.nasa_client is not None:
            try:
                records.extend(self.nasa_client.browse(page_size=limit))
            except NASAAPIError as exc:
                logger.warning("NASA catalogue fetch failed, using bundled catalogue: %s", exc)
        if not records:
            records.extend(self.mock_manager.catalog_snapshot(limit=limit))
        return records[:limit]

    # ------------------------------------------------------------------
    # Conversions into the numeric core
    # ------------------------------------------------------------------
    @staticmethod
    def impact_body_for(record: AsteroidRecord, angle_deg: float = DEFAULT_IMPACT_ANGLE_DEG) -> ImpactBody:
        return ImpactBody(
            mass_kg=record.mass_kg,
            velocity_kms=record.velocity_kms,
            diameter_km=record.diameter_km,
            impact_angle_deg=angle_deg,
        )
