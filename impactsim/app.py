"""ImpactSim Flask application entrypoint."""
from __future__ import annotations

from typing import Any, Dict, Optional

import logging
import math

from flask import Flask, jsonify, request
from flask_cors import CORS

from .config import Settings, get_settings
from .backend import (
    AsteroidDataService,
    DeflectionMethod,
    DomainError,
    ImpactBody,
    ImpactLocation,
    OrbitState,
    SimulationParameters,
    calculate_impact,
    default_impact_site,
    deflection_requirement,
    evaluate_frame,
    get_angle_model,
    orbital_period,
    rank_cities,
    sample_deflected_path,
    sample_orbit_path,
    score_deflection_methods,
)
from .backend.deflection import best_deflection_method
from .backend.errors import require
from .backend.impact_physics import DEFAULT_IMPACT_ANGLE_DEG
from .backend.orbital_kinematics import MAX_PATH_SEGMENTS

logger = logging.getLogger(__name__)

DEFAULT_LEAD_TIME_DAYS = 365.0
REGIONAL_PREVIEW_LIMIT = 5
MAX_LIST_LIMIT = 1000


def _number(source: Dict[str, Any], key: str, default: Optional[float] = None) -> Optional[float]:
    value = source.get(key)
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise DomainError(f"{key} must be numeric, got {value!r}") from exc
    require(math.isfinite(number), f"{key} must be finite, got {value!r}")
    return number


def _count(source: Dict[str, Any], key: str, default: int, *, minimum: int, maximum: int) -> int:
    value = _number(source, key, default)
    require(float(value).is_integer(), f"{key} must be a whole number, got {value:g}")
    require(minimum <= value <= maximum, f"{key} must lie in [{minimum}, {maximum}], got {value:g}")
    return int(value)


def _flag(source: Dict[str, Any], key: str) -> bool:
    value = source.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _deflection_method(value: Optional[str]) -> DeflectionMethod:
    try:
        return DeflectionMethod(value or DeflectionMethod.KINETIC.value)
    except ValueError as exc:
        raise DomainError(f"Unknown deflection method {value!r}") from exc


def create_app(settings: Optional[Settings] = None, data_service: Optional[AsteroidDataService] = None) -> Flask:
    settings = settings or get_settings()
    app = Flask(__name__)
    app.json.sort_keys = False
    CORS(app)

    data_service = data_service or AsteroidDataService(
        nasa_api_key=settings.nasa_api_key,
        enable_live_apis=settings.use_live_apis,
        default_asteroid_id=settings.default_asteroid_id,
    )
    default_model = get_angle_model(settings.angle_model)

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError) -> Any:
        logger.info("Rejected request %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 400

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> Any:
        payload = request.get_json(silent=True) or {}
        record = data_service.get_asteroid(payload.get("asteroid_id"))

        # Fill missing inputs with the selected asteroid's reference values.
        body = ImpactBody(
            mass_kg=_number(payload, "mass_kg", record.mass_kg),
            velocity_kms=_number(payload, "velocity_kms", record.velocity_kms),
            diameter_km=_number(payload, "diameter_km", record.diameter_km),
            impact_angle_deg=_number(payload, "angle_deg", DEFAULT_IMPACT_ANGLE_DEG),
        )
        location = ImpactLocation(
            is_ocean=_flag(payload, "is_ocean"),
            population_density=_number(payload, "population_density", settings.population_density),
        )
        lead_time_days = _number(payload, "lead_time_days", DEFAULT_LEAD_TIME_DAYS)
        impact_lat, impact_lon = default_impact_site(record.asteroid_id, body.diameter_km)
        impact_lat = _number(payload, "impact_lat", impact_lat)
        impact_lon = _number(payload, "impact_lon", impact_lon)

        result = calculate_impact(body, location)
        requirement = deflection_requirement(body.mass_kg, lead_time_days)
        methods = score_deflection_methods(lead_time_days)
        best = best_deflection_method(lead_time_days)
        regional = rank_cities(impact_lat, impact_lon, result.seismic_magnitude, limit=REGIONAL_PREVIEW_LIMIT)

        return jsonify(
            {
                "inputs": {
                    "asteroid_id": record.asteroid_id,
                    "mass_kg": body.mass_kg,
                    "velocity_kms": body.velocity_kms,
                    "diameter_km": body.diameter_km,
                    "angle_deg": body.impact_angle_deg,
                    "is_ocean": location.is_ocean,
                    "population_density": location.population_density,
                    "lead_time_days": lead_time_days,
                    "impact_lat": impact_lat,
                    "impact_lon": impact_lon,
                },
                "asteroid": record.to_dict(),
                "impact": result.to_dict(),
                "deflection": {
                    "required_delta_v_kms": requirement.required_delta_v_kms,
                    "energy_joules": requirement.energy_joules,
                    "feasibility": requirement.feasibility,
                    "recommended_method": best.method.value if best else None,
                    "methods": {method.value: item.to_dict() for method, item in methods.items()},
                },
                "regional": [item.to_dict() for item in regional],
            }
        )

    @app.route("/api/frame", methods=["POST"])
    def frame() -> Any:
        payload = request.get_json(silent=True) or {}
        record = data_service.get_asteroid(payload.get("asteroid_id"))
        base = SimulationParameters.from_asteroid(record)

        params = base.updated(
            mass_kg=_number(payload, "mass_kg", base.mass_kg),
            velocity_kms=_number(payload, "velocity_kms", base.velocity_kms),
            diameter_km=_number(payload, "diameter_km", base.diameter_km),
            angle_deg=_number(payload, "angle_deg", base.angle_deg),
            orbit=OrbitState(
                semi_major_axis_au=_number(payload, "semi_major_axis_au", base.orbit.semi_major_axis_au),
                eccentricity=_number(payload, "eccentricity", base.orbit.eccentricity),
                phase_rad=_number(payload, "phase_rad", 0.0),
            ),
            location=ImpactLocation(
                is_ocean=_flag(payload, "is_ocean"),
                population_density=_number(payload, "population_density", settings.population_density),
            ),
        ).with_deflection(
            _deflection_method(payload.get("deflection_method")),
            _number(payload, "delta_v_kms", 0.0),
        )

        model = get_angle_model(payload["angle_model"]) if payload.get("angle_model") else default_model
        snapshot = evaluate_frame(params, _number(payload, "time", 0.0), model)
        return jsonify(snapshot.to_dict())

    @app.route("/api/orbit", methods=["GET"])
    def orbit() -> Any:
        semi_major_axis = _number(request.args, "a", 1.5)
        eccentricity = _number(request.args, "e", 0.2)
        segments = _count(
            request.args, "segments", settings.orbit_sample_points, minimum=1, maximum=MAX_PATH_SEGMENTS
        )

        response: Dict[str, Any] = {
            "semi_major_axis_au": semi_major_axis,
            "eccentricity": eccentricity,
            "period_years": orbital_period(semi_major_axis),
            "path": [point.as_dict() for point in sample_orbit_path(semi_major_axis, eccentricity, segments)],
        }
        if _flag(request.args, "deflected"):
            response["deflected_path"] = [
                point.as_dict() for point in sample_deflected_path(semi_major_axis, eccentricity, segments)
            ]
        return jsonify(response)

    @app.route("/api/deflection", methods=["GET"])
    def deflection() -> Any:
        record = data_service.get_asteroid(request.args.get("asteroid_id"))
        mass_kg = _number(request.args, "mass_kg", record.mass_kg)
        lead_time_days = _number(request.args, "lead_time_days", DEFAULT_LEAD_TIME_DAYS)
        requirement = deflection_requirement(mass_kg, lead_time_days)
        return jsonify(
            {
                "mass_kg": mass_kg,
                "lead_time_days": lead_time_days,
                "required_delta_v_kms": requirement.required_delta_v_kms,
                "energy_joules": requirement.energy_joules,
                "feasibility": requirement.feasibility,
                "methods": [item.to_dict() for item in score_deflection_methods(lead_time_days).values()],
            }
        )

    @app.route("/api/asteroids", methods=["GET"])
    def asteroid_catalog() -> Any:
        limit = _count(request.args, "limit", 30, minimum=1, maximum=MAX_LIST_LIMIT)
        return jsonify({"objects": [record.to_dict() for record in data_service.list_catalog(limit=limit)]})

    @app.route("/api/cities", methods=["GET"])
    def cities() -> Any:
        predictions = rank_cities(
            _number(request.args, "lat", settings.default_latitude),
            _number(request.args, "lon", settings.default_longitude),
            _number(request.args, "magnitude"),
            query=request.args.get("q"),
            limit=_count(request.args, "limit", 0, minimum=0, maximum=MAX_LIST_LIMIT) or None,
        )
        return jsonify({"cities": [item.to_dict() for item in predictions]})

    return app


if __name__ == "__main__":
    _settings = get_settings()
    create_app(_settings).run(debug=_settings.debug)
