import os
import unittest
from unittest.mock import patch

from impactsim.app import create_app
from impactsim.backend.regional import MAJOR_CITIES
from impactsim.config import Settings, get_settings


def make_client(**overrides):
    settings = Settings(use_live_apis=False, **overrides)
    app = create_app(settings)
    app.config.update(TESTING=True)
    return app.test_client()


class TestSimulateEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = make_client()

    def test_custom_impactor(self):
        response = self.client.post(
            "/api/simulate",
            json={"mass_kg": 1.5e12, "velocity_kms": 20, "diameter_km": 1.0, "angle_deg": 45, "is_ocean": True},
        )
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertAlmostEqual(data["impact"]["energy_joules"], 3.0e20, delta=1e8)
        self.assertEqual(data["impact"]["tsunami"]["risk"], "high")
        self.assertAlmostEqual(data["deflection"]["required_delta_v_kms"], 0.1)
        self.assertEqual(data["deflection"]["recommended_method"], "nuclear")
        self.assertEqual(set(data["deflection"]["methods"]), {"kinetic", "ion", "nuclear", "gravityTractor"})
        self.assertEqual(len(data["regional"]), 5)

    def test_defaults_come_from_catalogue(self):
        data = self.client.post("/api/simulate", json={"asteroid_id": "101955"}).get_json()
        self.assertEqual(data["inputs"]["asteroid_id"], "101955")
        self.assertEqual(data["inputs"]["velocity_kms"], 11.2)
        self.assertEqual(data["inputs"]["diameter_km"], 0.51)
        self.assertEqual(data["inputs"]["population_density"], 50.0)
        self.assertEqual(data["impact"]["tsunami"]["risk"], "none")

    def test_invalid_mass_is_rejected(self):
        response = self.client.post("/api/simulate", json={"mass_kg": -1})
        self.assertEqual(response.status_code, 400)
        self.assertIn("mass_kg", response.get_json()["error"])

    def test_non_numeric_input_is_rejected(self):
        response = self.client.post("/api/simulate", json={"velocity_kms": "fast"})
        self.assertEqual(response.status_code, 400)

    def test_zero_lead_time_is_rejected(self):
        response = self.client.post("/api/simulate", json={"lead_time_days": 0})
        self.assertEqual(response.status_code, 400)

    def test_non_finite_input_is_rejected(self):
        for value in ("inf", "nan", "-Infinity"):
            response = self.client.post("/api/simulate", json={"velocity_kms": value})
            self.assertEqual(response.status_code, 400, value)
            self.assertIn("finite", response.get_json()["error"])

    def test_overflowing_energy_is_rejected(self):
        response = self.client.post("/api/simulate", json={"mass_kg": 1e300})
        self.assertEqual(response.status_code, 400)


class TestOrbitAndFrameEndpoints(unittest.TestCase):

    def setUp(self):
        self.client = make_client()

    def test_orbit_path(self):
        data = self.client.get("/api/orbit?a=1.5&e=0.2&segments=4&deflected=1").get_json()
        self.assertEqual(len(data["path"]), 5)
        self.assertAlmostEqual(data["path"][0]["x"], 3.6)
        self.assertAlmostEqual(data["period_years"], 1.5**1.5)
        self.assertTrue(all(point["y"] == 0.5 for point in data["deflected_path"]))

    def test_orbit_without_deflection(self):
        data = self.client.get("/api/orbit").get_json()
        self.assertEqual(len(data["path"]), 101)
        self.assertNotIn("deflected_path", data)

    def test_parabolic_orbit_is_rejected(self):
        self.assertEqual(self.client.get("/api/orbit?e=1").status_code, 400)

    def test_segments_are_validated(self):
        for segments in ("nan", "inf", "0", "2.5", "100001"):
            response = self.client.get(f"/api/orbit?segments={segments}")
            self.assertEqual(response.status_code, 400, segments)

    def test_frame(self):
        data = self.client.post("/api/frame", json={"time": 0, "mass_kg": 1.5e12, "velocity_kms": 20}).get_json()
        self.assertAlmostEqual(data["position"]["x"], 3.6)
        self.assertEqual(data["mission_status"], "impact")

    def test_frame_with_kepler_model(self):
        response = self.client.post("/api/frame", json={"time": 1.0, "angle_model": "kepler"})
        self.assertEqual(response.status_code, 200)

    def test_frame_rejects_unknown_method(self):
        response = self.client.post("/api/frame", json={"deflection_method": "warp"})
        self.assertEqual(response.status_code, 400)


class TestCatalogueEndpoints(unittest.TestCase):

    def setUp(self):
        self.client = make_client()

    def test_asteroids(self):
        data = self.client.get("/api/asteroids?limit=3").get_json()
        self.assertEqual(len(data["objects"]), 3)
        self.assertEqual(data["objects"][0]["source"], "mock")

    def test_limits_are_validated(self):
        self.assertEqual(self.client.get("/api/asteroids?limit=-1").status_code, 400)
        self.assertEqual(self.client.get("/api/asteroids?limit=0").status_code, 400)
        self.assertEqual(self.client.get("/api/cities?limit=-2").status_code, 400)
        self.assertEqual(self.client.get("/api/cities?limit=nan").status_code, 400)
        self.assertEqual(len(self.client.get("/api/cities?limit=0").get_json()["cities"]), len(MAJOR_CITIES))

    def test_cities(self):
        data = self.client.get("/api/cities?lat=35.68&lon=139.69&magnitude=7&q=japan").get_json()
        self.assertEqual([city["name"] for city in data["cities"]], ["Tokyo", "Osaka"])
        self.assertEqual(data["cities"][0]["risk_level"], "critical")

    def test_deflection(self):
        data = self.client.get("/api/deflection?lead_time_days=2000&mass_kg=1e10").get_json()
        self.assertEqual(data["feasibility"], "high")
        self.assertTrue(all(method["viable"] for method in data["methods"]))


class TestSettings(unittest.TestCase):

    def test_environment_overrides(self):
        with patch.dict(os.environ, {"IMPACTSIM_ORBIT_SAMPLES": "12", "IMPACTSIM_ANGLE_MODEL": "kepler"}):
            settings = get_settings()
        self.assertEqual(settings.orbit_sample_points, 12)
        self.assertEqual(settings.angle_model, "kepler")

    def test_unknown_angle_model_fails_fast(self):
        with self.assertRaises(ValueError):
            create_app(Settings(use_live_apis=False, angle_model="epicycles"))


if __name__ == '__main__':
    unittest.main()
