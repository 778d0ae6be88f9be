import math
import unittest

from impactsim.backend.errors import DomainError
from impactsim.backend.impact_physics import (
    MEGATON_TNT_JOULES,
    AffectedAreas,
    ImpactBody,
    ImpactLocation,
    TsunamiRisk,
    affected_areas,
    calculate_impact,
    compute_kinetic_energy,
    crater_diameter_km,
    energy_to_megatons_tnt,
    estimate_casualties,
    estimate_mass_kg,
    seismic_magnitude,
    tsunami_risk,
)


class TestKineticEnergy(unittest.TestCase):

    def test_reference_impactor(self):
        energy = compute_kinetic_energy(1.5e12, 20.0)
        self.assertAlmostEqual(energy, 3.0e20, delta=1e8)
        self.assertAlmostEqual(energy_to_megatons_tnt(energy), 71701.72, places=1)

    def test_zero_velocity_gives_zero_energy(self):
        self.assertEqual(compute_kinetic_energy(1.0e9, 0.0), 0.0)

    def test_energy_grows_with_velocity(self):
        slow = compute_kinetic_energy(1.0e10, 11.0)
        fast = compute_kinetic_energy(1.0e10, 12.0)
        self.assertGreater(fast, slow)
        self.assertGreater(crater_diameter_km(fast), crater_diameter_km(slow))
        self.assertGreater(seismic_magnitude(fast), seismic_magnitude(slow))

    def test_rejects_non_positive_mass(self):
        with self.assertRaises(DomainError):
            compute_kinetic_energy(0.0, 20.0)
        with self.assertRaises(DomainError):
            compute_kinetic_energy(-5.0, 20.0)

    def test_rejects_negative_velocity(self):
        with self.assertRaises(DomainError):
            compute_kinetic_energy(1.0, -1.0)

    def test_tnt_scale_is_linear(self):
        joules = 8.6e19
        self.assertAlmostEqual(energy_to_megatons_tnt(joules) * 4.184e9 * 1e6 / joules, 1.0, places=12)


class TestCraterAndSeismic(unittest.TestCase):

    def test_crater_for_seventy_megatons(self):
        joules = 71.7 * MEGATON_TNT_JOULES
        expected = 71.7**0.25 * 0.1 * math.sin(math.radians(45))
        self.assertAlmostEqual(crater_diameter_km(joules, 45), expected, places=12)
        self.assertAlmostEqual(crater_diameter_km(joules, 45), 0.206, places=3)

    def test_grazing_impact_leaves_no_crater(self):
        self.assertEqual(crater_diameter_km(3.0e20, 0.0), 0.0)

    def test_crater_rejects_angles_out_of_range(self):
        with self.assertRaises(DomainError):
            crater_diameter_km(3.0e20, -10.0)
        with self.assertRaises(DomainError):
            crater_diameter_km(3.0e20, 190.0)

    def test_magnitude_for_seventy_megatons(self):
        self.assertAlmostEqual(seismic_magnitude(71.7 * MEGATON_TNT_JOULES), 5.11, places=2)

    def test_magnitude_is_capped(self):
        self.assertEqual(seismic_magnitude(1.0e10 * MEGATON_TNT_JOULES), 10.0)

    def test_small_yields_keep_negative_magnitude(self):
        magnitude = seismic_magnitude(1.0e-8 * MEGATON_TNT_JOULES)
        self.assertAlmostEqual(magnitude, 0.67 * -8 + 3.87, places=9)
        self.assertLess(magnitude, 0.0)

    def test_magnitude_of_zero_energy_is_a_domain_error(self):
        with self.assertRaises(DomainError):
            seismic_magnitude(0.0)


class TestTsunami(unittest.TestCase):

    def test_land_impact_has_no_tsunami(self):
        for joules in (0.0, 1.0e15, 3.0e20, 1.0e30):
            assessment = tsunami_risk(False, joules)
            self.assertEqual(assessment.risk, TsunamiRisk.NONE)
            self.assertEqual(assessment.wave_height_m, 0.0)

    def test_ocean_impact_without_energy(self):
        assessment = tsunami_risk(True, 0.0)
        self.assertEqual(assessment.risk, TsunamiRisk.LOW)
        self.assertEqual(assessment.wave_height_m, 0.0)

    def test_risk_tiers(self):
        self.assertEqual(tsunami_risk(True, 1.0 * MEGATON_TNT_JOULES).risk, TsunamiRisk.LOW)
        self.assertEqual(tsunami_risk(True, 1000.0 * MEGATON_TNT_JOULES).risk, TsunamiRisk.MEDIUM)
        high = tsunami_risk(True, 3.0e20)
        self.assertEqual(high.risk, TsunamiRisk.HIGH)
        self.assertAlmostEqual(high.wave_height_m, 2 * energy_to_megatons_tnt(3.0e20) ** 0.2, places=9)


class TestAreasAndCasualties(unittest.TestCase):

    def test_concentric_zones(self):
        areas = affected_areas(1.0, 2.0)
        self.assertAlmostEqual(areas.primary_km2, math.pi * 4)
        self.assertAlmostEqual(areas.secondary_km2, math.pi * 144)
        self.assertAlmostEqual(areas.tertiary_km2, math.pi * 1024)

    def test_casualties_use_default_density(self):
        casualties = estimate_casualties(affected_areas(1.0, 2.0))
        self.assertEqual(casualties.immediate, 565)
        self.assertEqual(casualties.secondary, 6785)
        self.assertEqual(casualties.affected, 16084)

    def test_casualties_scale_with_density(self):
        areas = AffectedAreas(primary_km2=10.0, secondary_km2=100.0, tertiary_km2=1000.0)
        casualties = estimate_casualties(areas, population_density=1000.0)
        self.assertEqual((casualties.immediate, casualties.secondary, casualties.affected), (9000, 30000, 100000))
        self.assertEqual(estimate_casualties(areas, population_density=0.0).affected, 0)

    def test_negative_density_is_rejected(self):
        with self.assertRaises(DomainError):
            estimate_casualties(affected_areas(1.0, 2.0), population_density=-1.0)


class TestCalculateImpact(unittest.TestCase):

    def test_full_chain(self):
        body = ImpactBody(mass_kg=1.5e12, velocity_kms=20.0, diameter_km=1.0, impact_angle_deg=45.0)
        result = calculate_impact(body, ImpactLocation(is_ocean=True, population_density=100.0))

        self.assertAlmostEqual(result.energy_joules, 3.0e20, delta=1e8)
        self.assertAlmostEqual(result.crater_diameter_km, 1.157, places=3)
        self.assertAlmostEqual(result.seismic_magnitude, 7.123, places=3)
        self.assertEqual(result.tsunami.risk, TsunamiRisk.HIGH)
        self.assertGreater(result.casualties.affected, result.casualties.immediate)

        payload = result.to_dict()
        self.assertEqual(payload["tsunami"]["risk"], "high")
        self.assertIn("primary_km2", payload["affected_area"])

    def test_default_location_is_land(self):
        body = ImpactBody(mass_kg=1.0e10, velocity_kms=15.0, diameter_km=0.2)
        self.assertEqual(calculate_impact(body).tsunami.risk, TsunamiRisk.NONE)

    def test_body_validation(self):
        with self.assertRaises(DomainError):
            ImpactBody(mass_kg=1.0, velocity_kms=0.0, diameter_km=1.0)
        with self.assertRaises(DomainError):
            ImpactBody(mass_kg=1.0, velocity_kms=1.0, diameter_km=-1.0)
        with self.assertRaises(DomainError):
            ImpactBody(mass_kg=1.0, velocity_kms=1.0, diameter_km=1.0, impact_angle_deg=95.0)

    def test_domain_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            ImpactBody(mass_kg=-1.0, velocity_kms=1.0, diameter_km=1.0)


class TestMassEstimate(unittest.TestCase):

    def test_one_kilometre_rocky_body(self):
        expected = (4.0 / 3.0) * math.pi * 500.0**3 * 2000.0
        self.assertAlmostEqual(estimate_mass_kg(1.0), expected, delta=expected * 1e-12)

    def test_density_override(self):
        self.assertAlmostEqual(estimate_mass_kg(1.0, 3000.0) / estimate_mass_kg(1.0), 1.5)

    def test_non_finite_diameter_is_rejected(self):
        with self.assertRaises(DomainError):
            estimate_mass_kg(float("inf"))



class TestNonFiniteInputs(unittest.TestCase):

    def test_energy_overflow_is_a_domain_error(self):
        with self.assertRaises(DomainError):
            compute_kinetic_energy(1.0, 1e160)
        with self.assertRaises(DomainError):
            calculate_impact(ImpactBody(mass_kg=1e300, velocity_kms=20.0, diameter_km=1.0))

    def test_nan_and_infinity_are_rejected(self):
        with self.assertRaises(DomainError):
            compute_kinetic_energy(float("nan"), 20.0)
        with self.assertRaises(DomainError):
            compute_kinetic_energy(1.0, float("inf"))
        with self.assertRaises(DomainError):
            energy_to_megatons_tnt(float("inf"))
        with self.assertRaises(DomainError):
            ImpactBody(mass_kg=float("inf"), velocity_kms=20.0, diameter_km=1.0)
        with self.assertRaises(DomainError):
            ImpactBody(mass_kg=1.0, velocity_kms=20.0, diameter_km=1.0, impact_angle_deg=float("nan"))

    def test_casualty_overflow_is_a_domain_error(self):
        areas = AffectedAreas(primary_km2=1e300, secondary_km2=1e300, tertiary_km2=1e300)
        with self.assertRaises(DomainError):
            estimate_casualties(areas, population_density=1e10)
        with self.assertRaises(DomainError):
            estimate_casualties(affected_areas(1.0, 2.0), population_density=float("nan"))


if __name__ == '__main__':
    unittest.main()
