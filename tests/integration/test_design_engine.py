"""
Integration tests for the full transformer design pipeline

Runs the engine end to end and checks the cross-module properties of a
finished design: convergence, determinism, mass balance, efficiency and
fallback reporting.
"""

import unittest
from dataclasses import replace
from transformer_designer import (
    AdvancedOptions,
    ConvergenceSettings,
    CostEstimationOptions,
    DesignOrchestrator,
    DesignRequirements,
    design,
    summarize,
    validate,
)


RATINGS = [
    dict(rated_power_kva=500, primary_voltage_v=12470, secondary_voltage_v=208),
    dict(rated_power_kva=1500, primary_voltage_v=13800, secondary_voltage_v=480),
    dict(rated_power_kva=3000, primary_voltage_v=34500, secondary_voltage_v=4160),
    dict(rated_power_kva=100, primary_voltage_v=7200, secondary_voltage_v=240, phases=1,
         target_impedance_pct=2.5),
    dict(rated_power_kva=10000, primary_voltage_v=69000, secondary_voltage_v=13800,
         target_impedance_pct=8.0),
]


def _impedance_warnings(result):
    return [w for w in result.warnings if w.startswith("Calculated impedance")]


class TestReferenceDesign(unittest.TestCase):
    """Test the 1500 kVA, 13.8 kV / 480 V reference design"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
            target_impedance_pct=5.75,
        )
        self.result = design(self.reqs)
        self.design = self.result.design

    def test_success_without_warnings(self):
        """Test the reference rating designs cleanly"""
        self.assertTrue(self.result.success)
        self.assertEqual(self.result.errors, [])
        self.assertEqual(self.result.warnings, [])

    def test_impedance_converged(self):
        """Test %Z lands near target after one window adjustment"""
        self.assertTrue(self.design.converged)
        self.assertEqual(self.design.iterations, 1)
        self.assertGreaterEqual(self.design.impedance.percent_z, 5.45)
        self.assertLessEqual(self.design.impedance.percent_z, 6.05)

    def test_window_within_bounds(self):
        """Test window height stays between 2d and 8d"""
        d = self.design.core.core_diameter_mm
        self.assertGreaterEqual(self.design.core.window_height_mm, 2 * d)
        self.assertLessEqual(self.design.core.window_height_mm, 8 * d)
        self.assertEqual(self.design.core.limb_height_mm, self.design.core.window_height_mm)

    def test_mass_balance(self):
        """Test total weight is the sum of its parts"""
        parts = (
            self.design.core.core_weight_kg
            + self.design.hv_winding.weight_kg
            + self.design.lv_winding.weight_kg
            + self.design.tank.tank_weight_kg
            + self.design.tank.accessory_allowance_kg
            + self.design.thermal.oil_weight_kg
        )
        self.assertAlmostEqual(self.design.tank.total_weight_kg, parts, delta=1)
        self.assertGreater(self.design.tank.total_weight_kg, self.design.tank.shipping_weight_kg)

    def test_efficiency_ordering(self):
        """Test maximum efficiency bounds every sampled point"""
        losses = self.design.losses
        for point in losses.efficiency_curve:
            self.assertGreaterEqual(losses.max_efficiency_pct, point.efficiency_pct)

    def test_provisional_and_patched_hv(self):
        """Test both HV windings are kept and the patched one sits outside LV"""
        provisional = self.design.hv_provisional
        patched = self.design.hv_winding
        self.assertTrue(provisional.provisional)
        self.assertFalse(patched.provisional)
        self.assertGreater(patched.inner_radius_mm, self.design.lv_winding.outer_radius_mm)
        self.assertLess(provisional.inner_radius_mm, patched.inner_radius_mm)

    def test_thermal_within_limits(self):
        """Test rises stay inside the 65°C class"""
        self.assertLessEqual(self.design.thermal.top_oil_rise_c, 65)
        self.assertLessEqual(self.design.thermal.hot_spot_rise_c, 80)

    def test_step_ledger(self):
        """Test the final ledger covers every stage once per final pass"""
        categories = {s.category for s in self.design.steps}
        self.assertEqual(categories, {"core", "winding", "losses", "impedance", "thermal", "tank"})
        percent_z = [s for s in self.design.steps if s.id == "percent-z"]
        self.assertEqual(len(percent_z), 1)
        self.assertEqual(percent_z[0].result.value, self.design.impedance.percent_z)

    def test_prune_history(self):
        """Test one prune per iteration plus the final losses and impedance discards"""
        self.assertEqual(len(self.design.prune_history), self.design.iterations + 2)
        self.assertEqual(self.design.prune_history[0].kept_categories, ("core",))

    def test_cost_attached(self):
        """Test the cost estimate is part of the design"""
        self.assertIsNotNone(self.design.cost)
        self.assertGreater(self.design.cost.total_cost, self.design.cost.total_materials)

    def test_summary(self):
        """Test the plaintext report sections"""
        text = summarize(self.design)
        for heading in ("TRANSFORMER DESIGN SUMMARY", "ELECTRICAL DATA", "PHYSICAL DATA", "THERMAL DATA"):
            self.assertIn(heading, text)
        self.assertIn("Rating:         1500 kVA, 3-phase", text)
        self.assertIn("Voltages:       13.8kV / 480V", text)
        self.assertEqual(text, DesignOrchestrator.summarize(self.design))


class TestDeterminism(unittest.TestCase):
    """Test repeated runs give identical designs"""

    def test_identical_inputs_identical_designs(self):
        """Test two runs differ only in timestamp"""
        reqs = DesignRequirements(rated_power_kva=2500, primary_voltage_v=13800, secondary_voltage_v=480)
        first = design(reqs).design
        second = design(reqs).design
        self.assertEqual(replace(first, timestamp=second.timestamp), second)


class TestConvergence(unittest.TestCase):
    """Test the window-height loop across a range of ratings"""

    def test_iteration_bound(self):
        """Test the loop never exceeds its cap and reports misses once"""
        for kwargs in RATINGS:
            with self.subTest(rating=kwargs["rated_power_kva"]):
                result = design(DesignRequirements(**kwargs))
                self.assertTrue(result.success, result.errors)
                self.assertLessEqual(result.design.iterations, 8)
                if result.design.converged:
                    self.assertEqual(_impedance_warnings(result), [])
                else:
                    self.assertEqual(len(_impedance_warnings(result)), 1)

    def test_unreachable_target(self):
        """Test a 1% target clips the window and warns once"""
        reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
            target_impedance_pct=1.0,
        )
        self.assertFalse(validate(reqs).valid)
        result = design(reqs)
        self.assertTrue(result.success)
        self.assertFalse(result.design.converged)
        warnings = _impedance_warnings(result)
        self.assertEqual(len(warnings), 1)
        self.assertIn("higher than target (1%)", warnings[0])
        core = result.design.core
        self.assertEqual(core.window_height_mm, 8 * core.core_diameter_mm)

    def test_custom_settings(self):
        """Test a zero iteration cap skips the loop"""
        reqs = DesignRequirements(rated_power_kva=1500, primary_voltage_v=13800, secondary_voltage_v=480)
        result = design(reqs, settings=ConvergenceSettings(max_iterations=0))
        self.assertTrue(result.success)
        self.assertEqual(result.design.iterations, 0)
        self.assertEqual(len(result.design.prune_history), 2)
        self.assertEqual(len(_impedance_warnings(result)), 1)


class TestInputHandling(unittest.TestCase):
    """Test validation and failure reporting"""

    def test_validate_partial(self):
        """Test advisory validation of an incomplete form"""
        check = validate({"rated_power_kva": 500, "primary_voltage_v": 480, "secondary_voltage_v": 13800})
        self.assertFalse(check.valid)
        self.assertIn("Primary voltage must be greater than secondary voltage", check.issues)

    def test_validate_target_range(self):
        """Test impedance outside 2-15% is flagged"""
        check = validate({"rated_power_kva": 500, "primary_voltage_v": 13800,
                          "secondary_voltage_v": 480, "target_impedance_pct": 20})
        self.assertEqual(check.issues, ["Target impedance should be between 2% and 15%"])

    def test_inverted_voltages_fail(self):
        """Test the engine reports inverted voltages as a failure"""
        reqs = DesignRequirements(rated_power_kva=500, primary_voltage_v=480, secondary_voltage_v=13800)
        result = design(reqs)
        self.assertFalse(result.success)
        self.assertIsNone(result.design)
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.errors[0].startswith("Design calculation failed:"))

    def test_zero_power_fails(self):
        """Test zero rating never raises"""
        result = design(DesignRequirements(rated_power_kva=0, primary_voltage_v=13800, secondary_voltage_v=480))
        self.assertFalse(result.success)
        self.assertIn("Rated power must be greater than 0", result.errors[0])


class TestCatalogFallbacks(unittest.TestCase):
    """Test unknown catalog keys degrade to defaults with a warning"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(rated_power_kva=1500, primary_voltage_v=13800, secondary_voltage_v=480)

    def test_unknown_steel_grade(self):
        """Test unknown steel grade warns and designs with M4"""
        result = design(self.reqs, AdvancedOptions(steel_grade="M99"))
        self.assertTrue(result.success)
        self.assertEqual(result.design.core.steel_grade.id, "m4")
        self.assertEqual(len([w for w in result.warnings if "'M99'" in w]), 1)

    def test_unknown_cooling_class(self):
        """Test unknown cooling class is reported once"""
        result = design(self.reqs.model_copy(update={"cooling_class": "XYZ"}))
        self.assertTrue(result.success)
        self.assertEqual(len([w for w in result.warnings if "'XYZ'" in w]), 1)

    def test_unknown_conductor(self):
        """Test unknown conductor material designs with copper"""
        result = design(self.reqs.model_copy(update={"conductor_material": "gold"}))
        self.assertTrue(result.success)
        self.assertEqual(result.design.hv_winding.material, "copper")
        self.assertEqual(len([w for w in result.warnings if "'gold'" in w]), 1)

    def test_unknown_tap_changer_type(self):
        """Test unknown tap changer type is priced as no-load and reported once"""
        reqs = DesignRequirements(rated_power_kva=1000, primary_voltage_v=13800, secondary_voltage_v=480)
        result = design(reqs, cost_options=CostEstimationOptions(tap_changer_type="bogus"))
        self.assertTrue(result.success, result.errors)
        self.assertEqual(len([w for w in result.warnings if "'bogus'" in w]), 1)
        cost = result.design.cost
        self.assertEqual(cost.tap_changer, 1800)
        self.assertEqual(len(cost.warnings), 1)
        self.assertEqual(cost.warnings[0].fallback, "no_load")


def test_reference_fixture_designs(requirements_1500kva, default_options):
    """Test the shared 1500 kVA fixture through the orchestrator"""
    result = DesignOrchestrator().design(requirements_1500kva, default_options)
    assert result.success
    assert result.design.options == default_options
    assert result.design.revision == "1.0"


def test_single_phase_fixture_designs(requirements_single_phase):
    """Test the single-phase fixture yields a two-limb core"""
    result = design(requirements_single_phase)
    assert result.success, result.errors
    assert result.design.core.limbs == 2
    assert result.design.bom.by_category("accessories")[-1].quantity == 2


if __name__ == '__main__':
    unittest.main()
