"""
Unit tests for winding design
"""

import unittest
from transformer_designer.requirements import AdvancedOptions, DesignRequirements
from transformer_designer.calculation_steps import StepLedger
from transformer_designer.catalog.conductors import ConductorShape
from transformer_designer.catalog.materials import get_conductor_properties
from transformer_designer.magnetics import CoreDesigner
from transformer_designer.windings import (
    WindingDesigner,
    calculate_main_gap,
    calculate_rated_current,
    calculate_resistance,
)


class TestWindingHelpers(unittest.TestCase):
    """Test current, gap and resistance helpers"""

    def test_three_phase_current(self):
        """Test I = S / (√3 × V)"""
        self.assertAlmostEqual(calculate_rated_current(1500, 480, 3), 1804.22, delta=0.01)
        self.assertAlmostEqual(calculate_rated_current(1500, 13800, 3), 62.76, delta=0.01)

    def test_single_phase_current(self):
        """Test I = S / V"""
        self.assertAlmostEqual(calculate_rated_current(100, 240, 1), 416.67, delta=0.01)

    def test_main_gap_from_bil(self):
        """Test main gap = max(15, 0.25 × BIL)"""
        self.assertEqual(calculate_main_gap(13.8), 23.75)
        self.assertEqual(calculate_main_gap(0.48), 15)
        self.assertEqual(calculate_main_gap(69.0), 62.5)

    def test_resistance_temperature_correction(self):
        """Test R75 = R20 × (1 + α × 55)"""
        copper = get_conductor_properties("copper").value
        r20, r75 = calculate_resistance(copper, 1000, 100)
        self.assertAlmostEqual(r20, 0.1724, places=6)
        self.assertAlmostEqual(r75, r20 * (1 + 0.00393 * 55), places=6)


class TestWindingDesigner(unittest.TestCase):
    """Test windings for a 1500 kVA, 13.8 kV / 480 V transformer"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )
        self.ledger = StepLedger()
        self.core = CoreDesigner(self.reqs, ledger=self.ledger).design()
        self.designer = WindingDesigner(self.reqs, AdvancedOptions(), self.core, self.ledger)
        self.lv, self.hv_provisional, self.hv = self.designer.design_pair()

    def test_turns(self):
        """Test N = round(V / Et)"""
        self.assertEqual(self.lv.turns, 20)
        self.assertEqual(self.hv.turns, 566)

    def test_lv_conductor_is_ctc(self):
        """Test 1804 A LV winding uses CTC"""
        self.assertEqual(self.lv.shape, ConductorShape.CTC)
        self.assertEqual(self.lv.cross_section_mm2, 930)
        self.assertEqual(self.lv.layers, 1)

    def test_hv_conductor_is_round(self):
        """Test 63 A HV winding uses AWG 4 round wire"""
        self.assertEqual(self.hv.shape, ConductorShape.ROUND)
        self.assertEqual(self.hv.conductor.awg, 4)
        self.assertEqual(self.hv.layers, 5)
        self.assertEqual(self.hv.turns_per_layer, 130)

    def test_lv_sits_on_core(self):
        """Test LV inner radius = d/2 + 15 mm"""
        self.assertEqual(self.lv.inner_radius_mm, round(self.core.core_diameter_mm / 2 + 15))
        self.assertGreater(self.lv.outer_radius_mm, self.lv.inner_radius_mm)

    def test_provisional_hv_is_unchanged(self):
        """Test patch_hv leaves the provisional winding untouched"""
        self.assertTrue(self.hv_provisional.provisional)
        self.assertFalse(self.hv.provisional)
        self.assertEqual(self.hv_provisional.inner_radius_mm, 208)
        self.assertEqual(self.hv_provisional.turns, self.hv.turns)
        self.assertEqual(self.hv_provisional.thickness_mm, self.hv.thickness_mm)

    def test_patched_hv_outside_lv(self):
        """Test HV inner radius = LV outer radius + main gap"""
        self.assertEqual(self.hv.inner_radius_mm, round(self.lv.outer_radius_mm + 23.75))
        self.assertEqual(self.hv.outer_radius_mm, round(self.hv.inner_radius_mm + self.hv.thickness_mm))

    def test_patched_hv_rederives_resistance(self):
        """Test larger radii give longer conductor, more weight and resistance"""
        self.assertGreater(self.hv.mean_turn_length_mm, self.hv_provisional.mean_turn_length_mm)
        self.assertGreater(self.hv.resistance_20c_ohm, self.hv_provisional.resistance_20c_ohm)
        self.assertGreaterEqual(self.hv.weight_kg, self.hv_provisional.weight_kg)

    def test_winding_fits_window(self):
        """Test winding height stays within the window less clearances"""
        for winding in (self.lv, self.hv):
            self.assertLessEqual(winding.height_mm, self.core.window_height_mm - 60 + 1)

    def test_unknown_side_rejected(self):
        """Test compute only accepts HV or LV"""
        with self.assertRaises(ValueError):
            self.designer.compute("TV")

    def test_monotonic_turns(self):
        """Test LV turns never decrease as secondary voltage rises"""
        previous = 0
        for voltage in (208, 240, 480, 600, 2400, 4160, 12470):
            reqs = self.reqs.model_copy(update={"secondary_voltage_v": voltage})
            turns = WindingDesigner(reqs, None, self.core).calculate_turns("LV")
            self.assertGreaterEqual(turns, previous)
            previous = turns


class TestWindingOptions(unittest.TestCase):
    """Test material and density overrides"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )
        self.core = CoreDesigner(self.reqs).design()

    def test_current_density_by_side(self):
        """Test LV runs at 95% of the cooling band density"""
        designer = WindingDesigner(self.reqs, None, self.core)
        self.assertAlmostEqual(designer.select_current_density("HV", "copper"), 3.0)
        self.assertAlmostEqual(designer.select_current_density("LV", "copper"), 2.85)
        self.assertAlmostEqual(designer.select_current_density("HV", "aluminum"), 1.8)

    def test_current_density_override(self):
        """Test explicit current density bypasses factors"""
        options = AdvancedOptions(target_current_density_a_mm2=2.5)
        designer = WindingDesigner(self.reqs, options, self.core)
        self.assertEqual(designer.select_current_density("LV", "aluminum"), 2.5)

    def test_aluminum_lv(self):
        """Test per-side conductor material"""
        options = AdvancedOptions(lv_conductor_material="aluminum")
        lv, _, hv = WindingDesigner(self.reqs, options, self.core).design_pair()
        self.assertEqual(lv.material, "aluminum")
        self.assertEqual(hv.material, "copper")

    def test_unknown_material_falls_back(self):
        """Test unknown conductor material uses copper and warns once"""
        reqs = self.reqs.model_copy(update={"conductor_material": "gold"})
        designer = WindingDesigner(reqs, None, self.core)
        lv, _, hv = designer.design_pair()
        self.assertEqual(lv.material, "copper")
        self.assertEqual(len(designer.warnings), 1)
        self.assertEqual(designer.warnings[0].catalog, "conductor material")


if __name__ == '__main__':
    unittest.main()
