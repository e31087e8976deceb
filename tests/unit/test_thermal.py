"""
Unit tests for thermal design
"""

import unittest
import numpy as np
from transformer_designer.requirements import DesignInputError, DesignRequirements
from transformer_designer.calculation_steps import StepLedger
from transformer_designer.magnetics import CoreDesigner
from transformer_designer.windings import WindingDesigner
from transformer_designer.electrical import LossCalculator
from transformer_designer.thermal import (
    ThermalDesign,
    ThermalDesigner,
    calculate_overload_capability,
    calculate_power_ratings,
    check_thermal_limits,
)


def _thermal(top_oil, average, hot_spot):
    return ThermalDesign(
        oil_volume_l=1085,
        oil_weight_kg=944,
        top_oil_rise_c=top_oil,
        average_winding_rise_c=average,
        hot_spot_rise_c=hot_spot,
        radiator_area_m2=22.5,
        number_of_radiators=9,
        number_of_fans=0,
    )


class TestThermalDesigner(unittest.TestCase):
    """Test oil and radiator sizing"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )
        self.designer = ThermalDesigner(self.reqs)

    def test_oil_volume(self):
        """Test V = 4.5 × kVA^0.75 for ONAN"""
        volume, weight = self.designer.calculate_oil_volume()
        self.assertAlmostEqual(volume, 4.5 * 1500 ** 0.75)
        self.assertAlmostEqual(weight, volume * 0.87)

    def test_natural_radiators(self):
        """Test panel count from required area at h = 9 W/m²K"""
        area, count, fans = self.designer.calculate_radiators(9000)
        # 9000 / (9 × 50) = 20 m² = 8 medium panels
        self.assertEqual(count, 8)
        self.assertAlmostEqual(area, 20.0)
        self.assertEqual(fans, 0)

    def test_forced_air_adds_fans(self):
        """Test ONAF uses h = 15 W/m²K and half as many fans as panels"""
        reqs = self.reqs.model_copy(update={"cooling_class": "ONAF"})
        area, count, fans = ThermalDesigner(reqs).calculate_radiators(9000)
        self.assertEqual(count, 5)
        self.assertEqual(fans, 3)

    def test_forced_air_minimum_fans(self):
        """Test at least two fans are fitted"""
        reqs = self.reqs.model_copy(update={"cooling_class": "ONAN/ONAF"})
        _, count, fans = ThermalDesigner(reqs).calculate_radiators(1000)
        self.assertEqual(count, 1)
        self.assertEqual(fans, 2)

    def test_rise_without_margin_rejected(self):
        """Test a rise at or below the 15°C gradient reserve is an input error"""
        reqs = self.reqs.model_copy(update={"temperature_rise_c": 15})
        with self.assertRaises(DesignInputError):
            ThermalDesigner(reqs).calculate_radiators(9000)

    def test_unknown_cooling_falls_back(self):
        """Test unknown cooling class uses the ONAN constant and warns once"""
        reqs = self.reqs.model_copy(update={"cooling_class": "XYZ"})
        designer = ThermalDesigner(reqs)
        volume, _ = designer.calculate_oil_volume()
        designer.calculate_oil_volume()
        self.assertAlmostEqual(volume, 4.5 * 1500 ** 0.75)
        self.assertEqual(len(designer.warnings), 1)
        self.assertEqual(designer.warnings[0].requested, "XYZ")
        self.assertFalse(designer.forced_air)


class TestThermalDesign(unittest.TestCase):
    """Test full thermal design from windings and losses"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )
        self.ledger = StepLedger()
        core = CoreDesigner(self.reqs, ledger=self.ledger).design()
        lv, _, hv = WindingDesigner(self.reqs, None, core, self.ledger).design_pair()
        self.losses = LossCalculator(self.reqs, self.ledger).calculate(core, hv, lv)
        self.thermal = ThermalDesigner(self.reqs, self.ledger).design(hv, lv, self.losses)

    def test_rises_ordered(self):
        """Test hot spot > average winding > top oil > 0"""
        self.assertGreater(self.thermal.top_oil_rise_c, 0)
        self.assertGreater(self.thermal.average_winding_rise_c, self.thermal.top_oil_rise_c)
        self.assertGreater(self.thermal.hot_spot_rise_c, self.thermal.average_winding_rise_c)

    def test_hot_spot_formula(self):
        """Test ΔT_hs = 1.1 × ΔT_avg + 13"""
        expected = self.thermal.average_winding_rise_c * 1.1 + 13
        self.assertAlmostEqual(self.thermal.hot_spot_rise_c, expected, delta=0.2)

    def test_top_oil_below_rise_class(self):
        """Test radiator area keeps top oil inside the rise limit"""
        self.assertLessEqual(self.thermal.top_oil_rise_c, 50)
        self.assertEqual(self.thermal.number_of_fans, 0)
        self.assertAlmostEqual(
            self.thermal.radiator_area_m2, self.thermal.number_of_radiators * 2.5, delta=0.05
        )

    def test_steps_recorded_as_thermal(self):
        """Test thermal steps use the 'thermal' category"""
        ids = [s.id for s in self.ledger.by_category("thermal")]
        self.assertEqual(ids, ["oil-volume", "radiator-sizing", "temperature-rises"])


class TestThermalLimits(unittest.TestCase):
    """Test limit checks, overload and power ratings"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )

    def test_within_limits(self):
        """Test a cool design passes"""
        check = check_thermal_limits(_thermal(46.1, 53.8, 72.2), self.reqs)
        self.assertTrue(check.passes)
        self.assertEqual(check.issues, [])

    def test_every_limit_reported(self):
        """Test each exceeded limit produces an issue"""
        check = check_thermal_limits(_thermal(70.0, 80.0, 101.0), self.reqs)
        self.assertFalse(check.passes)
        self.assertEqual(len(check.issues), 3)
        self.assertIn("Top oil rise", check.issues[0])
        self.assertIn("Hot spot rise", check.issues[2])

    def test_overload_capability(self):
        """Test overload from hot-spot headroom"""
        short_term, emergency = calculate_overload_capability(_thermal(40.0, 45.0, 50.0), self.reqs)
        self.assertEqual(short_term, int(round(np.sqrt(110 / 80) * 100)))
        self.assertEqual(emergency, int(round(np.sqrt(170 / 80) * 100)))
        self.assertGreater(emergency, short_term)

    def test_single_stage_rating(self):
        """Test ONAN has a single rating"""
        ratings = calculate_power_ratings(1000, "ONAN")
        self.assertIsNone(ratings.onaf_kva)
        self.assertEqual(ratings.display, "1000 kVA")

    def test_dual_and_triple_ratings(self):
        """Test forced stages raise the nameplate rating"""
        self.assertEqual(calculate_power_ratings(1000, "onan-onaf").display, "1000/1330 kVA")
        triple = calculate_power_ratings(1000, "ONAN/ONAF/OFAF")
        self.assertEqual(triple.ofaf_kva, 1670)
        self.assertEqual(triple.display, "1000/1330/1670 kVA")


if __name__ == '__main__':
    unittest.main()
