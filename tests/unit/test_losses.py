"""
Unit tests for loss and efficiency calculations
"""

import unittest
import numpy as np
from transformer_designer.requirements import DesignRequirements
from transformer_designer.calculation_steps import StepLedger
from transformer_designer.magnetics import CoreDesigner
from transformer_designer.windings import WindingDesigner
from transformer_designer.electrical import (
    LossCalculator,
    calculate_annual_losses,
    calculate_loss_ratio,
    find_max_efficiency,
)
from transformer_designer.electrical.losses import (
    EFFICIENCY_LOAD_POINTS,
    efficiency_pct,
    temperature_correction_factor,
)


class TestLossHelpers(unittest.TestCase):
    """Test efficiency and energy helpers"""

    def test_temperature_correction(self):
        """Test 20°C to 75°C copper correction"""
        self.assertAlmostEqual(temperature_correction_factor(), 309.5 / 254.5)

    def test_efficiency(self):
        """Test η = Pout / (Pout + P0 + Pk x²)"""
        eff = efficiency_pct(1000, 1.0, 1000, 9000)
        self.assertAlmostEqual(eff, 100 * 1e6 / (1e6 + 10000))

    def test_max_efficiency_load(self):
        """Test maximum efficiency where load loss equals no-load loss"""
        load_pct, eff = find_max_efficiency(1000, 1000, 4000)
        self.assertEqual(load_pct, 50.0)
        self.assertAlmostEqual(eff, round(100 * 5e5 / (5e5 + 2000), 2))

    def test_max_efficiency_without_load_loss(self):
        """Test zero load loss uses the top sampled point"""
        load_pct, eff = find_max_efficiency(1000, 1000, 0)
        self.assertEqual(load_pct, 125.0)
        self.assertGreater(eff, 99.0)

    def test_max_efficiency_without_core_loss(self):
        """Test zero core loss gives 100% at vanishing load"""
        self.assertEqual(find_max_efficiency(1000, 0, 5000), (0.0, 100.0))

    def test_annual_losses(self):
        """Test annual energy with the 0.3·LF + 0.7·LF² loss factor"""
        annual = calculate_annual_losses(1000, 10000, load_factor=0.5)
        self.assertAlmostEqual(annual["loss_factor"], 0.325)
        self.assertAlmostEqual(annual["no_load_energy_kwh"], 8760)
        self.assertAlmostEqual(annual["load_energy_kwh"], 10 * 8760 * 0.325)
        self.assertAlmostEqual(annual["annual_cost"], annual["energy_loss_kwh"] * 0.10)

    def test_loss_ratio(self):
        """Test no-load to load loss ratio"""
        self.assertAlmostEqual(calculate_loss_ratio(1000, 5000), 0.2)
        self.assertEqual(calculate_loss_ratio(1000, 0), float("inf"))


class TestLossCalculator(unittest.TestCase):
    """Test losses for a 1500 kVA transformer"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )
        self.ledger = StepLedger()
        self.core = CoreDesigner(self.reqs, ledger=self.ledger).design()
        self.lv, _, self.hv = WindingDesigner(self.reqs, None, self.core, self.ledger).design_pair()
        self.losses = LossCalculator(self.reqs, self.ledger).calculate(self.core, self.hv, self.lv)

    def test_no_load_loss(self):
        """Test P0 = Wc × Ps × (Bm/1.7)² × 1.15"""
        expected = self.core.core_weight_kg * 1.17 * (1.6 / 1.7) ** 2 * 1.15
        self.assertAlmostEqual(self.losses.no_load_loss_w, expected, delta=1)

    def test_load_loss_components(self):
        """Test eddy 10% and stray 5% of I²R, corrected to 75°C"""
        i2r = self.losses.i2r_loss_w
        self.assertAlmostEqual(self.losses.eddy_loss_w, i2r * 0.10, delta=1)
        self.assertAlmostEqual(self.losses.stray_loss_w, i2r * 0.05, delta=1)
        self.assertAlmostEqual(
            self.losses.load_loss_w, i2r * 1.15 * temperature_correction_factor(), delta=2
        )

    def test_losses_are_positive(self):
        """Test both losses are positive integers"""
        self.assertGreater(self.losses.no_load_loss_w, 0)
        self.assertGreater(self.losses.load_loss_w, 0)
        self.assertEqual(self.losses.total_loss_w,
                         self.losses.no_load_loss_w + self.losses.load_loss_w)

    def test_efficiency_curve_points(self):
        """Test six sampled load points"""
        loads = [p.load_pct for p in self.losses.efficiency_curve]
        self.assertEqual(loads, [25.0, 50.0, 75.0, 100.0, 110.0, 125.0])
        self.assertEqual(len(EFFICIENCY_LOAD_POINTS), 6)
        full = self.losses.efficiency_at(100)
        self.assertGreater(full, 98.0)
        self.assertLess(full, 100.0)
        self.assertIsNone(self.losses.efficiency_at(90))

    def test_efficiency_ordering(self):
        """Test maximum efficiency is at least every sampled point"""
        for point in self.losses.efficiency_curve:
            self.assertGreaterEqual(self.losses.max_efficiency_pct, point.efficiency_pct)

    def test_max_efficiency_load(self):
        """Test max efficiency load = √(P0/Pk)"""
        expected = np.sqrt(self.losses.no_load_loss_w / self.losses.load_loss_w) * 100
        self.assertAlmostEqual(self.losses.max_efficiency_load_pct, expected, delta=0.01)

    def test_to_dataframe(self):
        """Test efficiency curve export"""
        df = self.losses.to_dataframe()
        self.assertEqual(len(df), 6)
        self.assertIn("efficiency_pct", df.columns)
        self.assertEqual(df.index.name, "load_pct")

    def test_steps_recorded_as_losses(self):
        """Test loss steps use the 'losses' category"""
        ids = [s.id for s in self.ledger.by_category("losses")]
        self.assertEqual(ids, [
            "no-load-loss", "i2r-losses", "eddy-stray-losses", "loss-correction", "efficiency-curve",
        ])


if __name__ == '__main__':
    unittest.main()
