"""
Unit tests for tank design
"""

import unittest
from transformer_designer.requirements import DesignRequirements
from transformer_designer.calculation_steps import StepLedger
from transformer_designer.magnetics import CoreDesigner
from transformer_designer.windings import WindingDesigner
from transformer_designer.electrical import LossCalculator
from transformer_designer.thermal import ThermalDesigner
from transformer_designer.mechanical import TankDesigner, generate_tank_accessories
from transformer_designer.mechanical.tank_design import bushing_height_allowance


class TestTankDesigner(unittest.TestCase):
    """Test tank sizing for a 1500 kVA transformer"""

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
        losses = LossCalculator(self.reqs, self.ledger).calculate(self.core, self.hv, self.lv)
        self.thermal = ThermalDesigner(self.reqs, self.ledger).design(self.hv, self.lv, losses)
        self.designer = TankDesigner(self.reqs, self.ledger)
        self.tank = self.designer.design(self.core, self.hv, self.lv, self.thermal)

    def test_clearances(self):
        """Test tank = assembly + clearances + walls"""
        length = 2 * self.core.window_width_mm + 3 * self.core.core_diameter_mm
        self.assertEqual(self.tank.length_mm, round(length + 2 * 100 + 2 * 6))
        self.assertEqual(self.tank.width_mm, round(2 * self.hv.outer_radius_mm + 2 * 75 + 2 * 6))
        height = self.core.window_height_mm + 2 * self.core.yoke_height_mm
        self.assertEqual(self.tank.height_mm, round(height + 100 + 150 + 2 * 6))

    def test_tank_weight(self):
        """Test plate weight with 30% stiffener allowance"""
        l, w, h = (self.tank.length_mm / 1000, self.tank.width_mm / 1000, self.tank.height_mm / 1000)
        surface = 2 * (l * w + l * h + w * h)
        expected = surface * 0.006 * 7850 * 1.3
        self.assertAlmostEqual(self.tank.tank_weight_kg, expected, delta=1)

    def test_conservator_volume(self):
        """Test V = V_oil × 0.00075 × 120 × 1.5 + 20"""
        expected = self.thermal.oil_volume_l * 0.00075 * 120 * 1.5 + 20
        self.assertAlmostEqual(self.tank.conservator_volume_l, expected, delta=1)

    def test_weights_add_up(self):
        """Test total weight = shipping weight + oil"""
        shipping = (self.core.core_weight_kg + self.hv.weight_kg + self.lv.weight_kg
                    + self.tank.tank_weight_kg + self.tank.accessory_allowance_kg)
        self.assertAlmostEqual(self.tank.shipping_weight_kg, shipping, delta=0.5)
        self.assertEqual(self.tank.total_weight_kg,
                         self.tank.shipping_weight_kg + self.thermal.oil_weight_kg)
        self.assertGreater(self.tank.total_weight_kg, self.tank.shipping_weight_kg)

    def test_overall_height(self):
        """Test 400 mm bushing allowance at 13.8 kV"""
        self.assertEqual(self.tank.overall_height_mm, self.tank.height_mm + 400)
        self.assertEqual(bushing_height_allowance(34.5), 600)

    def test_steps_recorded_as_tank(self):
        """Test tank steps use the 'tank' category"""
        ids = [s.id for s in self.ledger.by_category("tank")]
        self.assertEqual(ids, [
            "assembly-envelope", "tank-dimensions", "tank-weight", "conservator-volume", "total-weights",
        ])


class TestTankAccessories(unittest.TestCase):
    """Test accessory list"""

    def setUp(self):
        """Set up test fixtures"""
        self.reqs = DesignRequirements(
            rated_power_kva=1500,
            primary_voltage_v=13800,
            secondary_voltage_v=480,
        )
        core = CoreDesigner(self.reqs).design()
        lv, _, hv = WindingDesigner(self.reqs, None, core).design_pair()
        losses = LossCalculator(self.reqs).calculate(core, hv, lv)
        self.thermal = ThermalDesigner(self.reqs).design(hv, lv, losses)
        self.tank = TankDesigner(self.reqs).design(core, hv, lv, self.thermal)

    def test_accessory_count(self):
        """Test thirteen accessory lines"""
        accessories = generate_tank_accessories(self.tank, self.reqs, self.thermal)
        self.assertEqual(len(accessories), 13)

    def test_three_phase_bushings(self):
        """Test three HV and four LV bushings"""
        accessories = {a.description: a for a in generate_tank_accessories(self.tank, self.reqs, self.thermal)}
        self.assertEqual(accessories["HV bushings"].quantity, 3)
        self.assertEqual(accessories["LV bushings"].quantity, 4)
        self.assertEqual(accessories["Radiator panels"].quantity, self.thermal.number_of_radiators)

    def test_single_phase_bushings(self):
        """Test single-phase units get two bushings per side"""
        reqs = self.reqs.model_copy(update={"phases": 1})
        accessories = {a.description: a for a in generate_tank_accessories(self.tank, reqs)}
        self.assertEqual(accessories["HV bushings"].quantity, 2)
        self.assertEqual(accessories["LV bushings"].quantity, 2)
        self.assertEqual(accessories["Radiator panels"].quantity, 4)


if __name__ == '__main__':
    unittest.main()
