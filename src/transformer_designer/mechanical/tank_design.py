"""Tank Design

Tank envelope, steel weight, conservator volume and transformer weights.

Key equations:
    L = windows × Ww + limbs × d,  W = 2 × r_HV,out,  H = Hw + 2 × h_yoke
    W_tank = plate area × t × ρ_steel × 1.3
    V_conservator = V_oil × α × 120 × 1.5 + 20

The 1.3 factor covers stiffeners, flanges and lifting lugs.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from transformer_designer.calculation_steps import StepLedger
from transformer_designer.catalog.materials import TRANSFORMER_OIL
from transformer_designer.magnetics.core_design import CoreDesign
from transformer_designer.requirements import DesignRequirements
from transformer_designer.thermal.thermal_design import ThermalDesign
from transformer_designer.windings.winding_design import WindingDesign

logger = logging.getLogger(__name__)

CATEGORY = "tank"

SIDE_CLEARANCE_MM = 75
END_CLEARANCE_MM = 100
BOTTOM_CLEARANCE_MM = 100
TOP_CLEARANCE_MM = 150
WALL_THICKNESS_MM = 6
TANK_STEEL_DENSITY_KG_M3 = 7850
STIFFENER_ALLOWANCE = 1.3

CONSERVATOR_TEMP_RANGE_C = 120
CONSERVATOR_SAFETY_FACTOR = 1.5
CONSERVATOR_ULLAGE_L = 20

ACCESSORY_ALLOWANCE_KG = 50

BUSHING_HEIGHT_HIGH_KV_MM = 600
BUSHING_HEIGHT_LOW_KV_MM = 400
BUSHING_HEIGHT_THRESHOLD_KV = 25


@dataclass(frozen=True)
class TankDesign:
    """Tank dimensions and transformer weights.

    Attributes:
        length_mm: External length (mm)
        width_mm: External width (mm)
        height_mm: External height (mm)
        tank_weight_kg: Empty tank weight (kg)
        conservator_volume_l: Conservator volume (L)
        shipping_weight_kg: Core + windings + tank + accessories (kg)
        total_weight_kg: Shipping weight + oil (kg)
        overall_height_mm: Tank height plus bushing allowance (mm)
        accessory_allowance_kg: Fixed accessory mass in the shipping weight (kg)
    """
    length_mm: float
    width_mm: float
    height_mm: float
    tank_weight_kg: float
    conservator_volume_l: float
    shipping_weight_kg: float
    total_weight_kg: float
    overall_height_mm: float
    accessory_allowance_kg: float = ACCESSORY_ALLOWANCE_KG


@dataclass(frozen=True)
class TankAccessory:
    description: str
    quantity: int
    unit: str
    specification: str


def bushing_height_allowance(primary_voltage_kv: float) -> int:
    if primary_voltage_kv > BUSHING_HEIGHT_THRESHOLD_KV:
        return BUSHING_HEIGHT_HIGH_KV_MM
    return BUSHING_HEIGHT_LOW_KV_MM


class TankDesigner:
    """Sizes the tank around the core and coil assembly."""

    def __init__(self, requirements: DesignRequirements, ledger: Optional[StepLedger] = None):
        self.requirements = requirements
        self.ledger = ledger if ledger is not None else StepLedger()

    def calculate_assembly_envelope(self, core: CoreDesign, hv: WindingDesign) -> Tuple[float, float, float]:
        """Core and coil envelope (L, W, H) in mm."""
        length = core.windows * core.window_width_mm + core.limbs * core.core_diameter_mm
        width = 2 * hv.outer_radius_mm
        height = core.window_height_mm + 2 * core.yoke_height_mm

        self.ledger.add(
            id="assembly-envelope",
            title="Core & Coil Assembly Envelope",
            formula="L = windows × Ww + limbs × d",
            inputs={
                "windows": (core.windows, "", "Number of windows"),
                "limbs": (core.limbs, "", "Number of limbs"),
                "Ww": (core.window_width_mm, "mm", "Window width"),
                "d": (core.core_diameter_mm, "mm", "Core diameter"),
            },
            result=(round(length), "mm length"),
            explanation=f"Assembly {length:.0f} × {width:.0f} × {height:.0f} mm (L×W×H).",
            category=CATEGORY,
        )
        return length, width, height

    def calculate_tank_dimensions(self, length: float, width: float, height: float) -> Tuple[float, float, float]:
        """External tank dimensions (mm) from the assembly envelope."""
        ext_length = length + 2 * END_CLEARANCE_MM + 2 * WALL_THICKNESS_MM
        ext_width = width + 2 * SIDE_CLEARANCE_MM + 2 * WALL_THICKNESS_MM
        ext_height = height + BOTTOM_CLEARANCE_MM + TOP_CLEARANCE_MM + 2 * WALL_THICKNESS_MM

        self.ledger.add(
            id="tank-dimensions",
            title="Tank External Dimensions",
            formula="Tank = Assembly + Clearances + Walls",
            inputs={
                "assembly_L": (round(length), "mm", "Assembly length"),
                "clearance": (END_CLEARANCE_MM, "mm", "End clearance"),
                "wall": (WALL_THICKNESS_MM, "mm", "Wall thickness"),
            },
            result=(round(ext_length), "mm tank length"),
            explanation=(
                f"Tank {ext_length:.0f} × {ext_width:.0f} × {ext_height:.0f} mm with "
                f"{SIDE_CLEARANCE_MM} mm side and {END_CLEARANCE_MM} mm end clearance."
            ),
            category=CATEGORY,
        )
        return ext_length, ext_width, ext_height

    def calculate_tank_weight(self, length: float, width: float, height: float) -> int:
        l, w, h = length / 1000, width / 1000, height / 1000
        surface = 2 * l * w + 2 * l * h + 2 * w * h
        plate_weight = surface * (WALL_THICKNESS_MM / 1000) * TANK_STEEL_DENSITY_KG_M3
        weight = plate_weight * STIFFENER_ALLOWANCE

        self.ledger.add(
            id="tank-weight",
            title="Tank Weight",
            formula="W = Surface × thickness × density × 1.3",
            inputs={
                "surface": (round(surface, 2), "m²", "Total surface area"),
                "thickness": (WALL_THICKNESS_MM, "mm", "Wall thickness"),
                "density": (TANK_STEEL_DENSITY_KG_M3, "kg/m³", "Steel density"),
            },
            result=(round(weight), "kg"),
            explanation=f"Plate steel {plate_weight:.0f} kg plus 30% for stiffeners and fittings.",
            category=CATEGORY,
        )
        return int(round(weight))

    def calculate_conservator_volume(self, oil_volume_l: float) -> int:
        alpha = TRANSFORMER_OIL["expansion_coeff_per_c"]
        expansion = oil_volume_l * alpha * CONSERVATOR_TEMP_RANGE_C
        volume = expansion * CONSERVATOR_SAFETY_FACTOR + CONSERVATOR_ULLAGE_L

        self.ledger.add(
            id="conservator-volume",
            title="Conservator Volume",
            formula="V_cons = V_oil × α × ΔT × 1.5 + ullage",
            inputs={
                "V_oil": (round(oil_volume_l), "L", "Main tank oil volume"),
                "α": (alpha * 100, "%/°C", "Oil expansion coefficient"),
                "ΔT": (CONSERVATOR_TEMP_RANGE_C, "°C", "Temperature range"),
            },
            result=(round(volume), "liters"),
            explanation=(
                f"Oil expands {alpha * CONSERVATOR_TEMP_RANGE_C * 100:.1f}% over "
                f"{CONSERVATOR_TEMP_RANGE_C}°C."
            ),
            category=CATEGORY,
        )
        return int(round(volume))

    def design(
        self,
        core: CoreDesign,
        hv: WindingDesign,
        lv: WindingDesign,
        thermal: ThermalDesign,
    ) -> TankDesign:
        length, width, height = self.calculate_tank_dimensions(
            *self.calculate_assembly_envelope(core, hv)
        )
        tank_weight = self.calculate_tank_weight(length, width, height)
        conservator = self.calculate_conservator_volume(thermal.oil_volume_l)

        winding_weight = hv.weight_kg + lv.weight_kg
        shipping = core.core_weight_kg + winding_weight + tank_weight + ACCESSORY_ALLOWANCE_KG
        total = shipping + thermal.oil_weight_kg

        self.ledger.add(
            id="total-weights",
            title="Transformer Weights",
            formula="Total = Core + Windings + Tank + Oil + Accessories",
            inputs={
                "Core": (core.core_weight_kg, "kg", "Core weight"),
                "Windings": (winding_weight, "kg", "HV + LV conductor weight"),
                "Tank": (tank_weight, "kg", "Empty tank weight"),
                "Oil": (thermal.oil_weight_kg, "kg", "Transformer oil weight"),
            },
            result=(round(total), "kg total"),
            explanation=f"Shipping weight without oil {shipping:.0f} kg; filled {total:.0f} kg.",
            category=CATEGORY,
        )

        overall_height = height + bushing_height_allowance(self.requirements.primary_voltage_kv)
        logger.info(f"Tank: {length:.0f}x{width:.0f}x{height:.0f} mm, total weight {total:.0f} kg")

        return TankDesign(
            length_mm=round(length),
            width_mm=round(width),
            height_mm=round(height),
            tank_weight_kg=tank_weight,
            conservator_volume_l=conservator,
            shipping_weight_kg=round(shipping),
            total_weight_kg=round(total),
            overall_height_mm=round(overall_height),
        )


def generate_tank_accessories(
    tank: TankDesign,
    requirements: DesignRequirements,
    thermal: Optional[ThermalDesign] = None,
) -> List[TankAccessory]:
    """Tank body and fittings list for procurement."""
    three_phase = requirements.is_three_phase
    radiators = thermal.number_of_radiators if thermal is not None else 4
    return [
        TankAccessory("Tank body (welded steel)", 1, "ea",
                      f"{tank.length_mm}×{tank.width_mm}×{tank.height_mm}mm, {WALL_THICKNESS_MM}mm wall"),
        TankAccessory("Conservator tank", 1, "ea", f"{tank.conservator_volume_l}L capacity"),
        TankAccessory("HV bushings", 3 if three_phase else 2, "ea",
                      f"{requirements.primary_voltage_kv:g}kV class, porcelain/polymer"),
        TankAccessory("LV bushings", 4 if three_phase else 2, "ea", "1kV class, porcelain"),
        TankAccessory("Radiator panels", radiators, "ea", "Pressed steel, 2.5m² each"),
        TankAccessory("Lifting lugs", 4, "ea", f"Rated for {round(tank.total_weight_kg * 1.5)}kg"),
        TankAccessory("Drain valve", 1, "ea", '2" ball valve with sampling port'),
        TankAccessory("Pressure relief device", 1, "ea", "Spring-loaded, 10 PSI"),
        TankAccessory("Oil level gauge", 1, "ea", "Magnetic type with contacts"),
        TankAccessory("Oil temperature indicator", 1, "ea", "Dial type with contacts"),
        TankAccessory("Winding temperature indicator", 1, "ea", "Image type with contacts"),
        TankAccessory("Nameplate", 1, "ea", "Stainless steel, engraved"),
        TankAccessory("Ground pads", 2, "ea", "Welded copper pad"),
    ]
