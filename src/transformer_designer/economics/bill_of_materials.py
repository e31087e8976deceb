"""Bill of Materials

Structured parts list assembled from a finished design.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from transformer_designer.magnetics.core_design import CoreDesign
from transformer_designer.mechanical.tank_design import TankDesign
from transformer_designer.requirements import DesignRequirements
from transformer_designer.thermal.thermal_design import ThermalDesign
from transformer_designer.windings.winding_design import WindingDesign

INSULATION_WEIGHT_FRACTION = 0.15


@dataclass(frozen=True)
class BOMItem:
    category: str
    description: str
    quantity: float
    unit: str
    weight_kg: Optional[float] = None
    specification: str = ""


@dataclass(frozen=True)
class BillOfMaterials:
    """Parts list and aggregate weights.

    total_weight_kg is the filled transformer weight, i.e. core, both
    windings, tank, oil and the accessory allowance.
    """
    items: List[BOMItem] = field(default_factory=list)
    total_copper_weight_kg: float = 0.0
    total_steel_weight_kg: float = 0.0
    total_oil_volume_l: float = 0.0
    total_weight_kg: float = 0.0
    accessory_allowance_kg: float = 0.0

    def by_category(self, category: str) -> List[BOMItem]:
        return [item for item in self.items if item.category == category]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                "category": item.category,
                "description": item.description,
                "quantity": item.quantity,
                "unit": item.unit,
                "weight_kg": item.weight_kg,
                "specification": item.specification,
            }
            for item in self.items
        ])


def _winding_item(winding: WindingDesign) -> BOMItem:
    return BOMItem(
        category="winding",
        description=f"{winding.side} Winding - {winding.material.capitalize()}",
        quantity=winding.weight_kg,
        unit="kg",
        weight_kg=winding.weight_kg,
        specification=(
            f"{winding.turns} turns, {winding.cross_section_mm2:g}mm² {winding.shape.value}"
        ),
    )


def generate_bill_of_materials(
    requirements: DesignRequirements,
    core: CoreDesign,
    hv: WindingDesign,
    lv: WindingDesign,
    thermal: ThermalDesign,
    tank: TankDesign,
) -> BillOfMaterials:
    """Build the BOM for a design.

    Returns:
        BillOfMaterials with one line per material category
    """
    grade = core.steel_grade
    insulation = round((hv.weight_kg + lv.weight_kg) * INSULATION_WEIGHT_FRACTION)
    three_phase = requirements.is_three_phase

    items = [
        BOMItem(
            category="core",
            description=f"Core Steel ({grade.name})",
            quantity=core.core_weight_kg,
            unit="kg",
            weight_kg=core.core_weight_kg,
            specification=f"{grade.thickness_mm}mm thick, {core.core_steps}-step construction",
        ),
        _winding_item(hv),
        _winding_item(lv),
        BOMItem(
            category="insulation",
            description="Insulation materials (paper, pressboard)",
            quantity=insulation,
            unit="kg",
            weight_kg=insulation,
            specification="Kraft paper, diamond-dotted paper, pressboard barriers",
        ),
        BOMItem(
            category="tank",
            description="Tank assembly (welded steel)",
            quantity=1,
            unit="set",
            weight_kg=tank.tank_weight_kg,
            specification=f"{tank.length_mm}×{tank.width_mm}×{tank.height_mm}mm",
        ),
        BOMItem(
            category="oil",
            description="Transformer Oil (Type I)",
            quantity=thermal.oil_volume_l,
            unit="liters",
            weight_kg=thermal.oil_weight_kg,
            specification="Mineral insulating oil per ASTM D3487",
        ),
    ]

    if thermal.number_of_radiators > 0:
        items.append(BOMItem(
            category="accessories",
            description="Radiator panels",
            quantity=thermal.number_of_radiators,
            unit="ea",
            specification=f"{thermal.radiator_area_m2 / thermal.number_of_radiators:.1f}m² each",
        ))

    items.append(BOMItem(
        category="accessories",
        description="HV Bushings",
        quantity=3 if three_phase else 2,
        unit="ea",
        specification=f"{requirements.primary_voltage_kv:g}kV class",
    ))
    items.append(BOMItem(
        category="accessories",
        description="LV Bushings",
        quantity=4 if three_phase else 2,
        unit="ea",
        specification="1kV class",
    ))

    if thermal.number_of_fans > 0:
        items.append(BOMItem(
            category="accessories",
            description="Cooling Fans",
            quantity=thermal.number_of_fans,
            unit="ea",
            specification="Forced air cooling fans with motor",
        ))

    copper = sum(w.weight_kg for w in (hv, lv) if w.material == "copper")

    return BillOfMaterials(
        items=items,
        total_copper_weight_kg=round(copper),
        total_steel_weight_kg=round(core.core_weight_kg + tank.tank_weight_kg),
        total_oil_volume_l=thermal.oil_volume_l,
        total_weight_kg=tank.total_weight_kg,
        accessory_allowance_kg=tank.accessory_allowance_kg,
    )
