"""Material Catalog for Oil-Filled Transformer Design

Static reference data used by the design calculations: electrical steel
grades, conductor properties, current density bands, transformer oil,
thermal constants, BIL levels and radiator panel sizes.

Standards:
    IEEE C57.12.00: General Requirements for Liquid-Immersed Transformers
    IEEE C57.91-2011: Loading Guide for Mineral-Oil-Immersed Transformers
    ASTM D3487: Mineral Insulating Oil Used in Electrical Apparatus

Specific loss values are at 1.7 T, 60 Hz.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from transformer_designer.catalog.lookup import LookupResult, lookup


@dataclass(frozen=True)
class SteelGrade:
    """Electrical steel grade properties.

    Attributes:
        id: Short identifier used by the pricing catalog
        name: Display name
        thickness_mm: Lamination thickness (mm)
        specific_loss_w_kg: Specific core loss at 1.7 T, 60 Hz (W/kg)
        density_kg_m3: Steel density (kg/m³)
        stacking_factor: Ratio of net iron to gross stack area
        max_flux_density_t: Rated maximum flux density (T)
    """
    id: str
    name: str
    thickness_mm: float
    specific_loss_w_kg: float
    density_kg_m3: float
    stacking_factor: float
    max_flux_density_t: float


@dataclass(frozen=True)
class ConductorProperties:
    """Conductor material properties at 20°C."""
    name: str
    resistivity_ohm_m: float
    temp_coeff_per_k: float
    density_kg_m3: float
    max_current_density_a_mm2: float


@dataclass(frozen=True)
class CurrentDensityBand:
    """Recommended copper current density range (A/mm²)."""
    min_a_mm2: float
    max_a_mm2: float
    typical_a_mm2: float


@dataclass(frozen=True)
class RadiatorPanel:
    """Pressed-steel radiator panel size."""
    area_m2: float
    height_mm: float
    fins: int


# =============================================================================
# Electrical Steel Grades
# =============================================================================

STEEL_GRADES: Dict[str, SteelGrade] = {
    "M2": SteelGrade("m2", "M2 (27M2) - Premium", 0.27, 0.96, 7650, 0.96, 1.72),
    "M3": SteelGrade("m3", "M3 (27M3) - High Grade", 0.27, 1.05, 7650, 0.96, 1.70),
    "M4": SteelGrade("m4", "M4 (27M4) - Standard", 0.27, 1.17, 7650, 0.95, 1.68),
    "M5": SteelGrade("m5", "M5 (30M5) - Economy", 0.30, 1.30, 7650, 0.95, 1.65),
    "M6": SteelGrade("m6", "M6 (35M6) - Basic", 0.35, 1.50, 7650, 0.94, 1.60),
    "Hi-B": SteelGrade("hi-b", "Hi-B - Ultra Premium", 0.23, 0.85, 7650, 0.97, 1.75),
    "Laser-Scribed": SteelGrade("laser", "Laser-Scribed", 0.23, 0.80, 7650, 0.97, 1.75),
    # 25 micron ribbons, lower saturation than GOES
    "Amorphous-2605SA1": SteelGrade("amorphous-sa1", "Amorphous 2605SA1", 0.025, 0.25, 7180, 0.85, 1.56),
    "Amorphous-2605HB1M": SteelGrade("amorphous-hb1m", "Amorphous 2605HB1M", 0.025, 0.22, 7320, 0.85, 1.63),
}

DEFAULT_STEEL_GRADE = "M4"

# =============================================================================
# Conductors
# =============================================================================

CONDUCTOR_PROPERTIES: Dict[str, ConductorProperties] = {
    "copper": ConductorProperties("Copper", 1.724e-8, 0.00393, 8900, 4.5),
    "aluminum": ConductorProperties("Aluminum", 2.82e-8, 0.00403, 2700, 2.5),
}

DEFAULT_CONDUCTOR_MATERIAL = "copper"

# Copper values; aluminum runs at ALUMINUM_DENSITY_FACTOR of these
CURRENT_DENSITY_BY_COOLING: Dict[str, CurrentDensityBand] = {
    "ONAN": CurrentDensityBand(2.0, 3.5, 3.0),
    "ONAF": CurrentDensityBand(3.0, 4.5, 4.0),
    "ONAN/ONAF": CurrentDensityBand(2.5, 4.0, 3.5),
    "ONAN/ONAF/OFAF": CurrentDensityBand(3.0, 4.5, 4.0),
}

DEFAULT_COOLING_CLASS = "ONAN"
ALUMINUM_DENSITY_FACTOR = 0.6
LV_DENSITY_FACTOR = 0.95

# =============================================================================
# Transformer Oil
# =============================================================================

TRANSFORMER_OIL = {
    "name": "Mineral Transformer Oil (Type I)",
    "density_kg_l": 0.87,
    "specific_heat_kj_kg_k": 1.88,
    "thermal_conductivity_w_m_k": 0.126,
    "flash_point_c": 145,
    "pour_point_c": -40,
    "dielectric_strength_kv": 40,
    "expansion_coeff_per_c": 0.00075,
}

# =============================================================================
# Core Design Constants
# =============================================================================

# Fraction of the circumscribed circle filled by a stepped core
CORE_STEP_UTILIZATION: Dict[int, float] = {
    1: 0.637,
    2: 0.785,
    3: 0.849,
    4: 0.885,
    5: 0.906,
    6: 0.920,
    7: 0.930,
    8: 0.937,
    9: 0.943,
    10: 0.948,
    11: 0.951,
    12: 0.954,
    13: 0.957,
}

DEFAULT_STEP_UTILIZATION = 0.90

# Et = K × √kVA
VOLTS_PER_TURN_CONSTANT = {
    "distribution": 0.45,   # < 500 kVA
    "medium_power": 0.63,   # 500-5000 kVA
    "large_power": 0.67,    # > 5000 kVA
}

CORE_BUILDING_FACTOR = 1.15

EDDY_LOSS_FACTOR = 0.10
STRAY_LOSS_FACTOR = 0.05

# =============================================================================
# Thermal Constants
# =============================================================================

THERMAL_CONSTANTS = {
    "tank_to_air_natural_w_m2k": 9,
    "tank_to_air_forced_w_m2k": 15,
    "hot_spot_factor": 1.1,
    "hot_spot_allowance_c": 13,
    "winding_gradient_constant": 0.035,
    "gradient_reserve_c": 15,
}

# V_oil = K × kVA^0.75 (liters)
OIL_VOLUME_CONSTANT: Dict[str, float] = {
    "ONAN": 4.5,
    "ONAF": 4.0,
    "ONAN/ONAF": 4.2,
    "ONAN/ONAF/OFAF": 3.8,
}

RADIATOR_SIZES: Dict[str, RadiatorPanel] = {
    "small": RadiatorPanel(1.5, 800, 12),
    "medium": RadiatorPanel(2.5, 1000, 16),
    "large": RadiatorPanel(4.0, 1200, 20),
}

COOLING_RATING_MULTIPLIERS = {
    "ONAN": 1.0,
    "ONAF": 1.33,
    "OFAF": 1.67,
}

# =============================================================================
# Insulation
# =============================================================================

# (upper kV bound, BIL kV) per IEEE C57.12.00
BIL_TABLE = [
    (1.2, 30),
    (2.5, 45),
    (5.0, 60),
    (8.7, 75),
    (15.0, 95),
    (25.0, 125),
    (35.0, 150),
    (46.0, 200),
    (69.0, 250),
]
BIL_ABOVE_69KV = 350

INSULATION_CLEARANCES = {
    "hv_to_lv_gap_mm_per_kv_bil": 0.25,
    "min_main_gap_mm": 15,
    "core_to_winding_mm": 15,
    "top_bottom_mm": 30,
    "paper_per_side_mm": 0.3,
    "layer_insulation_mm": 0.5,
}


def get_steel_grade(grade: Optional[str]) -> LookupResult:
    """Look up a steel grade, falling back to M4."""
    return lookup("steel grade", STEEL_GRADES, grade or DEFAULT_STEEL_GRADE, DEFAULT_STEEL_GRADE)


def get_conductor_properties(material: Optional[str]) -> LookupResult:
    """Look up conductor properties, falling back to copper."""
    return lookup(
        "conductor material",
        CONDUCTOR_PROPERTIES,
        material or DEFAULT_CONDUCTOR_MATERIAL,
        DEFAULT_CONDUCTOR_MATERIAL,
    )


def normalize_cooling_class(cooling_class: Optional[str]) -> str:
    """Normalize 'onan-onaf' style identifiers to 'ONAN/ONAF'."""
    if not cooling_class:
        return DEFAULT_COOLING_CLASS
    return cooling_class.strip().upper().replace("-", "/")


def get_current_density_band(cooling_class: Optional[str]) -> LookupResult:
    """Look up the current density band for a cooling class, falling back to ONAN."""
    return lookup(
        "cooling class",
        CURRENT_DENSITY_BY_COOLING,
        normalize_cooling_class(cooling_class),
        DEFAULT_COOLING_CLASS,
    )


def get_oil_volume_constant(cooling_class: Optional[str]) -> LookupResult:
    """Look up the oil volume constant K, falling back to ONAN."""
    return lookup(
        "cooling class",
        OIL_VOLUME_CONSTANT,
        normalize_cooling_class(cooling_class),
        DEFAULT_COOLING_CLASS,
    )


def has_forced_air(cooling_class: Optional[str]) -> bool:
    return "ONAF" in normalize_cooling_class(cooling_class)


def get_bil_level(voltage_kv: float) -> float:
    """Standard BIL level (kV) for a system voltage class (kV)."""
    for upper_kv, bil in BIL_TABLE:
        if voltage_kv <= upper_kv:
            return bil
    return BIL_ABOVE_69KV
