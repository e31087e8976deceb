"""Pricing Catalog for Transformer Cost Estimation

Approximate market prices for budgetary estimates (USD, 2024-2025).
Actual costs vary by supplier, quantity, location and market conditions.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from transformer_designer.catalog.lookup import LookupResult, lookup


@dataclass(frozen=True)
class ManufacturingRegion:
    """Regional cost multiplier and lead time."""
    label: str
    multiplier: float
    lead_time_weeks: Tuple[int, int]
    feoc_compliant: bool


# =============================================================================
# Materials
# =============================================================================

# $/kg keyed by SteelGrade.id
STEEL_PRICES: Dict[str, float] = {
    "m2": 3.80,
    "m3": 3.40,
    "m4": 3.00,
    "m5": 2.70,
    "m6": 2.40,
    "hi-b": 4.20,
    "laser": 4.80,
    "amorphous-sa1": 8.50,
    "amorphous-hb1m": 9.20,
}

# $/kg by material and product form
CONDUCTOR_PRICES: Dict[str, Dict[str, float]] = {
    "copper": {"wire": 9.50, "strip": 10.20, "ctc": 12.50},
    "aluminum": {"wire": 3.80, "strip": 4.20, "ctc": 5.50},
}

# ConductorShape.value -> product form
CONDUCTOR_FORM_BY_SHAPE = {
    "round": "wire",
    "rectangular": "strip",
    "ctc": "ctc",
}

# $/kVA
INSULATION_COST_FACTOR = {
    "paper_and_pressboard": 0.45,
    "insulation_cylinders": 0.30,
    "tapes_and_tubes": 0.15,
}

# $/L
OIL_PRICES: Dict[str, float] = {
    "mineral": 2.20,
    "natural_ester": 4.50,
    "synthetic_ester": 6.80,
    "silicone": 12.00,
}

TANK_COSTS = {
    "steel_plate_per_kg": 1.80,
    "fabrication_multiplier": 2.5,
    "conservator_per_liter": 8.00,
    "lifting_lug_each": 85,
    "lifting_lug_count": 4,
    "wheels_per_set": 450,
    "drains_and_valves": 320,
}

# =============================================================================
# Bushings, cooling, tap changers, accessories
# =============================================================================

# (voltage class kV, HV $, LV $)
BUSHING_PRICES = [
    (2.4, 280, 180),
    (4.16, 350, 180),
    (7.2, 450, 200),
    (12.0, 580, 220),
    (15.0, 720, 220),
    (23.0, 950, 250),
    (34.5, 1400, 280),
    (46.0, 2100, 320),
    (69.0, 3500, 350),
]

COOLING_COSTS = {
    "radiator_panel_small": 320,
    "radiator_panel_medium": 480,
    "radiator_panel_large": 680,
    "cooling_fan": 280,
    "oil_pump": 850,
    "flow_indicator": 120,
}

# (small, medium, large) by kVA band < 1000, < 5000, otherwise
TAP_CHANGER_COSTS: Dict[str, Tuple[float, float, float]] = {
    "no_load": (1200, 1800, 2800),
    "on_load": (15000, 25000, 45000),
}

ACCESSORY_COSTS = {
    "nameplate_and_rating_plate": 85,
    "grounding_pad": 45,
    "pressure_relief_device": 380,
    "buchholz_relay": 650,
    "oil_level_indicator": 180,
    "oil_temperature_indicator": 220,
    "winding_temperature_indicator": 480,
    "liquid_level_gauge": 150,
    "sampling_valve": 65,
    "silica_gel_breather": 180,
}

BUCHHOLZ_MIN_KVA = 1000
WTI_MIN_KVA = 2500

# =============================================================================
# Labour and overhead
# =============================================================================

LABOR_COSTS = {
    "assembly_hourly_rate": 65,
    "testing_hourly_rate": 85,
    "engineering_hourly_rate": 120,
    "assembly_hours_per_kva": 0.08,
    "testing_hours_per_kva": 0.03,
    "engineering_hours_per_kva": 0.02,
    "min_assembly_hours": 40,
    "min_testing_hours": 16,
    "min_engineering_hours": 8,
}

OVERHEAD_FACTORS = {
    "facility_overhead": 0.15,   # of direct costs
    "quality_control": 0.05,     # of direct costs
    "shipping": 0.08,            # of materials
    "warranty_reserve": 0.03,    # of direct costs
    "profit_margin": 0.12,
}

MANUFACTURING_REGIONS: Dict[str, ManufacturingRegion] = {
    "usa": ManufacturingRegion("USA", 1.0, (26, 52), True),
    "north_america": ManufacturingRegion("North America", 0.92, (20, 40), True),
    "global": ManufacturingRegion("Global (excl. China)", 0.80, (16, 36), True),
    "china": ManufacturingRegion("China", 0.65, (12, 24), False),
}

DEFAULT_REGION = "usa"
DEFAULT_TAP_CHANGER = "no_load"


def get_steel_price(steel_id: str) -> LookupResult:
    """Steel $/kg, falling back to M4 pricing."""
    return lookup("steel price", STEEL_PRICES, steel_id, "m4")


def get_conductor_price(material: str, shape: str) -> LookupResult:
    """Conductor $/kg for a material and ConductorShape value.

    Unknown materials are priced as copper and unknown shapes as strip.
    The result key is "<material>/<form>"; the first fallback, if any, is
    attached as the warning.
    """
    prices = lookup("conductor price", CONDUCTOR_PRICES, material, "copper")
    form = lookup("conductor shape", CONDUCTOR_FORM_BY_SHAPE, shape, "rectangular")
    return LookupResult(
        key=f"{prices.key}/{form.value}",
        value=prices.value[form.value],
        warning=prices.warning or form.warning,
    )


def get_oil_price(oil_type: str) -> LookupResult:
    return lookup("oil type", OIL_PRICES, oil_type, "mineral")


def get_bushing_price(voltage_v: float, side: str) -> float:
    """Price of one bushing for a line voltage (V) on side 'hv' or 'lv'.

    Voltages above the top class are priced at 69 kV.
    """
    voltage_kv = voltage_v / 1000.0
    column = 1 if side == "hv" else 2
    for entry in BUSHING_PRICES:
        if voltage_kv <= entry[0]:
            return entry[column]
    return BUSHING_PRICES[-1][column]


def get_tap_changer_cost(rated_power_kva: float, tap_changer_type: str) -> LookupResult:
    """Tap changer cost by kVA band, falling back to a no-load tap changer."""
    result = lookup("tap changer type", TAP_CHANGER_COSTS, tap_changer_type, DEFAULT_TAP_CHANGER)
    small, medium, large = result.value
    if rated_power_kva < 1000:
        cost = small
    elif rated_power_kva < 5000:
        cost = medium
    else:
        cost = large
    return LookupResult(key=result.key, value=cost, warning=result.warning)


def get_region(region: str) -> LookupResult:
    return lookup("manufacturing region", MANUFACTURING_REGIONS, region, DEFAULT_REGION)
