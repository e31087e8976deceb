"""Manufacturing Cost Estimation

Budgetary manufacturing cost for a finished transformer design: materials
priced from the pricing catalog, labour hours scaled with rating, overhead,
profit margin and a manufacturing-region multiplier. A lifecycle variant
adds the capitalized cost of energy lost over the service life.

Key equations:
    direct = materials + labour
    subtotal = direct × (1 + facility + QC + warranty) + shipping × materials
    total = subtotal × (1 + margin) × region multiplier
    annual loss cost = (P0 × 8760 + Pk × 8760 × (0.3·LF + 0.7·LF²)) × rate
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

import pandas as pd

from transformer_designer.catalog.lookup import LookupResult, UnknownKeyWarning
from transformer_designer.catalog.pricing import (
    ACCESSORY_COSTS,
    BUCHHOLZ_MIN_KVA,
    COOLING_COSTS,
    INSULATION_COST_FACTOR,
    LABOR_COSTS,
    OVERHEAD_FACTORS,
    TANK_COSTS,
    WTI_MIN_KVA,
    get_bushing_price,
    get_conductor_price,
    get_oil_price,
    get_region,
    get_steel_price,
    get_tap_changer_cost,
)
from transformer_designer.electrical.losses import calculate_annual_losses

if TYPE_CHECKING:
    from transformer_designer.design_engine import TransformerDesign

logger = logging.getLogger(__name__)

# Always-fitted accessories; Buchholz relay and WTI depend on rating
STANDARD_ACCESSORIES = (
    "nameplate_and_rating_plate",
    "grounding_pad",
    "pressure_relief_device",
    "oil_level_indicator",
    "oil_temperature_indicator",
    "liquid_level_gauge",
    "sampling_valve",
    "silica_gel_breather",
)


@dataclass(frozen=True)
class CostEstimationOptions:
    """Pricing choices.

    Attributes:
        oil_type: mineral, natural_ester, synthetic_ester or silicone
        tap_changer_type: no_load or on_load
        include_oltc: Force an on-load tap changer
        region: usa, north_america, global or china
        profit_margin: Profit as a fraction of subtotal
    """
    oil_type: str = "mineral"
    tap_changer_type: str = "no_load"
    include_oltc: bool = False
    region: str = "usa"
    profit_margin: float = OVERHEAD_FACTORS["profit_margin"]


@dataclass(frozen=True)
class CostBreakdown:
    """Manufacturing cost by category (USD)."""
    # Materials
    core_steel: float
    conductors: float
    insulation: float
    oil: float
    tank: float
    bushings: float
    cooling: float
    tap_changer: float
    accessories: float
    total_materials: float
    # Labour
    assembly: float
    testing: float
    engineering: float
    total_labor: float
    # Overhead
    facility_overhead: float
    quality_control: float
    shipping: float
    warranty_reserve: float
    # Totals
    subtotal: float
    profit: float
    total_cost: float
    cost_per_kva: float
    cost_per_kg: float
    region: str = "usa"
    region_multiplier: float = 1.0
    warnings: Tuple[UnknownKeyWarning, ...] = ()

    def to_dataframe(self) -> pd.DataFrame:
        """Line items grouped by section."""
        sections = {
            "materials": ("core_steel", "conductors", "insulation", "oil", "tank",
                          "bushings", "cooling", "tap_changer", "accessories"),
            "labor": ("assembly", "testing", "engineering"),
            "overhead": ("facility_overhead", "quality_control", "shipping", "warranty_reserve"),
            "margin": ("profit",),
        }
        rows = [
            {"section": section, "item": name, "cost_usd": getattr(self, name)}
            for section, names in sections.items()
            for name in names
        ]
        return pd.DataFrame(rows)


@dataclass(frozen=True)
class CostComparison:
    cost1: CostBreakdown
    cost2: CostBreakdown
    difference: float
    percent_difference: float


@dataclass(frozen=True)
class LifecycleCost:
    initial_cost: float
    annual_energy_loss_kwh: float
    annual_loss_cost: float
    total_lifecycle_cost: float
    years: int


def _priced(result: LookupResult, warnings: List[UnknownKeyWarning]):
    """Value of a pricing lookup; a fallback warning is recorded once."""
    if result.warning is not None and result.warning not in warnings:
        warnings.append(result.warning)
    return result.value


def calculate_labor_hours(rated_power_kva: float) -> dict:
    """Assembly, testing and engineering hours, floored at minimums."""
    return {
        "assembly": max(LABOR_COSTS["min_assembly_hours"], rated_power_kva * LABOR_COSTS["assembly_hours_per_kva"]),
        "testing": max(LABOR_COSTS["min_testing_hours"], rated_power_kva * LABOR_COSTS["testing_hours_per_kva"]),
        "engineering": max(LABOR_COSTS["min_engineering_hours"], rated_power_kva * LABOR_COSTS["engineering_hours_per_kva"]),
    }


def estimate_cost(
    design: "TransformerDesign",
    options: Optional[CostEstimationOptions] = None,
) -> CostBreakdown:
    """Estimate the manufacturing cost of a design.

    Args:
        design: Completed transformer design
        options: Pricing choices (defaults if omitted)

    Returns:
        CostBreakdown rounded to whole dollars (cost per kg to cents)
    """
    options = options or CostEstimationOptions()
    reqs = design.requirements
    kva = reqs.rated_power_kva

    warnings: List[UnknownKeyWarning] = []

    # Materials
    core_steel = design.core.core_weight_kg * _priced(get_steel_price(design.core.steel_grade.id), warnings)

    conductors = sum(
        w.weight_kg * _priced(get_conductor_price(w.material, w.shape.value), warnings)
        for w in (design.hv_winding, design.lv_winding)
    )

    insulation = kva * sum(INSULATION_COST_FACTOR.values())

    oil = design.thermal.oil_volume_l * _priced(get_oil_price(options.oil_type), warnings)

    tank_fabrication = (
        design.tank.tank_weight_kg * TANK_COSTS["steel_plate_per_kg"] * TANK_COSTS["fabrication_multiplier"]
    )
    tank = (
        tank_fabrication
        + design.tank.conservator_volume_l * TANK_COSTS["conservator_per_liter"]
        + TANK_COSTS["lifting_lug_each"] * TANK_COSTS["lifting_lug_count"]
        + TANK_COSTS["wheels_per_set"]
        + TANK_COSTS["drains_and_valves"]
    )

    phases = reqs.phases
    bushings = (
        get_bushing_price(reqs.primary_voltage_v, "hv") * phases
        + get_bushing_price(reqs.secondary_voltage_v, "lv") * (phases + 1)
    )

    cooling = (
        design.thermal.number_of_radiators * COOLING_COSTS["radiator_panel_medium"]
        + design.thermal.number_of_fans * COOLING_COSTS["cooling_fan"]
        + COOLING_COSTS["flow_indicator"]
    )

    tap_type = "on_load" if options.include_oltc else options.tap_changer_type
    tap_changer = _priced(get_tap_changer_cost(kva, tap_type), warnings)

    accessories = sum(ACCESSORY_COSTS[name] for name in STANDARD_ACCESSORIES)
    if kva > BUCHHOLZ_MIN_KVA:
        accessories += ACCESSORY_COSTS["buchholz_relay"]
    if kva > WTI_MIN_KVA:
        accessories += ACCESSORY_COSTS["winding_temperature_indicator"]

    total_materials = (
        core_steel + conductors + insulation + oil + tank
        + bushings + cooling + tap_changer + accessories
    )

    # Labour
    hours = calculate_labor_hours(kva)
    assembly = hours["assembly"] * LABOR_COSTS["assembly_hourly_rate"]
    testing = hours["testing"] * LABOR_COSTS["testing_hourly_rate"]
    engineering = hours["engineering"] * LABOR_COSTS["engineering_hourly_rate"]
    total_labor = assembly + testing + engineering

    # Overhead
    direct = total_materials + total_labor
    facility = direct * OVERHEAD_FACTORS["facility_overhead"]
    quality = direct * OVERHEAD_FACTORS["quality_control"]
    shipping = total_materials * OVERHEAD_FACTORS["shipping"]
    warranty = direct * OVERHEAD_FACTORS["warranty_reserve"]

    subtotal = direct + facility + quality + shipping + warranty
    profit = subtotal * options.profit_margin

    region = get_region(options.region)
    _priced(region, warnings)
    total = (subtotal + profit) * region.value.multiplier

    total_weight = design.tank.total_weight_kg
    cost_per_kg = total / total_weight if total_weight > 0 else 0.0

    logger.info(f"Cost estimate: ${total:,.0f} ({region.value.label}), ${total / kva:,.0f}/kVA")

    return CostBreakdown(
        core_steel=round(core_steel),
        conductors=round(conductors),
        insulation=round(insulation),
        oil=round(oil),
        tank=round(tank),
        bushings=round(bushings),
        cooling=round(cooling),
        tap_changer=round(tap_changer),
        accessories=round(accessories),
        total_materials=round(total_materials),
        assembly=round(assembly),
        testing=round(testing),
        engineering=round(engineering),
        total_labor=round(total_labor),
        facility_overhead=round(facility),
        quality_control=round(quality),
        shipping=round(shipping),
        warranty_reserve=round(warranty),
        subtotal=round(subtotal),
        profit=round(profit),
        total_cost=round(total),
        cost_per_kva=round(total / kva),
        cost_per_kg=round(cost_per_kg, 2),
        region=region.key,
        region_multiplier=region.value.multiplier,
        warnings=tuple(warnings),
    )


def compare_costs(
    design1: "TransformerDesign",
    design2: "TransformerDesign",
    options: Optional[CostEstimationOptions] = None,
) -> CostComparison:
    """Cost difference of design2 relative to design1."""
    cost1 = estimate_cost(design1, options)
    cost2 = estimate_cost(design2, options)
    difference = cost2.total_cost - cost1.total_cost
    percent = difference / cost1.total_cost * 100 if cost1.total_cost else 0.0
    return CostComparison(cost1, cost2, difference, round(percent, 1))


def calculate_lifecycle_cost(
    design: "TransformerDesign",
    options: Optional[CostEstimationOptions] = None,
    electricity_rate_per_kwh: float = 0.10,
    years_of_operation: int = 25,
    load_factor: float = 0.5,
    hours_per_year: float = 8760,
) -> LifecycleCost:
    """Purchase cost plus the undiscounted cost of losses over the service life.

    Args:
        design: Completed transformer design
        options: Pricing choices for the initial cost
        electricity_rate_per_kwh: Energy price ($/kWh)
        years_of_operation: Service life (years)
        load_factor: Average load as a fraction of rating
        hours_per_year: Energized hours per year

    Returns:
        LifecycleCost
    """
    initial = estimate_cost(design, options).total_cost
    annual = calculate_annual_losses(
        design.losses.no_load_loss_w,
        design.losses.load_loss_w,
        load_factor=load_factor,
        hours_per_year=hours_per_year,
        electricity_rate_per_kwh=electricity_rate_per_kwh,
    )
    annual_cost = annual["annual_cost"]
    return LifecycleCost(
        initial_cost=initial,
        annual_energy_loss_kwh=round(annual["energy_loss_kwh"]),
        annual_loss_cost=round(annual_cost),
        total_lifecycle_cost=round(initial + annual_cost * years_of_operation),
        years=years_of_operation,
    )
