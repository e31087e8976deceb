"""Thermal Design for Oil-Immersed Transformers

Oil volume, radiator sizing and steady-state temperature rises.

Key equations:
    V_oil = K × S^0.75                       (liters)
    A_rad = P_total / (h × (ΔT_rise − 15))
    ΔT_oil = P_total / (h × A_installed)
    ΔT_gradient = 0.035 × q^0.8,  q = Pk / winding cooling surface
    ΔT_avg = ΔT_oil + ΔT_gradient
    ΔT_hs = 1.1 × ΔT_avg + 13

Standards:
    IEEE C57.91-2011: Loading Guide for Mineral-Oil-Immersed Transformers
    IEEE C57.12.00: Temperature rise limits
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from transformer_designer.calculation_steps import StepLedger
from transformer_designer.catalog.lookup import UnknownKeyWarning
from transformer_designer.catalog.materials import (
    COOLING_RATING_MULTIPLIERS,
    RADIATOR_SIZES,
    THERMAL_CONSTANTS,
    TRANSFORMER_OIL,
    get_oil_volume_constant,
    has_forced_air,
    normalize_cooling_class,
)
from transformer_designer.electrical.losses import LossCalculations
from transformer_designer.requirements import DesignInputError, DesignRequirements
from transformer_designer.windings.winding_design import WindingDesign

logger = logging.getLogger(__name__)

CATEGORY = "thermal"

DEFAULT_RADIATOR_SIZE = "medium"
MAX_HOT_SPOT_RISE_C = 80.0
AVERAGE_WINDING_MARGIN_C = 10.0

NORMAL_HOT_SPOT_LIMIT_C = 80.0
EMERGENCY_HOT_SPOT_LIMIT_C = 140.0


@dataclass(frozen=True)
class ThermalDesign:
    """Cooling equipment and temperature rises.

    Attributes:
        oil_volume_l: Main tank oil volume (L)
        oil_weight_kg: Oil weight (kg)
        top_oil_rise_c: Top-oil rise over ambient (°C)
        average_winding_rise_c: Average winding rise over ambient (°C)
        hot_spot_rise_c: Hot-spot rise over ambient (°C)
        radiator_area_m2: Installed radiator area (m²)
        number_of_radiators: Radiator panels
        number_of_fans: Cooling fans (0 for natural air)
    """
    oil_volume_l: float
    oil_weight_kg: float
    top_oil_rise_c: float
    average_winding_rise_c: float
    hot_spot_rise_c: float
    radiator_area_m2: float
    number_of_radiators: int
    number_of_fans: int


@dataclass(frozen=True)
class ThermalCheck:
    passes: bool
    issues: List[str]


@dataclass(frozen=True)
class PowerRatings:
    """Nameplate ratings per cooling stage (kVA)."""
    onan_kva: float
    onaf_kva: Optional[float]
    ofaf_kva: Optional[float]

    @property
    def display(self) -> str:
        parts = [r for r in (self.onan_kva, self.onaf_kva, self.ofaf_kva) if r is not None]
        return "/".join(f"{p:g}" for p in parts) + " kVA"


def winding_cooling_surface_m2(winding: WindingDesign) -> float:
    """Inner plus outer cylindrical surface of a winding (m²)."""
    height = winding.height_mm / 1000
    return 2 * np.pi * (winding.outer_radius_mm / 1000) * height \
        + 2 * np.pi * (winding.inner_radius_mm / 1000) * height


def check_thermal_limits(thermal: ThermalDesign, requirements: DesignRequirements) -> ThermalCheck:
    """Compare rises with the limits for the temperature-rise class.

    Returns:
        ThermalCheck listing every exceeded limit
    """
    rise = requirements.temperature_rise_c or 65
    max_avg = rise + AVERAGE_WINDING_MARGIN_C
    issues = []
    if thermal.top_oil_rise_c > rise:
        issues.append(f"Top oil rise ({thermal.top_oil_rise_c}°C) exceeds limit ({rise:g}°C)")
    if thermal.average_winding_rise_c > max_avg:
        issues.append(
            f"Average winding rise ({thermal.average_winding_rise_c}°C) exceeds limit ({max_avg:g}°C)"
        )
    if thermal.hot_spot_rise_c > MAX_HOT_SPOT_RISE_C:
        issues.append(
            f"Hot spot rise ({thermal.hot_spot_rise_c}°C) exceeds limit ({MAX_HOT_SPOT_RISE_C:g}°C)"
        )
    return ThermalCheck(passes=not issues, issues=issues)


def calculate_overload_capability(
    thermal: ThermalDesign,
    requirements: DesignRequirements,
) -> Tuple[int, int]:
    """Short-term and emergency overload capability (% of rating).

    Load is taken to scale with the square root of the hot-spot
    temperature headroom; a simplification of the IEEE C57.91 method.

    Returns:
        (short-term overload %, emergency overload %)
    """
    ambient = requirements.ambient_temp_c if requirements.ambient_temp_c is not None else 30.0
    hot_spot = ambient + thermal.hot_spot_rise_c
    if hot_spot <= 0:
        raise DesignInputError("Hot-spot temperature must be above 0°C for overload estimation")
    normal = np.sqrt((NORMAL_HOT_SPOT_LIMIT_C + ambient) / hot_spot)
    emergency = np.sqrt((EMERGENCY_HOT_SPOT_LIMIT_C + ambient) / hot_spot)
    return int(round(normal * 100)), int(round(emergency * 100))


def calculate_power_ratings(base_kva: float, cooling_class: str) -> PowerRatings:
    """Stage ratings for dual and triple rated cooling classes."""
    key = normalize_cooling_class(cooling_class)
    onaf = ofaf = None
    if key in ("ONAN/ONAF", "ONAN/ONAF/OFAF"):
        onaf = round(base_kva * COOLING_RATING_MULTIPLIERS["ONAF"])
    if key == "ONAN/ONAF/OFAF":
        ofaf = round(base_kva * COOLING_RATING_MULTIPLIERS["OFAF"])
    return PowerRatings(onan_kva=base_kva, onaf_kva=onaf, ofaf_kva=ofaf)


class ThermalDesigner:
    """Sizes oil and radiators and estimates temperature rises."""

    def __init__(self, requirements: DesignRequirements, ledger: Optional[StepLedger] = None):
        self.requirements = requirements
        self.ledger = ledger if ledger is not None else StepLedger()
        self.warnings: List[UnknownKeyWarning] = []
        self.forced_air = has_forced_air(requirements.cooling_class)
        self.h_coeff = (
            THERMAL_CONSTANTS["tank_to_air_forced_w_m2k"] if self.forced_air
            else THERMAL_CONSTANTS["tank_to_air_natural_w_m2k"]
        )

    def calculate_oil_volume(self) -> Tuple[float, float]:
        """Returns (oil volume L, oil weight kg)."""
        kva = self.requirements.rated_power_kva
        k_result = get_oil_volume_constant(self.requirements.cooling_class)
        if k_result.warning and k_result.warning not in self.warnings:
            self.warnings.append(k_result.warning)
        K = k_result.value

        volume = K * kva ** 0.75
        weight = volume * TRANSFORMER_OIL["density_kg_l"]

        self.ledger.add(
            id="oil-volume",
            title="Oil Volume",
            formula="V = K × kVA^0.75",
            inputs={
                "K": (K, "", f"Oil volume constant for {k_result.key}"),
                "kVA": (kva, "kVA", "Transformer rating"),
            },
            result=(round(volume), "liters"),
            explanation=f"Oil insulates and carries heat; {weight:.0f} kg of mineral oil.",
            category=CATEGORY,
        )
        return volume, weight

    def calculate_radiators(self, total_loss_w: float) -> Tuple[float, int, int]:
        """Returns (installed radiator area m², panel count, fan count).

        Raises:
            DesignInputError: If the temperature rise leaves no radiator margin
        """
        rise = self.requirements.temperature_rise_c or 65
        delta_t = rise - THERMAL_CONSTANTS["gradient_reserve_c"]
        if delta_t <= 0:
            raise DesignInputError(
                f"Temperature rise {rise:g}°C must exceed the "
                f"{THERMAL_CONSTANTS['gradient_reserve_c']}°C gradient reserve"
            )

        required = total_loss_w / (self.h_coeff * delta_t)
        panel = RADIATOR_SIZES[DEFAULT_RADIATOR_SIZE]
        count = int(np.ceil(required / panel.area_m2))
        installed = count * panel.area_m2
        fans = max(2, int(np.ceil(count / 2))) if self.forced_air else 0

        self.ledger.add(
            id="radiator-sizing",
            title="Radiator Sizing",
            formula="A = Pt / (h × ΔT)",
            inputs={
                "Pt": (round(total_loss_w), "W", "Total losses"),
                "h": (self.h_coeff, "W/(m²·K)", "Heat transfer coefficient"),
                "ΔT": (delta_t, "°C", "Available temperature rise"),
            },
            result=(round(installed, 1), "m²"),
            explanation=(
                f"{required:.1f} m² required; {count} panels of {panel.area_m2} m² give "
                f"{installed:.1f} m²" + (f" with {fans} fans." if fans else ".")
            ),
            category=CATEGORY,
        )
        return installed, count, fans

    def calculate_temperature_rises(
        self,
        total_loss_w: float,
        load_loss_w: float,
        radiator_area_m2: float,
        hv: WindingDesign,
        lv: WindingDesign,
    ) -> Tuple[float, float, float]:
        """Returns (top-oil, average winding, hot-spot) rises in °C."""
        if radiator_area_m2 > 0:
            top_oil = total_loss_w / (self.h_coeff * radiator_area_m2)
        else:
            top_oil = 0.0

        surface = winding_cooling_surface_m2(hv) + winding_cooling_surface_m2(lv)
        q = load_loss_w / surface if surface > 0 else 0.0
        gradient = THERMAL_CONSTANTS["winding_gradient_constant"] * q ** 0.8
        average = top_oil + gradient
        hot_spot = average * THERMAL_CONSTANTS["hot_spot_factor"] + THERMAL_CONSTANTS["hot_spot_allowance_c"]

        self.ledger.add(
            id="temperature-rises",
            title="Temperature Rises",
            formula="ΔT_oil = Pt/(h×A), ΔT_wg = K×q^0.8, ΔT_hs = 1.1×ΔT_avg + 13",
            inputs={
                "Pt": (round(total_loss_w), "W", "Total losses"),
                "A": (radiator_area_m2, "m²", "Radiator area"),
                "q": (round(q), "W/m²", "Winding loss density"),
            },
            result=(round(hot_spot, 1), "°C hot spot rise"),
            explanation=f"Top oil {top_oil:.1f}°C, average winding {average:.1f}°C.",
            category=CATEGORY,
        )
        return top_oil, average, hot_spot

    def design(self, hv: WindingDesign, lv: WindingDesign, losses: LossCalculations) -> ThermalDesign:
        volume, weight = self.calculate_oil_volume()
        total = losses.no_load_loss_w + losses.load_loss_w
        area, radiators, fans = self.calculate_radiators(total)
        top_oil, average, hot_spot = self.calculate_temperature_rises(
            total, losses.load_loss_w, area, hv, lv
        )
        logger.info(
            f"Thermal: {volume:.0f} L oil, {radiators} radiators, {fans} fans, "
            f"hot-spot rise {hot_spot:.1f}°C"
        )
        return ThermalDesign(
            oil_volume_l=round(volume),
            oil_weight_kg=round(weight),
            top_oil_rise_c=round(top_oil, 1),
            average_winding_rise_c=round(average, 1),
            hot_spot_rise_c=round(hot_spot, 1),
            radiator_area_m2=round(area, 1),
            number_of_radiators=radiators,
            number_of_fans=fans,
        )
