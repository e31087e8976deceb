"""Transformer Loss Calculations

No-load (core) loss, load (winding) loss and the efficiency curve.

Key equations:
    P0 = Wc × Ps × (Bm/1.7)² × Bf × (f/60)^1.6
    Pk = (ΣI²R20 + Peddy + Pstray) × (234.5 + 75) / (234.5 + 20)
    η(x) = x·S / (x·S + P0 + x²·Pk)
    x_max = √(P0 / Pk),  η_max = x_max·S / (x_max·S + 2·P0)

Standards:
    IEEE C57.12.90: Test Code, load losses referred to 75°C
    IEEE C57.12.00: General Requirements for Liquid-Immersed Transformers
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from transformer_designer.calculation_steps import StepLedger
from transformer_designer.catalog.materials import (
    CORE_BUILDING_FACTOR,
    EDDY_LOSS_FACTOR,
    STRAY_LOSS_FACTOR,
)
from transformer_designer.magnetics.core_design import CoreDesign
from transformer_designer.requirements import DesignRequirements
from transformer_designer.windings.winding_design import WindingDesign

logger = logging.getLogger(__name__)

CATEGORY = "losses"

COPPER_TEMP_CONSTANT_K = 234.5
REFERENCE_TEMP_C = 75.0
MEASUREMENT_TEMP_C = 20.0
SPECIFIC_LOSS_REFERENCE_T = 1.7
SPECIFIC_LOSS_REFERENCE_HZ = 60.0
FREQUENCY_EXPONENT = 1.6

EFFICIENCY_LOAD_POINTS = (0.25, 0.5, 0.75, 1.0, 1.1, 1.25)


@dataclass(frozen=True)
class EfficiencyPoint:
    """Efficiency at one load fraction (unity power factor)."""
    load_pct: float
    efficiency_pct: float
    losses_w: float
    output_w: float


@dataclass(frozen=True)
class LossCalculations:
    """Losses at rated load plus the efficiency curve.

    Attributes:
        no_load_loss_w: Core loss (W)
        load_loss_w: Winding loss at 75°C (W)
        total_loss_w: No-load + load loss (W)
        i2r_loss_w: Σ I²R at 20°C (W)
        eddy_loss_w: Winding eddy loss (W)
        stray_loss_w: Structural stray loss (W)
        efficiency_curve: Six sampled load points
        max_efficiency_load_pct: Load at maximum efficiency (%)
        max_efficiency_pct: Efficiency at that load (%)
    """
    no_load_loss_w: float
    load_loss_w: float
    total_loss_w: float
    i2r_loss_w: float
    eddy_loss_w: float
    stray_loss_w: float
    efficiency_curve: List[EfficiencyPoint] = field(default_factory=list)
    max_efficiency_load_pct: float = 0.0
    max_efficiency_pct: float = 0.0

    def efficiency_at(self, load_pct: float) -> Optional[float]:
        for point in self.efficiency_curve:
            if np.isclose(point.load_pct, load_pct):
                return point.efficiency_pct
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """Efficiency curve as a DataFrame indexed by load percent."""
        df = pd.DataFrame([
            {
                "load_pct": p.load_pct,
                "efficiency_pct": p.efficiency_pct,
                "losses_w": p.losses_w,
                "output_w": p.output_w,
            }
            for p in self.efficiency_curve
        ])
        return df.set_index("load_pct")


def temperature_correction_factor(
    from_temp_c: float = MEASUREMENT_TEMP_C,
    to_temp_c: float = REFERENCE_TEMP_C,
) -> float:
    """Copper resistance ratio between two temperatures."""
    return (COPPER_TEMP_CONSTANT_K + to_temp_c) / (COPPER_TEMP_CONSTANT_K + from_temp_c)


def efficiency_pct(rated_power_kva: float, load_fraction: float,
                   no_load_loss_w: float, load_loss_w: float) -> float:
    output = load_fraction * rated_power_kva * 1000
    losses = no_load_loss_w + load_loss_w * load_fraction ** 2
    if output + losses <= 0:
        return 0.0
    return output / (output + losses) * 100


def find_max_efficiency(
    rated_power_kva: float,
    no_load_loss_w: float,
    load_loss_w: float,
) -> Tuple[float, float]:
    """Load fraction and efficiency at maximum efficiency.

    With no load loss efficiency keeps rising with load, so the top sampled
    point is reported. With no core loss the limit is 100% at vanishing load.

    Returns:
        (load percent, efficiency percent), both rounded
    """
    if load_loss_w <= 0:
        top = EFFICIENCY_LOAD_POINTS[-1]
        eff = efficiency_pct(rated_power_kva, top, no_load_loss_w, 0.0)
        return round(top * 100, 2), round(eff, 2)
    if no_load_loss_w <= 0:
        return 0.0, 100.0

    load = np.sqrt(no_load_loss_w / load_loss_w)
    output = load * rated_power_kva * 1000
    eff = output / (output + 2 * no_load_loss_w) * 100
    return round(float(load) * 100, 2), round(float(eff), 2)


def calculate_annual_losses(
    no_load_loss_w: float,
    load_loss_w: float,
    load_factor: float = 0.5,
    hours_per_year: float = 8760,
    electricity_rate_per_kwh: float = 0.10,
) -> dict:
    """Annual energy lost in the transformer.

    Load loss is weighted by the loss factor 0.3·LF + 0.7·LF².

    Args:
        no_load_loss_w: Core loss (W), present all year
        load_loss_w: Load loss at rated current (W)
        load_factor: Average load as a fraction of rating
        hours_per_year: Energized hours per year
        electricity_rate_per_kwh: Energy price ($/kWh)

    Returns:
        Dict with loss_factor, no_load_energy_kwh, load_energy_kwh,
        energy_loss_kwh and annual_cost
    """
    loss_factor = 0.3 * load_factor + 0.7 * load_factor ** 2
    no_load_energy = no_load_loss_w / 1000 * hours_per_year
    load_energy = load_loss_w / 1000 * hours_per_year * loss_factor
    total = no_load_energy + load_energy
    return {
        "loss_factor": loss_factor,
        "no_load_energy_kwh": no_load_energy,
        "load_energy_kwh": load_energy,
        "energy_loss_kwh": total,
        "annual_cost": total * electricity_rate_per_kwh,
    }


def calculate_loss_ratio(no_load_loss_w: float, load_loss_w: float) -> float:
    """No-load to load loss ratio."""
    if load_loss_w <= 0:
        return float("inf")
    return no_load_loss_w / load_loss_w


class LossCalculator:
    """Computes losses and efficiency for a core and winding pair."""

    def __init__(self, requirements: DesignRequirements, ledger: Optional[StepLedger] = None):
        self.requirements = requirements
        self.ledger = ledger if ledger is not None else StepLedger()

    def calculate_no_load_loss(self, core: CoreDesign) -> float:
        f = self.requirements.frequency_hz
        grade = core.steel_grade
        flux_factor = (core.flux_density_t / SPECIFIC_LOSS_REFERENCE_T) ** 2
        freq_factor = (f / SPECIFIC_LOSS_REFERENCE_HZ) ** FREQUENCY_EXPONENT
        p0 = core.core_weight_kg * grade.specific_loss_w_kg * flux_factor * CORE_BUILDING_FACTOR * freq_factor

        self.ledger.add(
            id="no-load-loss",
            title="No-Load (Core) Loss",
            formula="P₀ = Wc × Ps × (Bm/1.7)² × Bf × (f/60)^1.6",
            inputs={
                "Wc": (core.core_weight_kg, "kg", "Core weight"),
                "Ps": (grade.specific_loss_w_kg, "W/kg", f"Specific loss for {grade.name}"),
                "Bm": (core.flux_density_t, "T", "Operating flux density"),
                "Bf": (CORE_BUILDING_FACTOR, "", "Building factor"),
                "f": (f, "Hz", "System frequency"),
            },
            result=(round(p0), "W"),
            explanation=(
                "Core loss is present whenever the transformer is energized. The building "
                "factor covers joints, corners and bolt holes."
            ),
            category=CATEGORY,
        )
        return float(p0)

    def calculate_i2r_losses(self, hv: WindingDesign, lv: WindingDesign) -> Tuple[float, float]:
        """Returns (HV I²R, LV I²R) at 20°C in W."""
        hv_i2r = hv.rated_current_a ** 2 * hv.resistance_20c_ohm
        lv_i2r = lv.rated_current_a ** 2 * lv.resistance_20c_ohm

        self.ledger.add(
            id="i2r-losses",
            title="I²R Losses",
            formula="P = I²R (HV) + I²R (LV)",
            inputs={
                "I_HV": (hv.rated_current_a, "A", "HV current"),
                "R_HV": (hv.resistance_20c_ohm, "Ω", "HV resistance at 20°C"),
                "I_LV": (lv.rated_current_a, "A", "LV current"),
                "R_LV": (lv.resistance_20c_ohm, "Ω", "LV resistance at 20°C"),
            },
            result=(round(hv_i2r + lv_i2r), "W at 20°C"),
            explanation=f"HV {hv_i2r:.0f} W, LV {lv_i2r:.0f} W.",
            category=CATEGORY,
        )
        return hv_i2r, lv_i2r

    def calculate_efficiency_curve(self, no_load_loss_w: float, load_loss_w: float) -> List[EfficiencyPoint]:
        kva = self.requirements.rated_power_kva
        curve = []
        for load in EFFICIENCY_LOAD_POINTS:
            output = load * kva * 1000
            losses = no_load_loss_w + load_loss_w * load ** 2
            curve.append(EfficiencyPoint(
                load_pct=round(load * 100, 2),
                efficiency_pct=round(efficiency_pct(kva, load, no_load_loss_w, load_loss_w), 2),
                losses_w=round(losses),
                output_w=round(output),
            ))

        full_load = next(p for p in curve if p.load_pct == 100)
        self.ledger.add(
            id="efficiency-curve",
            title="Efficiency Curve",
            formula="η = Pout / (Pout + P₀ + Pk × x²)",
            inputs={
                "P₀": (round(no_load_loss_w), "W", "No-load loss"),
                "Pk": (round(load_loss_w), "W", "Load loss at 100%"),
                "kVA": (kva, "kVA", "Rated power"),
            },
            result=(full_load.efficiency_pct, "% at full load"),
            explanation="Efficiency at 25, 50, 75, 100, 110 and 125% load, unity power factor.",
            category=CATEGORY,
        )
        return curve

    def calculate(self, core: CoreDesign, hv: WindingDesign, lv: WindingDesign) -> LossCalculations:
        """Run the full loss calculation.

        Returns:
            LossCalculations at rated load
        """
        p0 = self.calculate_no_load_loss(core)
        hv_i2r, lv_i2r = self.calculate_i2r_losses(hv, lv)
        i2r = hv_i2r + lv_i2r
        eddy = i2r * EDDY_LOSS_FACTOR
        stray = i2r * STRAY_LOSS_FACTOR

        self.ledger.add(
            id="eddy-stray-losses",
            title="Eddy & Stray Losses",
            formula="Peddy = I²R × 0.10, Pstray = I²R × 0.05",
            inputs={
                "I²R": (round(i2r), "W", "Total I²R loss"),
                "eddy_factor": (EDDY_LOSS_FACTOR, "", "Eddy loss factor"),
                "stray_factor": (STRAY_LOSS_FACTOR, "", "Stray loss factor"),
            },
            result=(round(eddy + stray), "W"),
            explanation=(
                f"Leakage flux induces {eddy:.0f} W in the conductors and {stray:.0f} W "
                f"in tank walls and clamps."
            ),
            category=CATEGORY,
        )

        correction = temperature_correction_factor()
        loss_20c = i2r + eddy + stray
        pk = loss_20c * correction

        self.ledger.add(
            id="loss-correction",
            title="Load Loss at 75°C",
            formula="P₇₅ = P₂₀ × (234.5 + 75) / (234.5 + 20)",
            inputs={
                "P₂₀": (round(loss_20c), "W", "Loss at 20°C"),
                "correction": (round(correction, 3), "", "Correction factor"),
            },
            result=(round(pk), "W at 75°C"),
            explanation="Load losses are reported at the 75°C reference temperature.",
            category=CATEGORY,
        )

        p0 = round(p0)
        pk = round(pk)
        curve = self.calculate_efficiency_curve(p0, pk)
        max_load, max_eff = find_max_efficiency(self.requirements.rated_power_kva, p0, pk)

        logger.debug(f"Losses: P0={p0} W, Pk={pk} W, max η={max_eff}% at {max_load}% load")

        return LossCalculations(
            no_load_loss_w=p0,
            load_loss_w=pk,
            total_loss_w=p0 + pk,
            i2r_loss_w=round(i2r),
            eddy_loss_w=round(eddy),
            stray_loss_w=round(stray),
            efficiency_curve=curve,
            max_efficiency_load_pct=max_load,
            max_efficiency_pct=max_eff,
        )
