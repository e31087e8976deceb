"""Transformer Impedance Calculation

Percent resistance from load loss and percent leakage reactance from the
winding geometry (ampere-turn-distance method).

Key equations:
    %R = Pk / (10 × S_kVA)
    ATD = a/3 + b + c/3
    X = 2π × f × μ₀ × N² × Lmt × ATD / Hw
    %X = X / Zbase × 100,   Zbase = V² / S
    %Z = √(%R² + %X²)
    VR(0.8 lag) = %R·cosφ + %X·sinφ + (%X·cosφ − %R·sinφ)² / 200

Standards:
    IEEE C57.12.00: Impedance voltage and regulation
    IEEE C57.12.90: Test Code for Liquid-Immersed Transformers
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np
from scipy.constants import mu_0

from transformer_designer.calculation_steps import StepLedger
from transformer_designer.electrical.losses import LossCalculations
from transformer_designer.requirements import DesignInputError, DesignRequirements
from transformer_designer.windings.winding_design import WindingDesign

logger = logging.getLogger(__name__)

CATEGORY = "impedance"

LAGGING_PF = 0.8


@dataclass(frozen=True)
class ImpedanceCalculation:
    """Impedance, regulation and short-circuit results (percent on rating)."""
    percent_r: float
    percent_x: float
    percent_z: float
    xr_ratio: float
    regulation_unity_pf_pct: float
    regulation_08_lag_pct: float
    short_circuit_pu: float


def calculate_regulation(percent_r: float, percent_x: float,
                         power_factor: float = LAGGING_PF) -> float:
    """Second-order voltage regulation approximation (%) for a lagging load."""
    cos_phi = power_factor
    sin_phi = np.sqrt(1 - cos_phi ** 2)
    return float(
        percent_r * cos_phi
        + percent_x * sin_phi
        + (percent_x * cos_phi - percent_r * sin_phi) ** 2 / 200
    )


def calculate_impedance_at_tap(base: ImpedanceCalculation, tap_pct: float) -> ImpedanceCalculation:
    """Scale impedance to another tap position.

    Impedance varies approximately with the square of the turns ratio,
    %Z(tap) = %Z(nominal) × (1 + tap/100)². X/R is unchanged.

    Args:
        base: Impedance at the nominal tap
        tap_pct: Tap position, e.g. +5 for the +5% tap
    """
    factor = (1 + tap_pct / 100) ** 2
    return replace(
        base,
        percent_r=base.percent_r * factor,
        percent_x=base.percent_x * factor,
        percent_z=base.percent_z * factor,
        regulation_unity_pf_pct=base.regulation_unity_pf_pct * factor,
        regulation_08_lag_pct=base.regulation_08_lag_pct * factor,
        short_circuit_pu=base.short_circuit_pu / factor,
    )


def check_impedance_target(
    calculated_pct: float,
    target_pct: float,
    tolerance_pct: float = 0.5,
) -> Tuple[bool, float]:
    """Returns (meets target, signed deviation in % points)."""
    deviation = calculated_pct - target_pct
    return abs(deviation) <= tolerance_pct, deviation


class ImpedanceSolver:
    """Computes impedance from windings and losses."""

    def __init__(self, requirements: DesignRequirements, ledger: Optional[StepLedger] = None):
        self.requirements = requirements
        self.ledger = ledger if ledger is not None else StepLedger()

    def calculate_percent_r(self, load_loss_w: float) -> float:
        kva = self.requirements.rated_power_kva
        percent_r = load_loss_w / (10 * kva)

        self.ledger.add(
            id="percent-r",
            title="Percent Resistance",
            formula="%R = Pk / (10 × kVA)",
            inputs={
                "Pk": (round(load_loss_w), "W", "Load loss at 75°C"),
                "kVA": (kva, "kVA", "Rated power"),
            },
            result=(round(percent_r, 2), "%"),
            explanation="Resistive voltage drop, proportional to load loss.",
            category=CATEGORY,
        )
        return percent_r

    def calculate_percent_x(self, hv: WindingDesign, lv: WindingDesign) -> float:
        """Leakage reactance by the ampere-turn-distance method.

        Raises:
            DesignInputError: If winding height or base impedance is not positive
        """
        f = self.requirements.frequency_hz
        kva = self.requirements.rated_power_kva

        a = lv.thickness_mm
        b = hv.inner_radius_mm - lv.outer_radius_mm
        c = hv.thickness_mm
        atd = a / 3 + b + c / 3

        lmt = np.pi * (lv.inner_radius_mm + hv.outer_radius_mm)
        hw = min(hv.height_mm, lv.height_mm)
        n = hv.turns
        z_base = self.requirements.primary_voltage_v ** 2 / (kva * 1000)

        if hw <= 0:
            raise DesignInputError("Winding height must be greater than 0")
        if z_base <= 0:
            raise DesignInputError("Base impedance must be greater than 0")

        x = 2 * np.pi * f * mu_0 * n ** 2 * (lmt / 1000) * (atd / 1000) / (hw / 1000)
        percent_x = x / z_base * 100

        self.ledger.add(
            id="percent-x",
            title="Percent Reactance (Geometric Method)",
            formula="%X = (2π × f × μ₀ × N² × Lmt × ATD) / (Hw × Zbase) × 100",
            inputs={
                "f": (f, "Hz", "Frequency"),
                "N": (n, "turns", "HV turns"),
                "Lmt": (round(lmt), "mm", "Mean turn length"),
                "ATD": (round(atd, 1), "mm", "Ampere-turn-distance (a/3 + b + c/3)"),
                "Hw": (hw, "mm", "Winding height"),
                "Zbase": (round(z_base, 2), "Ω", "Base impedance"),
            },
            result=(round(percent_x, 2), "%"),
            explanation=(
                f"LV build {a:.1f}/3 + gap {b:.1f} + HV build {c:.1f}/3 = {atd:.1f} mm. "
                f"The 1/3 factors reflect the triangular leakage flux inside each winding."
            ),
            category=CATEGORY,
        )
        return float(percent_x)

    def calculate(self, hv: WindingDesign, lv: WindingDesign, losses: LossCalculations) -> ImpedanceCalculation:
        """Full impedance calculation.

        Returns:
            ImpedanceCalculation with values rounded for reporting
        """
        percent_r = self.calculate_percent_r(losses.load_loss_w)
        percent_x = self.calculate_percent_x(hv, lv)
        percent_z = float(np.sqrt(percent_r ** 2 + percent_x ** 2))

        self.ledger.add(
            id="percent-z",
            title="Total Percent Impedance",
            formula="%Z = √(%R² + %X²)",
            inputs={
                "%R": (round(percent_r, 4), "%", "Percent resistance"),
                "%X": (round(percent_x, 4), "%", "Percent reactance"),
            },
            result=(round(percent_z, 2), "%"),
            explanation="Power transformers are mostly reactive, so %Z is close to %X.",
            category=CATEGORY,
        )

        xr_ratio = percent_x / percent_r if percent_r > 0 else float("inf")
        regulation_unity = percent_r
        regulation_lag = calculate_regulation(percent_r, percent_x)

        self.ledger.add(
            id="voltage-regulation",
            title="Voltage Regulation",
            formula="VR = %R×cosφ + %X×sinφ + (%X×cosφ - %R×sinφ)²/200",
            inputs={
                "%R": (round(percent_r, 4), "%", "Percent resistance"),
                "%X": (round(percent_x, 4), "%", "Percent reactance"),
                "cosφ": (LAGGING_PF, "", "Power factor"),
            },
            result=(round(regulation_lag, 2), "% at 0.8 PF lag"),
            explanation=f"Unity PF: {regulation_unity:.2f}%. 0.8 PF lagging: {regulation_lag:.2f}%.",
            category=CATEGORY,
        )

        if percent_z <= 0:
            raise DesignInputError("Percent impedance must be greater than 0")
        short_circuit = 100 / percent_z

        self.ledger.add(
            id="short-circuit",
            title="Short Circuit Current",
            formula="Isc(pu) = 100 / %Z",
            inputs={"%Z": (round(percent_z, 4), "%", "Percent impedance")},
            result=(round(short_circuit, 2), "p.u."),
            explanation=f"A bolted fault draws {short_circuit:.1f} × rated current.",
            category=CATEGORY,
        )

        return ImpedanceCalculation(
            percent_r=round(percent_r, 2),
            percent_x=round(percent_x, 2),
            percent_z=round(percent_z, 2),
            xr_ratio=round(xr_ratio, 1) if np.isfinite(xr_ratio) else xr_ratio,
            regulation_unity_pf_pct=round(regulation_unity, 2),
            regulation_08_lag_pct=round(regulation_lag, 2),
            short_circuit_pu=round(short_circuit, 2),
        )
