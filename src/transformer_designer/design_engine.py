"""Transformer Design Engine

Top-level orchestration of the design pipeline:

    core → windings (LV, provisional HV, patched HV) → losses → impedance
         ↺ window-height convergence loop on %Z
    → final core weight and losses → thermal → tank → BOM → cost

The only feedback in the pipeline is the convergence loop. Leakage
reactance falls with window height and the loop scales the window by a
damped ratio of %X to the target until %Z lands within tolerance, the
window height stops changing or the iteration cap is reached.

Key equations:
    scale = 1 + damping × (%X / %Z_target − 1)
    Hw' = round(clamp(Hw × scale, 2d, 8d))
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np

from transformer_designer.calculation_steps import CalculationStep, PruneRecord, StepLedger
from transformer_designer.catalog.lookup import UnknownKeyWarning
from transformer_designer.economics.bill_of_materials import BillOfMaterials, generate_bill_of_materials
from transformer_designer.economics.cost_estimation import (
    CostBreakdown,
    CostEstimationOptions,
    estimate_cost,
)
from transformer_designer.electrical.impedance import (
    ImpedanceCalculation,
    ImpedanceSolver,
    check_impedance_target,
)
from transformer_designer.electrical.losses import LossCalculations, LossCalculator
from transformer_designer.magnetics.core_design import CoreDesign, CoreDesigner
from transformer_designer.mechanical.tank_design import TankDesign, TankDesigner
from transformer_designer.requirements import (
    AdvancedOptions,
    DesignRequirements,
    ValidationResult,
    check_design_inputs,
    validate_requirements,
)
from transformer_designer.thermal.thermal_design import (
    ThermalDesign,
    ThermalDesigner,
    check_thermal_limits,
)
from transformer_designer.windings.winding_design import WindingDesign, WindingDesigner

logger = logging.getLogger(__name__)

DESIGN_REVISION = "1.0"


@dataclass(frozen=True)
class ConvergenceSettings:
    """Tuning of the window-height convergence loop.

    Attributes:
        damping: Blend between no change (0) and the full %X ratio (1)
        max_iterations: Re-iterations after the initial pass
        tolerance_pct: Accepted |%Z − target| in percentage points
        window_bounds: Window height limits as multiples of core diameter
    """
    damping: float = 0.7
    max_iterations: int = 8
    tolerance_pct: float = 0.3
    window_bounds: Tuple[float, float] = (2, 8)


@dataclass(frozen=True)
class TransformerDesign:
    """Complete transformer design.

    hv_provisional is the HV winding before it was placed outside LV;
    hv_winding is the patched winding every later stage uses.
    """
    requirements: DesignRequirements
    options: AdvancedOptions
    core: CoreDesign
    hv_winding: WindingDesign
    lv_winding: WindingDesign
    hv_provisional: WindingDesign
    losses: LossCalculations
    impedance: ImpedanceCalculation
    thermal: ThermalDesign
    tank: TankDesign
    bom: BillOfMaterials
    steps: Tuple[CalculationStep, ...]
    prune_history: Tuple[PruneRecord, ...]
    iterations: int
    converged: bool
    timestamp: datetime
    revision: str = DESIGN_REVISION
    cost: Optional[CostBreakdown] = None


@dataclass
class DesignResult:
    """Outcome of a design run. design is None when success is False."""
    success: bool
    design: Optional[TransformerDesign] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def next_window_height(
    core: CoreDesign,
    percent_x: float,
    target_pct: float,
    settings: ConvergenceSettings,
) -> int:
    """Damped window height update, clamped to the core diameter bounds."""
    ratio = percent_x / target_pct
    scale = 1 + settings.damping * (ratio - 1)
    low, high = settings.window_bounds
    d = core.core_diameter_mm
    return int(round(float(np.clip(core.window_height_mm * scale, low * d, high * d))))


def impedance_warning(percent_z: float, target_pct: float, deviation: float) -> str:
    direction = "higher" if deviation > 0 else "lower"
    return (
        f"Calculated impedance ({percent_z:g}%) is {abs(deviation):.2f}% {direction} "
        f"than target ({target_pct:g}%). Design adjustments may be needed."
    )


def _unique_messages(warnings: List[UnknownKeyWarning]) -> List[str]:
    return list(dict.fromkeys(w.message for w in warnings))


class DesignOrchestrator:
    """Runs the full design pipeline for one set of requirements.

    Example:
        >>> reqs = DesignRequirements(rated_power_kva=1500,
        ...                           primary_voltage_v=13800,
        ...                           secondary_voltage_v=480)
        >>> result = DesignOrchestrator().design(reqs)
        >>> result.success
        True
    """

    def __init__(self, settings: Optional[ConvergenceSettings] = None):
        self.settings = settings or ConvergenceSettings()

    def design(
        self,
        requirements: DesignRequirements,
        options: Optional[AdvancedOptions] = None,
        cost_options: Optional[CostEstimationOptions] = None,
    ) -> DesignResult:
        """Design a transformer.

        Never raises: input errors and calculation failures come back as
        an unsuccessful DesignResult.

        Args:
            requirements: Electrical requirements
            options: Steel grade and calculation overrides
            cost_options: Pricing choices for the cost estimate

        Returns:
            DesignResult with the design, advisory warnings and errors
        """
        options = options or AdvancedOptions()
        warnings: List[str] = []
        errors: List[str] = []

        try:
            design = self._run(requirements, options, cost_options, warnings)
        except Exception as e:
            logger.exception("Design calculation failed")
            errors.append(f"Design calculation failed: {e}")
            return DesignResult(success=False, warnings=warnings, errors=errors)

        return DesignResult(success=True, design=design, warnings=warnings, errors=errors)

    def _run(
        self,
        requirements: DesignRequirements,
        options: AdvancedOptions,
        cost_options: Optional[CostEstimationOptions],
        warnings: List[str],
    ) -> TransformerDesign:
        check_design_inputs(requirements)
        settings = self.settings
        target = requirements.target_impedance_pct
        ledger = StepLedger()

        # =====================================================================
        # Core
        # =====================================================================
        core_designer = CoreDesigner(requirements, options, ledger)
        core = core_designer.design()

        # =====================================================================
        # Windings, losses and impedance with window-height convergence
        # =====================================================================
        windings = WindingDesigner(requirements, options, core, ledger)
        loss_calculator = LossCalculator(requirements, ledger)
        solver = ImpedanceSolver(requirements, ledger)

        lv, hv_provisional, hv = windings.design_pair()
        losses = loss_calculator.calculate(core, hv, lv)
        impedance = solver.calculate(hv, lv, losses)

        iterations = 0
        for _ in range(settings.max_iterations):
            if abs(impedance.percent_z - target) <= settings.tolerance_pct:
                break

            new_height = next_window_height(core, impedance.percent_x, target, settings)
            if new_height == core.window_height_mm:
                break

            logger.debug(
                f"Iteration {iterations + 1}: %Z={impedance.percent_z}%, "
                f"window {core.window_height_mm} -> {new_height} mm"
            )
            core.resize_window(new_height)
            ledger.prune(("core",), reason=f"window height {new_height} mm")

            lv, hv_provisional, hv = windings.design_pair()
            losses = loss_calculator.calculate(core, hv, lv)
            impedance = solver.calculate(hv, lv, losses)
            iterations += 1

        # Limb height changed, so core weight and no-load loss follow it
        core_designer.refresh_weight(core)
        ledger.discard("losses", reason="core weight refreshed")
        ledger.discard("impedance", reason="core weight refreshed")
        losses = loss_calculator.calculate(core, hv, lv)
        impedance = solver.calculate(hv, lv, losses)

        meets, deviation = check_impedance_target(impedance.percent_z, target, settings.tolerance_pct)
        if meets:
            logger.info(f"Impedance {impedance.percent_z}% within {settings.tolerance_pct}% of target after {iterations} iterations")
        else:
            message = impedance_warning(impedance.percent_z, target, deviation)
            logger.warning(message)
            warnings.append(message)

        # =====================================================================
        # Thermal, tank, bill of materials
        # =====================================================================
        thermal_designer = ThermalDesigner(requirements, ledger)
        thermal = thermal_designer.design(hv, lv, losses)
        thermal_check = check_thermal_limits(thermal, requirements)
        for issue in thermal_check.issues:
            logger.warning(issue)
        warnings.extend(thermal_check.issues)

        tank = TankDesigner(requirements, ledger).design(core, hv, lv, thermal)
        bom = generate_bill_of_materials(requirements, core, hv, lv, thermal, tank)

        catalog_warnings = core_designer.warnings + windings.warnings + thermal_designer.warnings
        warnings.extend(_unique_messages(catalog_warnings))

        design = TransformerDesign(
            requirements=requirements,
            options=options,
            core=core,
            hv_winding=hv,
            lv_winding=lv,
            hv_provisional=hv_provisional,
            losses=losses,
            impedance=impedance,
            thermal=thermal,
            tank=tank,
            bom=bom,
            steps=ledger.steps,
            prune_history=tuple(ledger.history),
            iterations=iterations,
            converged=meets,
            timestamp=datetime.now(),
        )

        design = replace(design, cost=estimate_cost(design, cost_options))
        for message in _unique_messages(list(design.cost.warnings)):
            if message not in warnings:
                warnings.append(message)
        logger.info(
            f"Design complete: {requirements.rated_power_kva:g} kVA, %Z={impedance.percent_z}%, "
            f"{tank.total_weight_kg} kg, ${design.cost.total_cost:,.0f}"
        )
        return design

    @staticmethod
    def validate(partial: Union[DesignRequirements, Mapping[str, Any]]) -> ValidationResult:
        return validate_requirements(partial)

    @staticmethod
    def summarize(design: TransformerDesign) -> str:
        return summarize(design)


# =============================================================================
# Module-level interface
# =============================================================================

def design(
    requirements: DesignRequirements,
    options: Optional[AdvancedOptions] = None,
    settings: Optional[ConvergenceSettings] = None,
    cost_options: Optional[CostEstimationOptions] = None,
) -> DesignResult:
    """Design a transformer with the default orchestrator. Never raises."""
    return DesignOrchestrator(settings).design(requirements, options, cost_options)


def validate(partial: Union[DesignRequirements, Mapping[str, Any]]) -> ValidationResult:
    """Pre-flight checks without running the pipeline."""
    return validate_requirements(partial)


HEAVY_RULE = "═" * 63
LIGHT_RULE = "─" * 63


def _section(title: str) -> List[str]:
    return [LIGHT_RULE, title.center(63).rstrip(), LIGHT_RULE, ""]


def summarize(design: TransformerDesign) -> str:
    """Fixed-format plaintext report of a design."""
    reqs = design.requirements
    imp = design.impedance
    losses = design.losses
    tank = design.tank
    thermal = design.thermal

    lines = [
        HEAVY_RULE,
        "TRANSFORMER DESIGN SUMMARY".center(63).rstrip(),
        HEAVY_RULE,
        "",
        f"Rating:         {reqs.rated_power_kva:g} kVA, {reqs.phases}-phase",
        f"Voltages:       {reqs.primary_voltage_kv:g}kV / {reqs.secondary_voltage_v:g}V",
        f"Frequency:      {reqs.frequency_hz:g} Hz",
        f"Vector Group:   {reqs.vector_group}",
        f"Cooling:        {reqs.cooling_class}",
        "",
        *_section("ELECTRICAL DATA"),
        f"Impedance:      {imp.percent_z}% (R={imp.percent_r}%, X={imp.percent_x}%)",
        f"No-Load Loss:   {losses.no_load_loss_w} W",
        f"Load Loss:      {losses.load_loss_w} W (at 100% load, 75°C)",
        f"Efficiency:     {losses.efficiency_at(100)}% at rated load",
        f"Regulation:     {imp.regulation_08_lag_pct}% at 0.8 PF lagging",
        "",
        *_section("PHYSICAL DATA"),
        f"Tank Dimensions: {tank.length_mm}×{tank.width_mm}×{tank.height_mm} mm",
        f"Total Weight:    {tank.total_weight_kg} kg (with oil)",
        f"Oil Volume:      {thermal.oil_volume_l} liters",
        f"Core Weight:     {design.core.core_weight_kg} kg",
        "",
        *_section("THERMAL DATA"),
        f"Top Oil Rise:      {thermal.top_oil_rise_c}°C",
        f"Winding Rise:      {thermal.average_winding_rise_c}°C",
        f"Hot Spot Rise:     {thermal.hot_spot_rise_c}°C",
        f"Radiators:         {thermal.number_of_radiators} panels ({thermal.radiator_area_m2} m²)",
        "",
        HEAVY_RULE,
    ]
    return "\n".join(lines)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    result = design(DesignRequirements(
        rated_power_kva=1500,
        primary_voltage_v=13800,
        secondary_voltage_v=480,
    ))
    for warning in result.warnings:
        print(f"WARNING: {warning}")
    if result.success:
        print(summarize(result.design))
    else:
        print("\n".join(result.errors))
