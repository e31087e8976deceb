"""Magnetic Core Design

Sizing of the stepped, core-type magnetic circuit of an oil-filled power
transformer from its rating and steel grade.

Key equations:
    Et = K × √S                              (volts per turn)
    Bm = 0.95 × Bmax × altitude derating × frequency adjustment
    Ac_net = Et × 10⁴ / (4.44 × f × Bm)      (cm²)
    Ac_gross = Ac_net / Ks
    d = 2 × √(Ac_gross / (π × Ku))           (circumscribed circle)
    Hw = d × clamp(2.5 + 0.3 × (log10 S - 2), 2.5, 3.5)

Standards:
    IEEE C57.12.00: General Requirements for Liquid-Immersed Transformers
    IEC 60076-1: Power transformers, General
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from transformer_designer.calculation_steps import StepLedger
from transformer_designer.catalog.lookup import UnknownKeyWarning
from transformer_designer.catalog.materials import (
    CORE_STEP_UTILIZATION,
    DEFAULT_STEP_UTILIZATION,
    VOLTS_PER_TURN_CONSTANT,
    SteelGrade,
    get_steel_grade,
)
from transformer_designer.requirements import AdvancedOptions, DesignRequirements

logger = logging.getLogger(__name__)

CATEGORY = "core"

FLUX_DENSITY_MARGIN = 0.95
ALTITUDE_DERATING_START_M = 1000.0
ALTITUDE_DERATING_PER_M = 1.0 / 100000.0   # 1% per 1000 m
FIFTY_HZ_FLUX_FACTOR = 1.02
WINDOW_WIDTH_RATIO = 1.2
YOKE_HEIGHT_FACTOR = 1.1


@dataclass(frozen=True)
class CoreStepDimension:
    """One lamination step of the stepped core (mm)."""
    step: int
    width_mm: float
    height_mm: float


@dataclass
class CoreDesign:
    """Magnetic core geometry.

    Window and limb height are changed only through resize_window(), and
    core weight only through CoreDesigner.refresh_weight(); everything else
    is fixed once the core is sized.

    Attributes:
        steel_grade: Steel grade used for the laminations
        flux_density_t: Operating peak flux density (T)
        net_cross_section_cm2: Net iron area (cm²)
        gross_cross_section_cm2: Gross stack area (cm²)
        stacking_factor: Net/gross ratio
        core_diameter_mm: Circumscribed circle diameter (mm)
        window_width_mm: Window width (mm)
        window_height_mm: Window height (mm)
        limb_height_mm: Limb height (mm)
        yoke_height_mm: Yoke height (mm)
        core_steps: Number of lamination steps
        step_dimensions: Per-step lamination width and stack height
        core_weight_kg: Core weight (kg)
        volts_per_turn: Et (V/turn)
        phases: 1 or 3
    """
    steel_grade: SteelGrade
    flux_density_t: float
    net_cross_section_cm2: float
    gross_cross_section_cm2: float
    stacking_factor: float
    core_diameter_mm: float
    window_width_mm: float
    window_height_mm: float
    limb_height_mm: float
    yoke_height_mm: float
    core_steps: int
    step_dimensions: List[CoreStepDimension]
    core_weight_kg: float
    volts_per_turn: float
    phases: int = 3

    @property
    def limbs(self) -> int:
        return 3 if self.phases == 3 else 2

    @property
    def windows(self) -> int:
        return 2 if self.phases == 3 else 1

    def resize_window(self, height_mm: float) -> None:
        """Set window and limb height (convergence loop only)."""
        self.window_height_mm = height_mm
        self.limb_height_mm = height_mm


def volts_per_turn_constant(rated_power_kva: float) -> Tuple[float, str]:
    """K for Et = K√S by power class."""
    if rated_power_kva < 500:
        return VOLTS_PER_TURN_CONSTANT["distribution"], "distribution"
    if rated_power_kva <= 5000:
        return VOLTS_PER_TURN_CONSTANT["medium_power"], "medium power"
    return VOLTS_PER_TURN_CONSTANT["large_power"], "large power"


def select_core_steps(gross_cross_section_cm2: float) -> int:
    """Lamination step count by gross area band."""
    if gross_cross_section_cm2 < 100:
        return 3
    if gross_cross_section_cm2 < 200:
        return 5
    if gross_cross_section_cm2 < 400:
        return 7
    if gross_cross_section_cm2 < 700:
        return 9
    return 11


def window_height_ratio(rated_power_kva: float) -> float:
    """Window height / core diameter, growing with log10 of the rating."""
    ratio = 2.5 + (np.log10(rated_power_kva) - 2) * 0.3
    return float(np.clip(ratio, 2.5, 3.5))


class CoreDesigner:
    """Sizes the magnetic core for a set of requirements.

    Every derived quantity is recorded in the step ledger under the
    'core' category.
    """

    def __init__(
        self,
        requirements: DesignRequirements,
        options: Optional[AdvancedOptions] = None,
        ledger: Optional[StepLedger] = None,
    ):
        """Initialize core designer.

        Args:
            requirements: Electrical requirements
            options: Steel grade and overrides
            ledger: Step ledger to record into (a new one if omitted)
        """
        self.requirements = requirements
        self.options = options or AdvancedOptions()
        self.ledger = ledger if ledger is not None else StepLedger()

        grade = get_steel_grade(self.options.steel_grade)
        self.steel_grade: SteelGrade = grade.value
        self.warnings: List[UnknownKeyWarning] = [grade.warning] if grade.warning else []

    def calculate_volts_per_turn(self) -> float:
        kva = self.requirements.rated_power_kva
        K, size_class = volts_per_turn_constant(kva)
        et = K * np.sqrt(kva)

        self.ledger.add(
            id="volts-per-turn",
            title="Volts per Turn",
            formula="Et = K × √(kVA)",
            inputs={
                "K": (K, "", f"Design constant for {size_class} transformers"),
                "kVA": (kva, "kVA", "Rated power"),
            },
            result=(round(et, 2), "V/turn"),
            explanation=(
                f"Volts per turn sets the balance between core and winding material. "
                f"For a {kva:g} kVA {size_class} transformer K = {K}, giving {et:.2f} V/turn."
            ),
            category=CATEGORY,
        )
        return float(et)

    def select_flux_density(self) -> float:
        """Operating flux density (T), or the override when one is given."""
        override = self.options.target_flux_density_t
        if override:
            self.ledger.add(
                id="flux-density",
                title="Operating Flux Density",
                formula="Bm = user override",
                inputs={"Bm": (override, "T", "Specified flux density")},
                result=(override, "T"),
                explanation=f"Flux density fixed at {override} T by design options.",
                category=CATEGORY,
            )
            return override

        grade = self.steel_grade
        bm = grade.max_flux_density_t * FLUX_DENSITY_MARGIN

        altitude = self.requirements.altitude_m or 0.0
        if altitude > ALTITUDE_DERATING_START_M:
            bm *= 1 - (altitude - ALTITUDE_DERATING_START_M) * ALTITUDE_DERATING_PER_M

        if self.requirements.frequency_hz == 50:
            bm *= FIFTY_HZ_FLUX_FACTOR

        bm = round(bm, 2)

        self.ledger.add(
            id="flux-density",
            title="Operating Flux Density",
            formula="Bm = 0.95 × Bmax × altitude factor × frequency factor",
            inputs={
                "Bmax": (grade.max_flux_density_t, "T", f"{grade.name} rated maximum"),
                "altitude": (altitude, "m", "Installation altitude"),
                "f": (self.requirements.frequency_hz, "Hz", "Frequency"),
            },
            result=(bm, "T"),
            explanation=(
                f"Operating {grade.name} at 95% of its rated {grade.max_flux_density_t} T "
                f"keeps the core out of saturation during overvoltage."
            ),
            category=CATEGORY,
        )
        return bm

    def calculate_net_cross_section(self, volts_per_turn: float, flux_density_t: float) -> float:
        f = self.requirements.frequency_hz
        net = (volts_per_turn * 10000) / (4.44 * f * flux_density_t)

        self.ledger.add(
            id="core-net-area",
            title="Net Core Cross-Section",
            formula="Ac = Et × 10⁴ / (4.44 × f × Bm)",
            inputs={
                "Et": (round(volts_per_turn, 3), "V/turn", "Volts per turn"),
                "f": (f, "Hz", "Frequency"),
                "Bm": (flux_density_t, "T", "Flux density"),
            },
            result=(round(net, 1), "cm²"),
            explanation="Net iron area follows from the transformer EMF equation.",
            category=CATEGORY,
        )
        return float(net)

    def calculate_gross_cross_section(self, net_cm2: float) -> float:
        ks = self.steel_grade.stacking_factor
        gross = net_cm2 / ks

        self.ledger.add(
            id="core-gross-area",
            title="Gross Core Cross-Section",
            formula="Ag = Ac / Ks",
            inputs={
                "Ac": (round(net_cm2, 1), "cm²", "Net area"),
                "Ks": (ks, "", "Stacking factor"),
            },
            result=(round(gross, 1), "cm²"),
            explanation=(
                f"Lamination coating and stacking gaps leave {ks * 100:.0f}% of the "
                f"stack as iron."
            ),
            category=CATEGORY,
        )
        return gross

    def calculate_core_diameter(self, gross_cm2: float, core_steps: int) -> int:
        ku = CORE_STEP_UTILIZATION.get(core_steps, DEFAULT_STEP_UTILIZATION)
        diameter = 2 * np.sqrt(gross_cm2 / (np.pi * ku)) * 10

        self.ledger.add(
            id="core-diameter",
            title="Core Diameter",
            formula="d = 2 × √(Ag / (π × Ku))",
            inputs={
                "Ag": (round(gross_cm2, 1), "cm²", "Gross area"),
                "Ku": (ku, "", f"Utilization for {core_steps} steps"),
            },
            result=(int(round(diameter)), "mm"),
            explanation=(
                f"A {core_steps}-step core fills {ku * 100:.1f}% of its circumscribed circle."
            ),
            category=CATEGORY,
        )
        return int(round(diameter))

    @staticmethod
    def calculate_step_dimensions(
        core_diameter_mm: float,
        core_steps: int,
        gross_cm2: float,
    ) -> List[CoreStepDimension]:
        """Lamination widths from chords of the circumscribed circle.

        Steps run from the outermost (narrowest) to the centre (widest);
        each chord is taken at the middle of its step band.
        """
        radius = core_diameter_mm / 2
        dims = []
        for i in range(core_steps):
            fraction = (core_steps - i - 0.5) / core_steps
            width = 2 * radius * np.sqrt(1 - fraction ** 2)
            height = (gross_cm2 / (core_steps * 2)) / (width / 10) * 10
            dims.append(CoreStepDimension(step=i + 1, width_mm=round(width), height_mm=round(height)))
        return dims

    def calculate_window_dimensions(
        self,
        core_diameter_mm: float,
        net_cm2: float,
    ) -> Tuple[int, int, int, int]:
        """Returns (window width, window height, limb height, yoke height) in mm."""
        ratio = window_height_ratio(self.requirements.rated_power_kva)
        window_height = int(round(core_diameter_mm * ratio))
        window_width = int(round(core_diameter_mm * WINDOW_WIDTH_RATIO))
        limb_height = window_height
        yoke_height = int(round(np.sqrt(net_cm2) * 10 * YOKE_HEIGHT_FACTOR))

        self.ledger.add(
            id="window-dimensions",
            title="Window Dimensions",
            formula="Hw = d × ratio, Ww = 1.2 × d",
            inputs={
                "d": (core_diameter_mm, "mm", "Core diameter"),
                "ratio": (round(ratio, 2), "", "Height/diameter ratio"),
            },
            result=(window_height, "mm window height"),
            explanation=(
                f"Window {window_width} × {window_height} mm holds both windings; "
                f"yoke height {yoke_height} mm."
            ),
            category=CATEGORY,
        )
        return window_width, window_height, limb_height, yoke_height

    def calculate_core_weight(
        self,
        net_cm2: float,
        limb_height_mm: float,
        window_width_mm: float,
        step_id: str = "core-weight",
    ) -> int:
        """Core weight from limb and yoke volumes.

        Yoke length spans every window plus the width of every limb; both
        yokes carry the full net area.
        """
        phases = self.requirements.phases
        limbs = 3 if phases == 3 else 2
        windows = 2 if phases == 3 else 1
        density = self.steel_grade.density_kg_m3

        limb_volume = net_cm2 * (limb_height_mm / 10) * limbs
        core_width = np.sqrt(net_cm2) * 10
        yoke_length = windows * window_width_mm + limbs * core_width
        yoke_volume = net_cm2 * (yoke_length / 10) * 2
        weight = (limb_volume + yoke_volume) * density / 1e6

        self.ledger.add(
            id=step_id,
            title="Core Weight",
            formula="W = (V_limbs + V_yokes) × ρ",
            inputs={
                "V_limbs": (round(limb_volume), "cm³", f"{limbs} limbs"),
                "V_yokes": (round(yoke_volume), "cm³", "2 yokes"),
                "ρ": (density, "kg/m³", "Steel density"),
            },
            result=(int(round(weight)), "kg"),
            explanation=f"Limb height {limb_height_mm:g} mm, yoke length {yoke_length:.0f} mm.",
            category=CATEGORY,
        )
        return int(round(weight))

    def design(self) -> CoreDesign:
        """Run the full core sizing sequence.

        Returns:
            CoreDesign for the requirements
        """
        et = self.calculate_volts_per_turn()
        bm = self.select_flux_density()
        net = self.calculate_net_cross_section(et, bm)
        gross = self.calculate_gross_cross_section(net)
        core_steps = select_core_steps(gross)
        diameter = self.calculate_core_diameter(gross, core_steps)
        step_dims = self.calculate_step_dimensions(diameter, core_steps, gross)
        ww, hw, limb, yoke = self.calculate_window_dimensions(diameter, net)
        weight = self.calculate_core_weight(net, limb, ww)

        logger.info(
            f"Core sized: Et={et:.2f} V/turn, Bm={bm} T, Ac={net:.1f} cm², "
            f"d={diameter} mm, window {ww}x{hw} mm, {weight} kg"
        )

        return CoreDesign(
            steel_grade=self.steel_grade,
            flux_density_t=bm,
            net_cross_section_cm2=net,
            gross_cross_section_cm2=gross,
            stacking_factor=self.steel_grade.stacking_factor,
            core_diameter_mm=diameter,
            window_width_mm=ww,
            window_height_mm=hw,
            limb_height_mm=limb,
            yoke_height_mm=yoke,
            core_steps=core_steps,
            step_dimensions=step_dims,
            core_weight_kg=weight,
            volts_per_turn=et,
            phases=self.requirements.phases,
        )

    def refresh_weight(self, core: CoreDesign, step_id: str = "core-weight-final") -> int:
        """Recompute core weight after the window height changed."""
        core.core_weight_kg = self.calculate_core_weight(
            core.net_cross_section_cm2,
            core.limb_height_mm,
            core.window_width_mm,
            step_id=step_id,
        )
        return core.core_weight_kg


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reqs = DesignRequirements(
        rated_power_kva=1500, primary_voltage_v=13800, secondary_voltage_v=480,
    )
    core = CoreDesigner(reqs).design()
    print(f"Core diameter: {core.core_diameter_mm} mm")
    print(f"Window: {core.window_width_mm} x {core.window_height_mm} mm")
    print(f"Weight: {core.core_weight_kg} kg")
