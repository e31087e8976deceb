"""Winding Design

Turns, conductor selection, layer geometry, weight and resistance for the
concentric LV (inner) and HV (outer) windings.

Key equations:
    N = V / Et
    I = S / (√3 × V)   three-phase,   I = S / V   single-phase
    A = I / J
    R20 = ρ × L / A,   R75 = R20 × (1 + α × 55)

HV is built in two steps. compute("HV") sizes the winding with a
provisional radial position (an assumed LV build), then patch_hv() places
it outside the real LV winding with a BIL-dependent main gap and
re-derives its mean turn length, weight and resistance. Both states are
returned so they can be inspected.

Standards:
    IEEE C57.12.00: BIL levels and insulation clearances
    IEEE C57.12.90: Winding resistance at 75°C reference
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from transformer_designer.calculation_steps import StepLedger
from transformer_designer.catalog.conductors import ConductorShape, ConductorSize, select_conductor
from transformer_designer.catalog.lookup import UnknownKeyWarning
from transformer_designer.catalog.materials import (
    ALUMINUM_DENSITY_FACTOR,
    INSULATION_CLEARANCES,
    LV_DENSITY_FACTOR,
    ConductorProperties,
    get_bil_level,
    get_conductor_properties,
    get_current_density_band,
)
from transformer_designer.magnetics.core_design import CoreDesign
from transformer_designer.requirements import AdvancedOptions, DesignRequirements

logger = logging.getLogger(__name__)

CATEGORY = "winding"

REFERENCE_TEMP_C = 75.0
RESISTANCE_BASE_TEMP_C = 20.0

# Provisional HV placement before the LV build is known
ESTIMATED_LV_BUILD_MM = 30.0
PROVISIONAL_MAIN_GAP_MM = 20.0


@dataclass(frozen=True)
class WindingDesign:
    """Geometry and electrical data for one winding.

    Attributes:
        side: 'HV' or 'LV'
        turns: Number of turns
        material: Conductor material key
        conductor: Selected conductor size
        current_density_a_mm2: Actual current density in the selected conductor
        rated_current_a: Rated line current (A)
        inner_radius_mm: Inner radius (mm)
        outer_radius_mm: Outer radius (mm)
        height_mm: Axial winding height (mm)
        thickness_mm: Radial build (mm)
        layers: Number of layers
        turns_per_layer: Turns in each layer
        weight_kg: Conductor weight (kg)
        resistance_20c_ohm: DC resistance at 20°C (Ω)
        resistance_75c_ohm: DC resistance at 75°C (Ω)
        mean_turn_length_mm: Mean turn length (mm)
        insulation_class: Thermal class of the winding insulation
        provisional: True until HV has been placed outside LV
    """
    side: str
    turns: int
    material: str
    conductor: ConductorSize
    current_density_a_mm2: float
    rated_current_a: float
    inner_radius_mm: float
    outer_radius_mm: float
    height_mm: float
    thickness_mm: float
    layers: int
    turns_per_layer: int
    weight_kg: float
    resistance_20c_ohm: float
    resistance_75c_ohm: float
    mean_turn_length_mm: float
    insulation_class: str = "A"
    provisional: bool = False

    @property
    def shape(self) -> ConductorShape:
        return self.conductor.shape

    @property
    def cross_section_mm2(self) -> float:
        return self.conductor.area_mm2

    @property
    def conductor_length_m(self) -> float:
        return self.turns * self.mean_turn_length_mm / 1000.0


def calculate_rated_current(rated_power_kva: float, voltage_v: float, phases: int) -> float:
    """Rated line current (A)."""
    if phases == 3:
        return rated_power_kva * 1000 / (np.sqrt(3) * voltage_v)
    return rated_power_kva * 1000 / voltage_v


def calculate_main_gap(primary_voltage_kv: float) -> float:
    """HV-LV main gap (mm) from the primary BIL level."""
    bil = get_bil_level(primary_voltage_kv)
    return max(
        INSULATION_CLEARANCES["min_main_gap_mm"],
        bil * INSULATION_CLEARANCES["hv_to_lv_gap_mm_per_kv_bil"],
    )


def calculate_resistance(
    props: ConductorProperties,
    length_m: float,
    area_mm2: float,
) -> Tuple[float, float]:
    """(R20, R75) in Ω for a conductor length and area."""
    r20 = props.resistivity_ohm_m * length_m / (area_mm2 * 1e-6)
    r75 = r20 * (1 + props.temp_coeff_per_k * (REFERENCE_TEMP_C - RESISTANCE_BASE_TEMP_C))
    return round(r20, 6), round(r75, 6)


def calculate_conductor_weight(props: ConductorProperties, length_m: float, area_mm2: float) -> int:
    return int(round(length_m * area_mm2 * 1e-6 * props.density_kg_m3))


class WindingDesigner:
    """Designs the LV and HV windings on a sized core."""

    def __init__(
        self,
        requirements: DesignRequirements,
        options: Optional[AdvancedOptions],
        core: CoreDesign,
        ledger: Optional[StepLedger] = None,
    ):
        self.requirements = requirements
        self.options = options or AdvancedOptions()
        self.core = core
        self.ledger = ledger if ledger is not None else StepLedger()
        self.warnings: List[UnknownKeyWarning] = []

    def _warn(self, warning: Optional[UnknownKeyWarning]) -> None:
        if warning is not None and warning not in self.warnings:
            self.warnings.append(warning)

    def _side_voltage(self, side: str) -> float:
        if side == "HV":
            return self.requirements.primary_voltage_v
        return self.requirements.secondary_voltage_v

    def calculate_turns(self, side: str) -> int:
        voltage = self._side_voltage(side)
        et = self.core.volts_per_turn
        turns = max(1, int(round(voltage / et)))

        self.ledger.add(
            id=f"{side.lower()}-turns",
            title=f"{side} Winding Turns",
            formula="N = V / Et",
            inputs={
                "V": (voltage, "V", f"{side} rated voltage"),
                "Et": (round(et, 3), "V/turn", "Volts per turn"),
            },
            result=(turns, "turns"),
            explanation=(
                f"{turns} turns produce {turns * et:.1f} V against {voltage:g} V rated."
            ),
            category=CATEGORY,
        )
        return turns

    def calculate_rated_current(self, side: str) -> float:
        voltage = self._side_voltage(side)
        phases = self.requirements.phases
        current = calculate_rated_current(self.requirements.rated_power_kva, voltage, phases)

        self.ledger.add(
            id=f"{side.lower()}-current",
            title=f"{side} Rated Current",
            formula="I = S / (√3 × V)" if phases == 3 else "I = S / V",
            inputs={
                "S": (self.requirements.rated_power_kva, "kVA", "Transformer rating"),
                "V": (voltage, "V", f"{side} voltage"),
            },
            result=(round(current, 2), "A"),
            explanation=f"Continuous {phases}-phase line current of the {side} winding.",
            category=CATEGORY,
        )
        return float(current)

    def select_current_density(self, side: str, material: str) -> float:
        """Design current density (A/mm²), or the override when one is given."""
        override = self.options.target_current_density_a_mm2
        if override:
            return override

        band = get_current_density_band(self.requirements.cooling_class)
        self._warn(band.warning)
        density = band.value.typical_a_mm2
        material_factor = ALUMINUM_DENSITY_FACTOR if material == "aluminum" else 1.0
        side_factor = LV_DENSITY_FACTOR if side == "LV" else 1.0
        density *= material_factor * side_factor

        self.ledger.add(
            id=f"{side.lower()}-current-density",
            title=f"{side} Current Density Selection",
            formula="J = Jbase × material factor × side factor",
            inputs={
                "Jbase": (band.value.typical_a_mm2, "A/mm²", f"Typical for {band.key}"),
                "material": (material_factor, "", "Material factor"),
                "side": (side_factor, "", "Side factor"),
            },
            result=(round(density, 2), "A/mm²"),
            explanation=(
                f"{band.key} cooling allows {band.value.min_a_mm2}-{band.value.max_a_mm2} "
                f"A/mm² in copper; {density:.2f} A/mm² selected for {material}."
            ),
            category=CATEGORY,
        )
        return density

    def select_conductor(self, side: str, current_a: float, density_a_mm2: float) -> ConductorSize:
        required = current_a / density_a_mm2
        conductor = select_conductor(required, current_a)

        self.ledger.add(
            id=f"{side.lower()}-conductor-size",
            title=f"{side} Conductor Selection",
            formula="A = I / J",
            inputs={
                "I": (round(current_a, 2), "A", "Rated current"),
                "required_area": (round(required, 2), "mm²", "Required conductor area"),
            },
            result=(conductor.area_mm2, f"mm² ({conductor.label})"),
            explanation=(
                f"Selected {conductor.label} with {conductor.area_mm2:g} mm², "
                f"{(conductor.area_mm2 / required - 1) * 100:.0f}% above the required area."
            ),
            category=CATEGORY,
        )
        return conductor

    def calculate_geometry(self, side: str, turns: int, conductor: ConductorSize) -> dict:
        """Layer packing and radial position.

        Returns:
            Dict with layers, turns_per_layer, height_mm, thickness_mm,
            inner_radius_mm and outer_radius_mm
        """
        paper = INSULATION_CLEARANCES["paper_per_side_mm"]
        insulated_width = conductor.width_mm + 2 * paper
        insulated_height = conductor.height_mm + 2 * paper

        available = self.core.window_height_mm - 2 * INSULATION_CLEARANCES["top_bottom_mm"]
        turns_per_layer = max(1, int(np.floor(available / insulated_height)))
        layers = int(np.ceil(turns / turns_per_layer))

        height = turns_per_layer * insulated_height
        thickness = layers * insulated_width + (layers - 1) * INSULATION_CLEARANCES["layer_insulation_mm"]

        limb_radius = self.core.core_diameter_mm / 2
        inner = limb_radius + INSULATION_CLEARANCES["core_to_winding_mm"]
        if side == "HV":
            inner += ESTIMATED_LV_BUILD_MM + PROVISIONAL_MAIN_GAP_MM
        outer = inner + thickness

        self.ledger.add(
            id=f"{side.lower()}-geometry",
            title=f"{side} Winding Geometry",
            formula="layers = ceil(N / turns per layer)",
            inputs={
                "N": (turns, "turns", "Total turns"),
                "conductor": (round(insulated_height, 2), "mm", "Insulated conductor height"),
                "available_height": (available, "mm", "Available winding height"),
            },
            result=(layers, "layers"),
            explanation=(
                f"{turns_per_layer} turns per layer gives {layers} layers; "
                f"winding height {height:.0f} mm, build {thickness:.1f} mm."
            ),
            category=CATEGORY,
        )
        return {
            "layers": layers,
            "turns_per_layer": turns_per_layer,
            "height_mm": int(round(height)),
            "thickness_mm": round(thickness, 1),
            "inner_radius_mm": int(round(inner)),
            "outer_radius_mm": int(round(outer)),
        }

    def _record_resistance(self, side: str, props: ConductorProperties, length_m: float,
                           area_mm2: float, r20: float, r75: float) -> None:
        self.ledger.add(
            id=f"{side.lower()}-resistance",
            title=f"{side} Winding Resistance",
            formula="R = ρ × L / A, R₇₅ = R₂₀ × (1 + α × ΔT)",
            inputs={
                "L": (round(length_m), "m", "Total conductor length"),
                "A": (area_mm2, "mm²", "Conductor cross-section"),
                "ρ": (props.resistivity_ohm_m * 1e8, "μΩ·cm", f"{props.name} resistivity at 20°C"),
            },
            result=(round(r75, 4), "Ω at 75°C"),
            explanation=f"R20 = {r20:.4f} Ω corrected to the 75°C reference: {r75:.4f} Ω.",
            category=CATEGORY,
        )

    def compute(self, side: str) -> WindingDesign:
        """Design one winding. HV comes back provisional (see patch_hv).

        Args:
            side: 'HV' or 'LV'

        Returns:
            WindingDesign for the side
        """
        if side not in ("HV", "LV"):
            raise ValueError(f"Unknown winding side: {side}")

        material_result = get_conductor_properties(self.options.conductor_material(side, self.requirements))
        self._warn(material_result.warning)
        material = material_result.key
        props = material_result.value

        turns = self.calculate_turns(side)
        current = self.calculate_rated_current(side)
        density = self.select_current_density(side, material)
        conductor = self.select_conductor(side, current, density)
        geometry = self.calculate_geometry(side, turns, conductor)

        mean_turn = np.pi * (geometry["inner_radius_mm"] + geometry["outer_radius_mm"])
        length_m = turns * mean_turn / 1000
        weight = calculate_conductor_weight(props, length_m, conductor.area_mm2)
        r20, r75 = calculate_resistance(props, length_m, conductor.area_mm2)
        self._record_resistance(side, props, length_m, conductor.area_mm2, r20, r75)

        return WindingDesign(
            side=side,
            turns=turns,
            material=material,
            conductor=conductor,
            current_density_a_mm2=round(current / conductor.area_mm2, 2),
            rated_current_a=round(current, 2),
            weight_kg=weight,
            resistance_20c_ohm=r20,
            resistance_75c_ohm=r75,
            mean_turn_length_mm=float(mean_turn),
            provisional=(side == "HV"),
            **geometry,
        )

    def patch_hv(self, hv: WindingDesign, lv: WindingDesign) -> WindingDesign:
        """Place HV outside LV with the BIL main gap.

        Returns a new WindingDesign; the provisional HV is left untouched.
        Mean turn length, weight and resistance follow the new radii.
        """
        primary_kv = self.requirements.primary_voltage_kv
        main_gap = calculate_main_gap(primary_kv)
        inner = int(round(lv.outer_radius_mm + main_gap))
        outer = int(round(inner + hv.thickness_mm))

        props = get_conductor_properties(hv.material).value
        mean_turn = float(np.pi * (inner + outer))
        length_m = hv.turns * mean_turn / 1000
        weight = calculate_conductor_weight(props, length_m, hv.cross_section_mm2)
        r20, r75 = calculate_resistance(props, length_m, hv.cross_section_mm2)

        self.ledger.add(
            id="hv-radial-position",
            title="HV Radial Position",
            formula="r_in(HV) = r_out(LV) + max(15, 0.25 × BIL)",
            inputs={
                "r_out_LV": (lv.outer_radius_mm, "mm", "LV outer radius"),
                "BIL": (get_bil_level(primary_kv), "kV", f"BIL for {primary_kv:g} kV"),
                "gap": (main_gap, "mm", "HV-LV main gap"),
            },
            result=(inner, "mm HV inner radius"),
            explanation=(
                f"HV moves from {hv.inner_radius_mm:g}-{hv.outer_radius_mm:g} mm to "
                f"{inner}-{outer} mm once the LV build is known."
            ),
            category=CATEGORY,
        )
        self._record_resistance("HV", props, length_m, hv.cross_section_mm2, r20, r75)

        return replace(
            hv,
            inner_radius_mm=inner,
            outer_radius_mm=outer,
            mean_turn_length_mm=mean_turn,
            weight_kg=weight,
            resistance_20c_ohm=r20,
            resistance_75c_ohm=r75,
            provisional=False,
        )

    def design_pair(self) -> Tuple[WindingDesign, WindingDesign, WindingDesign]:
        """Run compute(LV) → compute(HV) → patch_hv.

        Returns:
            (lv, hv_provisional, hv)
        """
        lv = self.compute("LV")
        hv_provisional = self.compute("HV")
        hv = self.patch_hv(hv_provisional, lv)
        logger.debug(
            f"Windings: LV {lv.turns}T {lv.layers}L r={lv.inner_radius_mm}-{lv.outer_radius_mm}, "
            f"HV {hv.turns}T {hv.layers}L r={hv.inner_radius_mm}-{hv.outer_radius_mm}"
        )
        return lv, hv_provisional, hv


if __name__ == "__main__":
    from transformer_designer.magnetics.core_design import CoreDesigner

    logging.basicConfig(level=logging.DEBUG)
    reqs = DesignRequirements(
        rated_power_kva=1500, primary_voltage_v=13800, secondary_voltage_v=480,
    )
    core = CoreDesigner(reqs).design()
    lv, hv_provisional, hv = WindingDesigner(reqs, None, core).design_pair()
    print(f"LV: {lv.turns} turns, {lv.conductor.label}, {lv.weight_kg} kg")
    print(f"HV: {hv.turns} turns, {hv.conductor.label}, {hv.weight_kg} kg")
