"""Design Requirements and Options

Input models for the transformer design engine. Both models are frozen
pydantic models: they coerce types but never reject out-of-range values,
so a caller can still run the engine on data that fails pre-flight
validation. Range checks live in validate_requirements() (advisory) and
check_design_inputs() (engine guard).

Units:
    Power in kVA, voltages in V (line-to-line), frequency in Hz,
    temperatures in °C, altitude in m, impedance in %.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DesignInputError(ValueError):
    """Raised when design inputs make the calculation physically meaningless."""


class DesignRequirements(BaseModel):
    """Electrical requirements for a transformer design."""
    model_config = ConfigDict(frozen=True)

    rated_power_kva: float = Field(description="Rated apparent power (kVA)")
    primary_voltage_v: float = Field(description="HV line voltage (V)")
    secondary_voltage_v: float = Field(description="LV line voltage (V)")
    phases: int = Field(default=3, description="Phase count, 1 or 3")
    frequency_hz: float = Field(default=60.0, description="System frequency, 50 or 60 Hz")
    cooling_class: str = Field(default="ONAN", description="Cooling class key, e.g. ONAN or ONAN/ONAF")
    target_impedance_pct: float = Field(default=5.75, description="Target percent impedance")
    vector_group: str = Field(default="Dyn11")
    conductor_material: str = Field(default="copper", description="copper or aluminum")
    ambient_temp_c: float = Field(default=30.0)
    altitude_m: float = Field(default=1000.0)
    temperature_rise_c: float = Field(default=65.0, description="Average winding rise class")

    @property
    def primary_voltage_kv(self) -> float:
        return self.primary_voltage_v / 1000.0

    @property
    def is_three_phase(self) -> bool:
        return self.phases == 3


class AdvancedOptions(BaseModel):
    """Steel grade and optional calculation overrides."""
    model_config = ConfigDict(frozen=True)

    steel_grade: str = "M4"
    target_flux_density_t: Optional[float] = None
    target_current_density_a_mm2: Optional[float] = None
    hv_conductor_material: Optional[str] = None
    lv_conductor_material: Optional[str] = None

    def conductor_material(self, side: str, requirements: DesignRequirements) -> str:
        """Conductor material for a side, defaulting to the requirement's preference."""
        override = self.hv_conductor_material if side == "HV" else self.lv_conductor_material
        return override or requirements.conductor_material


@dataclass
class ValidationResult:
    """Outcome of pre-flight validation."""
    valid: bool
    issues: List[str] = field(default_factory=list)


IMPEDANCE_ADVISORY_RANGE_PCT = (2.0, 15.0)


def validate_requirements(
    partial: Union[DesignRequirements, Mapping[str, Any]],
) -> ValidationResult:
    """Pre-flight checks on (possibly incomplete) requirements.

    Advisory only: the engine can still be called with data that fails here.

    Args:
        partial: DesignRequirements or a mapping with any subset of its fields

    Returns:
        ValidationResult listing every issue found
    """
    if isinstance(partial, DesignRequirements):
        values = partial.model_dump()
    else:
        values = dict(partial)

    power = values.get("rated_power_kva")
    primary = values.get("primary_voltage_v")
    secondary = values.get("secondary_voltage_v")
    target = values.get("target_impedance_pct")

    issues = []
    if not power or power <= 0:
        issues.append("Rated power must be greater than 0")
    if not primary or primary <= 0:
        issues.append("Primary voltage must be greater than 0")
    if not secondary or secondary <= 0:
        issues.append("Secondary voltage must be greater than 0")
    if primary and secondary and primary <= secondary:
        issues.append("Primary voltage must be greater than secondary voltage")

    low, high = IMPEDANCE_ADVISORY_RANGE_PCT
    if target and (target < low or target > high):
        issues.append("Target impedance should be between 2% and 15%")

    return ValidationResult(valid=not issues, issues=issues)


def check_design_inputs(requirements: DesignRequirements) -> None:
    """Guard the engine against inputs with no physical meaning.

    Raises:
        DesignInputError: If power, voltages, phases, frequency, target impedance
            or temperature rise are out of domain
    """
    if requirements.rated_power_kva <= 0:
        raise DesignInputError("Rated power must be greater than 0")
    if requirements.primary_voltage_v <= 0 or requirements.secondary_voltage_v <= 0:
        raise DesignInputError("Voltages must be greater than 0")
    if requirements.secondary_voltage_v >= requirements.primary_voltage_v:
        raise DesignInputError(
            f"Secondary voltage ({requirements.secondary_voltage_v:g} V) must be "
            f"below primary voltage ({requirements.primary_voltage_v:g} V)"
        )
    if requirements.phases not in (1, 3):
        raise DesignInputError(f"Unsupported phase count: {requirements.phases}")
    if requirements.frequency_hz <= 0:
        raise DesignInputError("Frequency must be greater than 0")
    if requirements.target_impedance_pct <= 0:
        raise DesignInputError("Target impedance must be greater than 0")
    if requirements.temperature_rise_c <= 15:
        raise DesignInputError(
            f"Temperature rise {requirements.temperature_rise_c:g}°C leaves no "
            f"margin over the 15°C winding gradient reserve"
        )
