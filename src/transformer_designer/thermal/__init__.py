"""Thermal design for oil-immersed transformers."""

from .thermal_design import (
    PowerRatings,
    ThermalCheck,
    ThermalDesign,
    ThermalDesigner,
    calculate_overload_capability,
    calculate_power_ratings,
    check_thermal_limits,
)

__all__ = [
    'PowerRatings',
    'ThermalCheck',
    'ThermalDesign',
    'ThermalDesigner',
    'calculate_overload_capability',
    'calculate_power_ratings',
    'check_thermal_limits',
]
