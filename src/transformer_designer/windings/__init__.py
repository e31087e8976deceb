"""Winding design.

Turns, conductor selection, layer build, radial placement, weight and
resistance of the HV and LV windings.
"""

from .winding_design import (
    WindingDesign,
    WindingDesigner,
    calculate_main_gap,
    calculate_rated_current,
    calculate_resistance,
)

__all__ = [
    'WindingDesign',
    'WindingDesigner',
    'calculate_main_gap',
    'calculate_rated_current',
    'calculate_resistance',
]
