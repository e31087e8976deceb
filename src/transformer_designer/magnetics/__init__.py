"""Magnetic circuit design.

This module sizes the stepped core: volts per turn, flux density,
cross-sections, lamination steps, window and core weight.
"""

from .core_design import (
    CoreDesign,
    CoreDesigner,
    CoreStepDimension,
    select_core_steps,
    volts_per_turn_constant,
    window_height_ratio,
)

__all__ = [
    'CoreDesign',
    'CoreDesigner',
    'CoreStepDimension',
    'select_core_steps',
    'volts_per_turn_constant',
    'window_height_ratio',
]
