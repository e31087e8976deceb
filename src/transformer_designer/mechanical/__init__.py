"""Tank and mechanical design."""

from .tank_design import (
    TankAccessory,
    TankDesign,
    TankDesigner,
    generate_tank_accessories,
)

__all__ = [
    'TankAccessory',
    'TankDesign',
    'TankDesigner',
    'generate_tank_accessories',
]
