"""Electrical performance.

This module provides loss, efficiency and impedance calculations:
- No-load and load losses at the 75°C reference
- Efficiency curve and annual energy losses
- Percent impedance, regulation and short-circuit current
"""

from .losses import (
    EfficiencyPoint,
    LossCalculations,
    LossCalculator,
    calculate_annual_losses,
    calculate_loss_ratio,
    find_max_efficiency,
)

from .impedance import (
    ImpedanceCalculation,
    ImpedanceSolver,
    calculate_impedance_at_tap,
    calculate_regulation,
    check_impedance_target,
)

__all__ = [
    # Losses
    'EfficiencyPoint',
    'LossCalculations',
    'LossCalculator',
    'calculate_annual_losses',
    'calculate_loss_ratio',
    'find_max_efficiency',
    # Impedance
    'ImpedanceCalculation',
    'ImpedanceSolver',
    'calculate_impedance_at_tap',
    'calculate_regulation',
    'check_impedance_target',
]
