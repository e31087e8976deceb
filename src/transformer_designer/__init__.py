"""Transformer Designer.

Engineering design calculator for oil-filled power transformers: core,
windings, losses, impedance, thermal, tank, bill of materials and cost
from a set of electrical requirements.
"""

__version__ = "0.1.0"

from transformer_designer.requirements import (
    AdvancedOptions,
    DesignInputError,
    DesignRequirements,
    ValidationResult,
)
from transformer_designer.calculation_steps import CalculationStep, StepLedger
from transformer_designer.catalog import LookupResult, UnknownKeyWarning
from transformer_designer.design_engine import (
    ConvergenceSettings,
    DesignOrchestrator,
    DesignResult,
    TransformerDesign,
    design,
    summarize,
    validate,
)
from transformer_designer.economics import (
    CostEstimationOptions,
    calculate_lifecycle_cost,
    compare_costs,
    estimate_cost,
)

__all__ = [
    # Inputs
    "AdvancedOptions",
    "DesignInputError",
    "DesignRequirements",
    "ValidationResult",
    # Audit trail
    "CalculationStep",
    "StepLedger",
    # Catalog lookups
    "LookupResult",
    "UnknownKeyWarning",
    # Engine
    "ConvergenceSettings",
    "DesignOrchestrator",
    "DesignResult",
    "TransformerDesign",
    "design",
    "summarize",
    "validate",
    # Economics
    "CostEstimationOptions",
    "calculate_lifecycle_cost",
    "compare_costs",
    "estimate_cost",
]
