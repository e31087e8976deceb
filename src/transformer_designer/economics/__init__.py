"""Bill of materials and manufacturing economics.

This module provides the parts list, budgetary manufacturing cost and
lifecycle cost of a finished design.
"""

from .bill_of_materials import (
    BillOfMaterials,
    BOMItem,
    generate_bill_of_materials,
)

from .cost_estimation import (
    CostBreakdown,
    CostComparison,
    CostEstimationOptions,
    LifecycleCost,
    calculate_lifecycle_cost,
    compare_costs,
    estimate_cost,
)

__all__ = [
    # Bill of materials
    'BillOfMaterials',
    'BOMItem',
    'generate_bill_of_materials',
    # Cost
    'CostBreakdown',
    'CostComparison',
    'CostEstimationOptions',
    'LifecycleCost',
    'calculate_lifecycle_cost',
    'compare_costs',
    'estimate_cost',
]
