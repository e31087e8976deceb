#!/usr/bin/env python3
"""Example: Manufacturing Cost and Lifecycle Comparison.

Compares copper and aluminum windings for a 2500 kVA unit, prices the
design in each manufacturing region and charts 25-year lifecycle cost.

Key outputs:
- Cost breakdown table (pandas)
- Regional price comparison
- Purchase price vs. capitalized losses
"""

import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

sys.path.insert(0, 'src')

from transformer_designer import (
    AdvancedOptions,
    CostEstimationOptions,
    DesignRequirements,
    calculate_lifecycle_cost,
    compare_costs,
    design,
    estimate_cost,
)

REGIONS = ["usa", "north_america", "global", "china"]


def main():
    requirements = DesignRequirements(
        rated_power_kva=2500,
        primary_voltage_v=13800,
        secondary_voltage_v=480,
        cooling_class="ONAN/ONAF",
    )

    variants = {
        "Copper": AdvancedOptions(),
        "Aluminum": AdvancedOptions(hv_conductor_material="aluminum", lv_conductor_material="aluminum"),
    }

    designs = {}
    for name, options in variants.items():
        result = design(requirements, options)
        if not result.success:
            print(f"{name}: " + "; ".join(result.errors))
            return
        for warning in result.warnings:
            print(f"WARNING ({name}): {warning}")
        designs[name] = result.design

    # ===================================================================
    # 1. Cost breakdown
    # ===================================================================
    print(f"\n{'='*60}")
    print("Cost Breakdown (USA)")
    print(f"{'='*60}")
    table = pd.concat(
        {name: d.cost.to_dataframe().set_index(['section', 'item'])['cost_usd'] for name, d in designs.items()},
        axis=1,
    )
    print(table.to_string())

    comparison = compare_costs(designs["Copper"], designs["Aluminum"])
    print(f"\nAluminum vs. copper: ${comparison.difference:,.0f} ({comparison.percent_difference:+.1f}%)")

    # ===================================================================
    # 2. Regional pricing
    # ===================================================================
    print(f"\n{'Region':<16} {'Total ($)':>12} {'$/kVA':>8}")
    print("-" * 38)
    for region in REGIONS:
        cost = estimate_cost(designs["Copper"], CostEstimationOptions(region=region))
        print(f"{region:<16} {cost.total_cost:>12,.0f} {cost.cost_per_kva:>8,.0f}")

    # ===================================================================
    # 3. Lifecycle cost
    # ===================================================================
    rates = np.arange(0.06, 0.21, 0.02)
    fig, ax = plt.subplots(figsize=(10, 6))
    for name, d in designs.items():
        totals = [calculate_lifecycle_cost(d, electricity_rate_per_kwh=r).total_lifecycle_cost for r in rates]
        ax.plot(rates, np.array(totals) / 1000, linewidth=2, marker='o', label=name)
    ax.set_xlabel('Electricity rate ($/kWh)', fontsize=12)
    ax.set_ylabel('25-year lifecycle cost (k$)', fontsize=12)
    ax.set_title(f'{requirements.rated_power_kva:g} kVA Lifecycle Cost', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    output_dir = Path(__file__).parent.parent / 'outputs'
    output_dir.mkdir(exist_ok=True)
    output_path = output_dir / 'lifecycle_cost.png'
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    print(f"\nSaved lifecycle chart to: {output_path}")
    plt.show()


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    main()
