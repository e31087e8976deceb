#!/usr/bin/env python3
"""Example: 1500 kVA Pad-Mount Transformer Design.

Designs a 13.8 kV / 480 V three-phase ONAN transformer, prints the
design summary and the calculation ledger, and plots the efficiency
curve.

Key outputs:
- Impedance, losses and efficiency
- Core, winding and tank dimensions
- Step-by-step calculation ledger
- Efficiency vs. load plot
"""

import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

sys.path.insert(0, 'src')

from transformer_designer import DesignRequirements, design, summarize
from transformer_designer.electrical.losses import efficiency_pct


def print_ledger(result):
    """Print every calculation step grouped by pipeline stage."""
    current = None
    for step in result.design.steps:
        if step.category != current:
            current = step.category
            print(f"\n[{current.upper()}]")
        print(f"  {step.title:<40} {step.result.value} {step.result.unit}")
        print(f"      {step.formula}")


def plot_efficiency(result):
    """Efficiency from 10% to 130% load with the sampled points marked."""
    losses = result.design.losses
    kva = result.design.requirements.rated_power_kva

    load = np.linspace(0.1, 1.3, 121)
    eff = [efficiency_pct(kva, x, losses.no_load_loss_w, losses.load_loss_w) for x in load]

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(load * 100, eff, 'b-', linewidth=2, label='Efficiency (PF = 1.0)')
    ax.plot(
        [p.load_pct for p in losses.efficiency_curve],
        [p.efficiency_pct for p in losses.efficiency_curve],
        'ko', label='Sampled load points',
    )
    ax.axvline(x=losses.max_efficiency_load_pct, color='r', linestyle='--',
               label=f'Max efficiency at {losses.max_efficiency_load_pct:.0f}% load')
    ax.set_xlabel('Load (%)', fontsize=12)
    ax.set_ylabel('Efficiency (%)', fontsize=12)
    ax.set_title(f'{kva:g} kVA Transformer Efficiency', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    output_dir = Path(__file__).parent.parent / 'outputs'
    output_dir.mkdir(exist_ok=True)
    output_path = output_dir / 'efficiency_curve.png'
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    print(f"Saved efficiency curve to: {output_path}")


def main():
    requirements = DesignRequirements(
        rated_power_kva=1500,
        primary_voltage_v=13800,
        secondary_voltage_v=480,
        phases=3,
        frequency_hz=60,
        target_impedance_pct=5.75,
        cooling_class="ONAN",
    )

    result = design(requirements)
    for warning in result.warnings:
        print(f"WARNING: {warning}")
    if not result.success:
        print("\n".join(result.errors))
        return

    print(summarize(result.design))
    print(f"\nConverged after {result.design.iterations} window adjustment(s)")
    print(f"Window height: {result.design.core.window_height_mm} mm")

    print_ledger(result)

    cost = result.design.cost
    print(f"\nEstimated cost: ${cost.total_cost:,.0f} (${cost.cost_per_kva:,.0f}/kVA)")

    plot_efficiency(result)
    plt.show()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    main()
