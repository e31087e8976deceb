"""
Pytest configuration and shared fixtures for Transformer Designer tests.
"""

import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from transformer_designer.requirements import AdvancedOptions, DesignRequirements


@pytest.fixture
def requirements_1500kva():
    """Standard 1500 kVA 13.8 kV / 480 V pad-mount rating"""
    return DesignRequirements(
        rated_power_kva=1500,
        primary_voltage_v=13800,
        secondary_voltage_v=480,
        phases=3,
        frequency_hz=60,
        target_impedance_pct=5.75,
        cooling_class="ONAN",
    )


@pytest.fixture
def requirements_single_phase():
    """Single-phase 100 kVA pole-mount rating"""
    return DesignRequirements(
        rated_power_kva=100,
        primary_voltage_v=7200,
        secondary_voltage_v=240,
        phases=1,
        target_impedance_pct=2.5,
    )


@pytest.fixture
def default_options():
    """Default M4 steel, no overrides"""
    return AdvancedOptions()
