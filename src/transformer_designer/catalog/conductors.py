"""Conductor Size Catalog

Standard winding conductor sizes: round magnet wire (AWG 4/0 to 40),
rectangular strip and continuously transposed cable (CTC).

AWG numbering: -3 = 4/0, -2 = 3/0, -1 = 2/0, 0 = 1/0.

Rectangular and CTC entries are stored as (radial width, axial height).
CTC cables are laid with the long side radial, so a large cable adds
build to the winding but does not eat into the turns-per-layer budget.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np


class ConductorShape(Enum):
    """Winding conductor cross-section."""
    ROUND = "round"
    RECTANGULAR = "rectangular"
    CTC = "ctc"


@dataclass(frozen=True)
class AWGEntry:
    awg: int
    diameter_mm: float
    area_mm2: float
    resistance_ohm_km: float


@dataclass(frozen=True)
class ConductorSize:
    """Selected conductor.

    Attributes:
        shape: Conductor cross-section type
        area_mm2: Total copper/aluminum area including parallel strands (mm²)
        width_mm: Radial dimension of the bare conductor bundle (mm)
        height_mm: Axial dimension of the bare conductor (mm)
        awg: AWG number for round wire
        strands: CTC strand count
        parallel: Number of conductors in parallel
    """
    shape: ConductorShape
    area_mm2: float
    width_mm: float
    height_mm: float
    awg: Optional[int] = None
    strands: Optional[int] = None
    parallel: int = 1

    @property
    def label(self) -> str:
        if self.shape == ConductorShape.ROUND:
            text = awg_to_string(self.awg)
        elif self.shape == ConductorShape.CTC:
            text = f"CTC {self.strands} strands"
        else:
            text = f"{self.width_mm / self.parallel:g}×{self.height_mm:g}mm strip"
        if self.parallel > 1:
            text = f"{self.parallel}× {text}"
        return text


AWG_TABLE: List[AWGEntry] = [
    AWGEntry(-3, 11.684, 107.22, 0.1608),
    AWGEntry(-2, 10.405, 85.03, 0.2028),
    AWGEntry(-1, 9.266, 67.43, 0.2557),
    AWGEntry(0, 8.251, 53.49, 0.3224),
    AWGEntry(1, 7.348, 42.41, 0.4066),
    AWGEntry(2, 6.544, 33.63, 0.5127),
    AWGEntry(3, 5.827, 26.67, 0.6465),
    AWGEntry(4, 5.189, 21.15, 0.8152),
    AWGEntry(5, 4.621, 16.77, 1.028),
    AWGEntry(6, 4.115, 13.30, 1.296),
    AWGEntry(7, 3.665, 10.55, 1.634),
    AWGEntry(8, 3.264, 8.366, 2.061),
    AWGEntry(9, 2.906, 6.634, 2.599),
    AWGEntry(10, 2.588, 5.261, 3.277),
    AWGEntry(11, 2.305, 4.172, 4.132),
    AWGEntry(12, 2.053, 3.309, 5.211),
    AWGEntry(13, 1.828, 2.624, 6.571),
    AWGEntry(14, 1.628, 2.081, 8.285),
    AWGEntry(15, 1.450, 1.650, 10.45),
    AWGEntry(16, 1.291, 1.309, 13.17),
    AWGEntry(17, 1.150, 1.038, 16.61),
    AWGEntry(18, 1.024, 0.823, 20.95),
    AWGEntry(19, 0.912, 0.653, 26.42),
    AWGEntry(20, 0.812, 0.518, 33.31),
    AWGEntry(21, 0.723, 0.411, 42.00),
    AWGEntry(22, 0.644, 0.326, 52.96),
    AWGEntry(23, 0.573, 0.258, 66.79),
    AWGEntry(24, 0.511, 0.205, 84.22),
    AWGEntry(25, 0.455, 0.162, 106.2),
    AWGEntry(26, 0.405, 0.129, 133.9),
    AWGEntry(27, 0.361, 0.102, 168.9),
    AWGEntry(28, 0.321, 0.0810, 212.9),
    AWGEntry(29, 0.286, 0.0642, 268.5),
    AWGEntry(30, 0.255, 0.0509, 338.6),
    AWGEntry(31, 0.227, 0.0404, 426.9),
    AWGEntry(32, 0.202, 0.0320, 538.3),
    AWGEntry(33, 0.180, 0.0254, 678.8),
    AWGEntry(34, 0.160, 0.0201, 856.0),
    AWGEntry(35, 0.143, 0.0160, 1079),
    AWGEntry(36, 0.127, 0.0127, 1361),
    AWGEntry(37, 0.113, 0.0100, 1716),
    AWGEntry(38, 0.101, 0.00797, 2164),
    AWGEntry(39, 0.0897, 0.00632, 2729),
    AWGEntry(40, 0.0799, 0.00501, 3441),
]

# (width, height, area) in mm / mm²
RECTANGULAR_CONDUCTORS = [
    (2.0, 4.0, 8.0),
    (2.5, 5.0, 12.5),
    (3.0, 6.0, 18.0),
    (3.5, 7.0, 24.5),
    (4.0, 8.0, 32.0),
    (4.5, 9.0, 40.5),
    (5.0, 10.0, 50.0),
    (5.5, 11.0, 60.5),
    (6.0, 12.0, 72.0),
    (6.5, 13.0, 84.5),
    (7.0, 14.0, 98.0),
    (8.0, 16.0, 128.0),
    (9.0, 18.0, 162.0),
    (10.0, 20.0, 200.0),
    (12.0, 24.0, 288.0),
    (15.0, 30.0, 450.0),
]

# (strands, strand size, area mm², radial width mm, axial height mm)
CTC_CONDUCTORS = [
    (11, "2.0x8.0", 176, 18.0, 10.5),
    (13, "2.0x8.0", 208, 21.0, 10.5),
    (17, "2.0x8.0", 272, 27.0, 10.5),
    (21, "2.0x10.0", 420, 33.0, 12.5),
    (25, "2.5x10.0", 625, 40.0, 15.0),
    (31, "2.5x12.0", 930, 50.0, 17.0),
    (37, "3.0x12.0", 1332, 58.0, 18.5),
    (45, "3.0x14.0", 1890, 70.0, 20.5),
]

ROUND_WIRE_CURRENT_LIMIT_A = 100
STRIP_CURRENT_LIMIT_A = 1000
ROUND_WIRE_AREA_LIMIT_MM2 = 100


def awg_to_string(awg: int) -> str:
    if awg == -3:
        return "4/0 (0000)"
    if awg == -2:
        return "3/0 (000)"
    if awg == -1:
        return "2/0 (00)"
    if awg == 0:
        return "1/0 (0)"
    return f"AWG {awg}"


def recommend_conductor_shape(current_a: float) -> ConductorShape:
    """Conductor type by current magnitude."""
    if current_a < ROUND_WIRE_CURRENT_LIMIT_A:
        return ConductorShape.ROUND
    if current_a < STRIP_CURRENT_LIMIT_A:
        return ConductorShape.RECTANGULAR
    return ConductorShape.CTC


def select_awg(required_area_mm2: float) -> ConductorSize:
    """Smallest AWG wire with area ≥ required, or the largest wire if none fits."""
    candidates = [e for e in AWG_TABLE if e.area_mm2 >= required_area_mm2]
    entry = min(candidates, key=lambda e: e.area_mm2) if candidates else AWG_TABLE[0]
    return ConductorSize(
        shape=ConductorShape.ROUND,
        area_mm2=entry.area_mm2,
        width_mm=entry.diameter_mm,
        height_mm=entry.diameter_mm,
        awg=entry.awg,
    )


def select_rectangular(required_area_mm2: float) -> ConductorSize:
    """Smallest strip ≥ required; parallel strips of the largest size otherwise."""
    for width, height, area in RECTANGULAR_CONDUCTORS:
        if area >= required_area_mm2:
            return ConductorSize(ConductorShape.RECTANGULAR, area, width, height)
    width, height, area = RECTANGULAR_CONDUCTORS[-1]
    n = int(np.ceil(required_area_mm2 / area))
    return ConductorSize(ConductorShape.RECTANGULAR, area * n, width * n, height, parallel=n)


def select_ctc(required_area_mm2: float) -> ConductorSize:
    """Smallest CTC cable ≥ required; parallel cables of the largest size otherwise."""
    for strands, _, area, width, height in CTC_CONDUCTORS:
        if area >= required_area_mm2:
            return ConductorSize(ConductorShape.CTC, area, width, height, strands=strands)
    strands, _, area, width, height = CTC_CONDUCTORS[-1]
    n = int(np.ceil(required_area_mm2 / area))
    return ConductorSize(
        ConductorShape.CTC, area * n, width * n, height, strands=strands, parallel=n
    )


def select_conductor(required_area_mm2: float, current_a: float) -> ConductorSize:
    """Select a conductor for a winding.

    Round wire is used below ~100 A or ~100 mm²; above that the shape
    recommended for the current magnitude is used.

    Args:
        required_area_mm2: Minimum conductor area (mm²)
        current_a: Rated winding current (A)

    Returns:
        Selected ConductorSize
    """
    shape = recommend_conductor_shape(current_a)
    if shape == ConductorShape.ROUND or required_area_mm2 < ROUND_WIRE_AREA_LIMIT_MM2:
        return select_awg(required_area_mm2)
    if shape == ConductorShape.RECTANGULAR:
        return select_rectangular(required_area_mm2)
    return select_ctc(required_area_mm2)
