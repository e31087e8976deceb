"""Calculation Step Ledger

Audit trail for the design calculations. Every derived quantity records a
CalculationStep with its formula, named inputs and result so that a design
can be explained line by line.

The ledger is append-only. Re-running part of the pipeline (the impedance
convergence loop) goes through prune(), which keeps the steps in the given
categories and truncates the rest, recording what was dropped in the
prune history.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class StepInput:
    value: Union[Number, str]
    unit: str
    description: str


@dataclass(frozen=True)
class StepResult:
    value: Union[Number, str]
    unit: str


@dataclass(frozen=True)
class CalculationStep:
    """One audited calculation.

    Attributes:
        id: Stable identifier, e.g. 'core-net-area'
        title: Human-readable title
        formula: Formula text
        inputs: Named inputs with units and descriptions
        result: Result value and unit
        explanation: Prose explanation of the step
        category: Pipeline stage that produced the step
    """
    id: str
    title: str
    formula: str
    inputs: Dict[str, StepInput]
    result: StepResult
    explanation: str
    category: str


@dataclass(frozen=True)
class PruneRecord:
    """Entry in the prune history."""
    kept_categories: Tuple[str, ...]
    kept: int
    dropped: int
    dropped_ids: Tuple[str, ...]
    reason: str = ""


class StepLedger:
    """Append-only ledger of calculation steps."""

    def __init__(self, steps: Optional[Iterable[CalculationStep]] = None):
        self._entries: List[CalculationStep] = list(steps or [])
        self.history: List[PruneRecord] = []

    def record(self, step: CalculationStep) -> CalculationStep:
        self._entries.append(step)
        return step

    def add(
        self,
        id: str,
        title: str,
        formula: str,
        inputs: Dict[str, Tuple[Union[Number, str], str, str]],
        result: Tuple[Union[Number, str], str],
        explanation: str,
        category: str,
    ) -> CalculationStep:
        """Build and record a step from plain tuples.

        Args:
            inputs: Mapping of name -> (value, unit, description)
            result: (value, unit)
        """
        step = CalculationStep(
            id=id,
            title=title,
            formula=formula,
            inputs={name: StepInput(*values) for name, values in inputs.items()},
            result=StepResult(*result),
            explanation=explanation,
            category=category,
        )
        return self.record(step)

    def prune(self, keep_categories: Sequence[str] = ("core",), reason: str = "") -> PruneRecord:
        """Keep only steps in the given categories.

        Filters the entries first, then truncates the ledger to the filtered
        list. The relative order of kept steps is unchanged.

        Returns:
            PruneRecord describing the operation, also appended to history
        """
        keep = tuple(keep_categories)
        kept = [s for s in self._entries if s.category in keep]
        dropped = tuple(s.id for s in self._entries if s.category not in keep)
        self._entries = kept
        record = PruneRecord(
            kept_categories=keep,
            kept=len(kept),
            dropped=len(dropped),
            dropped_ids=dropped,
            reason=reason,
        )
        self.history.append(record)
        return record

    def discard(self, category: str, reason: str = "") -> PruneRecord:
        """Drop every step in one category."""
        categories = tuple(dict.fromkeys(s.category for s in self._entries if s.category != category))
        return self.prune(categories, reason=reason)

    @property
    def steps(self) -> Tuple[CalculationStep, ...]:
        return tuple(self._entries)

    def by_category(self, category: str) -> List[CalculationStep]:
        return [s for s in self._entries if s.category == category]

    def find(self, step_id: str) -> Optional[CalculationStep]:
        """Most recent step with the given id."""
        for step in reversed(self._entries):
            if step.id == step_id:
                return step
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CalculationStep]:
        return iter(tuple(self._entries))
