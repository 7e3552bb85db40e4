"""
Solver-neutral integer program for one material.

    minimize    Σ_p x_p                      (bars used)
    subject to  Σ_p a[j,p] * x_p >= d_j      for every cut type j
                x_p integer, 0 <= x_p <= ub_p

a[j,p] is the multiplicity of cut type j in pattern p. Coverage, not exact
match: a bar cannot be partially used, so surplus pieces are allowed.

Each pattern also carries a waste coefficient and a generation index; solvers
use them as secondary and tertiary objectives to break ties between plans
with the same bar count (see ``CuttingModel.objectives``).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from cut_errors import UnsatisfiableDemand
from datatypes import MaterialDemand
from demand import from_thousandths
from patterns import Pattern, pattern_used_length

logger = logging.getLogger(__name__)


@dataclass
class CuttingModel:
    material: str
    bar_length: int
    cut_types: List[int]
    demand: List[int]
    patterns: List[Pattern]
    variable_names: List[str] = field(init=False)

    def __post_init__(self) -> None:
        self.variable_names = [f"pattern_{p}" for p in range(len(self.patterns))]

    @property
    def num_variables(self) -> int:
        return len(self.patterns)

    def coefficients(self, j: int) -> List[int]:
        """Row of the demand constraint for cut type j."""
        return [pattern[j] for pattern in self.patterns]

    def wastes(self) -> List[int]:
        """Waste per bar (thousandths) for each pattern."""
        return [self.bar_length - pattern_used_length(p, self.cut_types) for p in self.patterns]

    def upper_bounds(self) -> List[int]:
        """Largest usage any optimal plan can give each pattern.

        Using a pattern more than ceil(d_j / a[j,p]) times for every cut type j
        it contains cannot help: dropping one bar keeps all constraints.
        """
        ubs = []
        for pattern in self.patterns:
            ub = 0
            for count, need in zip(pattern, self.demand):
                if count > 0:
                    ub = max(ub, -(-need // count))
            ubs.append(ub)
        return ubs

    def objectives(self) -> List[Tuple[str, List[int]]]:
        """Objectives in lexicographic priority order (all minimized).

        1. bars:          total bars
        2. waste:         total waste, with the bar count fixed
        3. pattern_order: prefer earlier-generated patterns, with both above fixed
        """
        n = self.num_variables
        return [
            ("bars", [1] * n),
            ("waste", self.wastes()),
            ("pattern_order", list(range(n))),
        ]

    def render(self) -> str:
        """LP-format text of the primary model, for diagnostics."""
        names = self.variable_names
        lines = [f"\\* cutting model for material {self.material!r} *\\", "Minimize",
                 " bars: " + (" + ".join(names) if names else "0"), "Subject To"]
        for j, length in enumerate(self.cut_types):
            terms = [f"{a} {names[p]}" for p, a in enumerate(self.coefficients(j)) if a]
            lhs = " + ".join(terms) if terms else "0"
            lines.append(f" demand_{from_thousandths(length)}: {lhs} >= {self.demand[j]}")
        lines.append("Bounds")
        for name, ub in zip(names, self.upper_bounds()):
            lines.append(f" 0 <= {name} <= {ub}")
        lines.append("Generals")
        if names:
            lines.append(" " + " ".join(names))
        lines.append("End")
        return "\n".join(lines)


def ensure_satisfiable(demand: MaterialDemand, bar_length: int) -> None:
    """Reject cut lengths longer than the bar before any model is built.

    Raises:
        UnsatisfiableDemand: naming the material and the first offending length.
    """
    for length in demand.cut_types:
        if length > bar_length:
            raise UnsatisfiableDemand(demand.material, from_thousandths(length),
                                      from_thousandths(bar_length))


def build_model(demand: MaterialDemand, patterns: Sequence[Pattern], bar_length: int) -> CuttingModel:
    """Assemble the cutting model for one material.

    Args:
        demand: Aggregated demand (cut types in thousandths).
        patterns: Feasible patterns aligned with ``demand.cut_types``.
        bar_length: Bar length (thousandths).

    Returns:
        CuttingModel with one integer variable per pattern.
    """
    ensure_satisfiable(demand, bar_length)
    model = CuttingModel(
        material=demand.material,
        bar_length=bar_length,
        cut_types=list(demand.cut_types),
        demand=demand.counts(),
        patterns=list(patterns),
    )
    logger.debug("material %r: model with %d variables and %d constraints",
                 demand.material, model.num_variables, len(model.cut_types))
    return model
