"""
Pluggable solvers for the cutting model.

Any object with a ``solve(model) -> SolverResult`` method can be handed to
``cut_optimizer.optimize``. Two OR-Tools backed implementations ship here:

  • CpSatPatternSolver: CP-SAT (``ortools.sat.python.cp_model``), the default.
  • MipPatternSolver:   the MIP wrapper (``ortools.linear_solver.pywraplp``),
                        SCIP backend unless told otherwise.

Both solve the model's objectives lexicographically: minimize bars, then, with
that bar count fixed, minimize waste, then prefer earlier-generated patterns.
The bars phase runs under the wall-clock budget (max_time_seconds) and must
end OPTIMAL; an unproven bar count raises SolverFailure unless accept_unproven
is set. The tie-break phases run under a fixed work limit instead of a clock
(CP-SAT deterministic time, SCIP node count), so the same model gives the same
plan regardless of machine speed.

Solver controls (CP-SAT)
------------------------
- tie_break_deterministic_time: max_deterministic_time of each tie-break phase.
- random_seed: sets CpSolverParameters.random_seed so the search is reproducible.
- num_search_workers: 1 keeps the search deterministic; >1 may be faster.
See https://developers.google.com/optimization/reference/python/sat/python/cp_model#cpsolverparameters
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ortools.linear_solver import pywraplp
from ortools.sat.python import cp_model

from cut_errors import SolverFailure
from model_builder import CuttingModel
from plan_types import CuttingConfig

logger = logging.getLogger(__name__)

# (coefficients, value) pairs pinned by earlier lexicographic phases
FixedObjectives = List[Tuple[List[int], int]]


@dataclass
class SolverResult:
    """Outcome of solving one CuttingModel.

    usage maps each variable name (``pattern_<i>``) to its non-negative integer
    value. status is the first phase's status name ("OPTIMAL", or "FEASIBLE"
    when an unproven bar count was explicitly accepted).

    phases lists the objectives whose solution was adopted, in order.
    phase_status holds the backend status of every phase that ran.
    tie_break_complete is True when every phase that ran was proven optimal.
    """
    usage: Dict[str, int]
    status: str
    objective_value: Optional[float] = None
    wall_time: float = 0.0
    phases: List[str] = field(default_factory=list)
    phase_status: Dict[str, str] = field(default_factory=dict)
    tie_break_complete: bool = True


class PatternSolver(Protocol):
    def solve(self, model: CuttingModel) -> SolverResult:
        ...


@dataclass
class _PhaseOutcome:
    status: str
    optimal: bool
    values: Optional[List[int]]
    wall_time: float


class _LexicographicSolver:
    """Shared phase loop; subclasses solve one phase with a concrete backend.

    The bars phase runs under the wall-clock budget and must be proven
    optimal unless accept_unproven is set. Tie-break phases run under a
    fixed work limit chosen by the backend, so their answer does not depend
    on machine speed.
    """

    name = "base"

    def __init__(self, max_time_seconds: float = 30.0, accept_unproven: bool = False) -> None:
        self.max_time_seconds = float(max_time_seconds)
        self.accept_unproven = bool(accept_unproven)

    def _solve_phase(self, model: CuttingModel, fixed: FixedObjectives,
                     objective: List[int], primary: bool) -> _PhaseOutcome:
        raise NotImplementedError

    def _failure(self, model: CuttingModel, message: str, status: str) -> SolverFailure:
        return SolverFailure(f"Material '{model.material}': {message}",
                             status=status, material=model.material, model_text=model.render())

    def solve(self, model: CuttingModel) -> SolverResult:
        if model.num_variables == 0:
            raise self._failure(model, "model has no pattern variables", "MODEL_INVALID")
        if self.max_time_seconds <= 0:
            raise self._failure(model, "time budget exhausted before solving", "UNKNOWN")

        fixed: FixedObjectives = []
        values: Optional[List[int]] = None
        status = "UNKNOWN"
        objective_value: Optional[float] = None
        wall_time = 0.0
        phases: List[str] = []
        phase_status: Dict[str, str] = {}
        complete = True

        for phase, (obj_name, coefs) in enumerate(model.objectives()):
            if phase > 0 and not any(coefs):
                continue

            outcome = self._solve_phase(model, fixed, coefs, primary=phase == 0)
            wall_time += outcome.wall_time
            phase_status[obj_name] = outcome.status

            if phase == 0:
                status = outcome.status
                if outcome.values is None:
                    raise self._failure(
                        model, f"{self.name} solver returned {outcome.status} within {self.max_time_seconds:g}s",
                        outcome.status,
                    )
                if not outcome.optimal and not self.accept_unproven:
                    raise self._failure(
                        model,
                        f"{self.name} solver could not prove the bar count optimal within "
                        f"{self.max_time_seconds:g}s ({outcome.status})",
                        outcome.status,
                    )
            elif outcome.values is None:
                logger.warning("material %r: tie-break phase %r ended with %s; keeping previous plan",
                               model.material, obj_name, outcome.status)
                complete = False
                break

            values = outcome.values
            phases.append(obj_name)
            achieved = sum(c * v for c, v in zip(coefs, values))
            if phase == 0:
                objective_value = float(achieved)
            if not outcome.optimal:
                logger.warning("material %r: phase %r stopped at a feasible, unproven solution (%s)",
                               model.material, obj_name, outcome.status)
                complete = False
                break
            fixed.append((coefs, achieved))

        if values is None:
            raise self._failure(model, "no phase produced a plan", status)
        return SolverResult(
            usage={name: v for name, v in zip(model.variable_names, values)},
            status=status,
            objective_value=objective_value,
            wall_time=wall_time,
            phases=phases,
            phase_status=phase_status,
            tie_break_complete=complete,
        )


class CpSatPatternSolver(_LexicographicSolver):
    """CP-SAT implementation; all model coefficients are integers already."""

    name = "cp-sat"

    def __init__(
        self,
        max_time_seconds: float = 30.0,
        random_seed: Optional[int] = 0,
        num_search_workers: Optional[int] = 1,
        log_search_progress: bool = False,
        tie_break_deterministic_time: float = 5.0,
        accept_unproven: bool = False,
    ) -> None:
        super().__init__(max_time_seconds, accept_unproven)
        self.random_seed = random_seed
        self.num_search_workers = num_search_workers
        self.log_search_progress = log_search_progress
        self.tie_break_deterministic_time = float(tie_break_deterministic_time)

    def _solve_phase(self, model: CuttingModel, fixed: FixedObjectives,
                     objective: List[int], primary: bool) -> _PhaseOutcome:
        m = cp_model.CpModel()
        x = [m.NewIntVar(0, ub, name) for name, ub in zip(model.variable_names, model.upper_bounds())]

        # --- HARD CONSTRAINT: demand coverage per cut type ---
        for j in range(len(model.cut_types)):
            m.Add(_weighted_sum(x, model.coefficients(j)) >= model.demand[j])
        # --- Earlier lexicographic phases pinned at their optimum ---
        for coefs, value in fixed:
            m.Add(_weighted_sum(x, coefs) == value)

        m.Minimize(_weighted_sum(x, objective))

        s = cp_model.CpSolver()
        if primary:
            s.parameters.max_time_in_seconds = self.max_time_seconds
        else:
            # deterministic time only: same work on every machine
            s.parameters.max_deterministic_time = self.tie_break_deterministic_time
        s.parameters.log_search_progress = bool(self.log_search_progress)
        if self.random_seed is not None:
            s.parameters.random_seed = int(self.random_seed)
        if self.num_search_workers is not None:
            s.parameters.num_search_workers = int(self.num_search_workers)
        status = s.Solve(m)

        values = None
        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            values = [int(s.Value(v)) for v in x]
        return _PhaseOutcome(
            status=s.StatusName(status),
            optimal=status == cp_model.OPTIMAL,
            values=values,
            wall_time=s.WallTime(),
        )


def _weighted_sum(variables: Sequence[cp_model.IntVar], coefs: Sequence[int]) -> cp_model.LinearExpr:
    pairs = [(v, c) for v, c in zip(variables, coefs) if c]
    return cp_model.LinearExpr.WeightedSum([v for v, _ in pairs], [c for _, c in pairs])


_MIP_STATUS_NAMES = {
    pywraplp.Solver.OPTIMAL: "OPTIMAL",
    pywraplp.Solver.FEASIBLE: "FEASIBLE",
    pywraplp.Solver.INFEASIBLE: "INFEASIBLE",
    pywraplp.Solver.UNBOUNDED: "UNBOUNDED",
    pywraplp.Solver.ABNORMAL: "ABNORMAL",
    pywraplp.Solver.NOT_SOLVED: "NOT_SOLVED",
}


# SCIP parameter string for a fixed branch-and-bound node budget
_NODE_LIMIT_PARAMS = {
    "SCIP": "limits/nodes = {limit}\n",
}


class MipPatternSolver(_LexicographicSolver):
    """Branch-and-bound MIP through ``pywraplp``; values are rounded to integers.

    Tie-break phases stop after tie_break_node_limit nodes rather than at a
    wall-clock limit. Backends without a known node-limit parameter fall back
    to the wall-clock budget for those phases.
    """

    name = "mip"

    def __init__(
        self,
        max_time_seconds: float = 30.0,
        backend: str = "SCIP",
        tie_break_node_limit: int = 10_000,
        accept_unproven: bool = False,
    ) -> None:
        super().__init__(max_time_seconds, accept_unproven)
        self.backend = backend
        self.tie_break_node_limit = int(tie_break_node_limit)

    def _solve_phase(self, model: CuttingModel, fixed: FixedObjectives,
                     objective: List[int], primary: bool) -> _PhaseOutcome:
        s = pywraplp.Solver.CreateSolver(self.backend)
        if s is None:
            raise SolverFailure(f"MIP backend {self.backend!r} is not available in this OR-Tools build",
                                status="NOT_AVAILABLE", material=model.material)

        x = [s.IntVar(0, ub, name) for name, ub in zip(model.variable_names, model.upper_bounds())]
        for j in range(len(model.cut_types)):
            row = model.coefficients(j)
            s.Add(s.Sum([a * x[p] for p, a in enumerate(row) if a]) >= model.demand[j])
        for coefs, value in fixed:
            s.Add(s.Sum([c * x[p] for p, c in enumerate(coefs) if c]) == value)
        s.Minimize(s.Sum([c * x[p] for p, c in enumerate(objective) if c]))

        node_params = _NODE_LIMIT_PARAMS.get(self.backend.upper())
        if primary or node_params is None:
            if not primary:
                logger.warning("MIP backend %r has no node limit; tie-break phase uses the wall-clock budget",
                               self.backend)
            s.SetTimeLimit(max(1, int(self.max_time_seconds * 1000)))
        elif not s.SetSolverSpecificParametersAsString(node_params.format(limit=self.tie_break_node_limit)):
            raise SolverFailure(f"MIP backend {self.backend!r} rejected the node limit",
                                status="MODEL_INVALID", material=model.material)

        status = s.Solve()
        values = None
        if status in (pywraplp.Solver.OPTIMAL, pywraplp.Solver.FEASIBLE):
            values = [max(0, int(round(v.solution_value()))) for v in x]
        return _PhaseOutcome(
            status=_MIP_STATUS_NAMES.get(status, str(status)),
            optimal=status == pywraplp.Solver.OPTIMAL,
            values=values,
            wall_time=s.wall_time() / 1000.0,
        )


SOLVER_NAMES = ("cp-sat", "mip")


def make_solver(name: str, config: CuttingConfig) -> PatternSolver:
    """Build a named solver from a resolved configuration.

    Raises:
        ValueError: For an unknown solver name.
    """
    if name == "cp-sat":
        return CpSatPatternSolver(
            max_time_seconds=config["max_time_seconds"],
            random_seed=config["random_seed"],
            num_search_workers=config["num_search_workers"],
            log_search_progress=config["log_search_progress"],
            tie_break_deterministic_time=config["tie_break_deterministic_time"],
            accept_unproven=config["accept_unproven"],
        )
    if name == "mip":
        return MipPatternSolver(
            max_time_seconds=config["max_time_seconds"],
            tie_break_node_limit=config["tie_break_node_limit"],
            accept_unproven=config["accept_unproven"],
        )
    raise ValueError(f"Unknown solver {name!r}; expected one of {SOLVER_NAMES}")
