"""
Type definitions for cutting configuration and plan results.
"""
from __future__ import annotations

from typing import Dict, List, Optional, TypedDict

from datatypes import OptimizedRound


class CuttingConfig(TypedDict, total=False):
    """Options accepted by ``optimize`` / ``plan_cuts``.

    All keys are optional; missing keys take the defaults in
    ``input_validations.DEFAULT_CONFIG``.

        bar_length: Stock bar length (> 0, default 160.0).
        max_cuts_per_bar: Upper bound on pieces of one length per bar (>= 1, default 10).
        max_bars_per_round: Bars per production round (>= 1, default 6).
        max_time_seconds: Wall-clock budget for the bars phase of one material (finite, > 0, default 30).
        random_seed: CP-SAT random seed (default 0).
        num_search_workers: CP-SAT workers (>= 1, default 1 for reproducibility).
        log_search_progress: Echo the CP-SAT search log (default False).
        max_patterns_per_material: Pattern enumeration bound (>= 1, default 250000).
        tie_break_deterministic_time: CP-SAT deterministic-time limit per tie-break phase (finite, > 0, default 5).
        tie_break_node_limit: MIP node limit per tie-break phase (>= 1, default 10000).
        accept_unproven: Keep a feasible but unproven bar count instead of failing (default False).
    """
    bar_length: float
    max_cuts_per_bar: int
    max_bars_per_round: int
    max_time_seconds: float
    random_seed: int
    num_search_workers: int
    log_search_progress: bool
    max_patterns_per_material: int
    tie_break_deterministic_time: float
    tie_break_node_limit: int
    accept_unproven: bool


class CutTypeSummary(TypedDict):
    """Demand versus production for one cut length of one material."""
    length: float
    demand: int
    produced: int
    overproduction: int


class MaterialSummary(TypedDict):
    """Per-material statistics of a plan.

    utilization_pct is used length over total stock length consumed.
    solver_phases names the objectives whose solution was adopted;
    tie_break_complete is False when a tie-break phase hit its work limit.
    """
    material: str
    orders_count: int
    cut_types: List[CutTypeSummary]
    patterns_count: int
    total_bars: int
    rounds_count: int
    total_waste: float
    utilization_pct: float
    solver_status: str
    objective_value: Optional[float]
    wall_time: float
    solver_phases: List[str]
    tie_break_complete: bool


class PlanSummary(TypedDict):
    """Plan-level totals plus one MaterialSummary per material."""
    bar_length: float
    materials_count: int
    orders_count: int
    total_bars: int
    rounds_count: int
    total_waste: float
    materials: Dict[str, MaterialSummary]


class PlanResult(TypedDict):
    """Result container for plan_cuts().

    Keys:
        rounds: Production rounds in round-number order.
        summary: Aggregated statistics (see PlanSummary).
    """
    rounds: List[OptimizedRound]
    summary: PlanSummary
