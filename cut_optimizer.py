"""
Cutting-stock planner: minimal-bar cutting plans split into production rounds.

Pipeline per material (materials in first-encounter order)
===========================================================
1. Demand aggregation: Job orders before Stock orders, lengths normalized to
   integer thousandths, counts summed per length.
2. Pattern enumeration: every single-bar layout within bar length and the
   per-length cut cap.
3. Model: minimize bars subject to demand coverage per length.
4. Solve through a pluggable PatternSolver (CP-SAT by default).
5. Round splitting: each used pattern becomes rounds of at most
   ``max_bars_per_round`` bars; round numbers run across the whole call.

Hard Constraints
----------------
- Coverage: for every material and length, Σ bars × multiplicity >= demand.
- Bar bound: 0 < bars <= max_bars_per_round for every round.
- Pattern feasibility: used length <= bar length; waste = bar - used >= 0.

Validation happens up front: an invalid order or configuration value, or a
cut longer than the bar in any material, is reported before anything is
solved.
"""
from __future__ import annotations

import itertools
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from cut_errors import SolverFailure
from datatypes import MaterialDemand, OptimizedRound, WorkOrder
from demand import aggregate_demand, from_thousandths, to_thousandths
from input_validations import resolve_config, validate_work_orders
from model_builder import CuttingModel, build_model, ensure_satisfiable
from patterns import generate_patterns
from plan_types import MaterialSummary, PlanResult
from rounds import split_into_rounds
from solver import PatternSolver, SolverResult, make_solver

logger = logging.getLogger(__name__)


def optimize(
    orders: Sequence[WorkOrder],
    config: Optional[Mapping[str, Any]] = None,
    solver: Optional[PatternSolver] = None,
) -> List[OptimizedRound]:
    """Compute production rounds for a list of work orders.

    Args:
        orders: Work orders, any materials, any priority classes.
        config: CuttingConfig keys (bar_length, max_cuts_per_bar, max_bars_per_round, ...).
        solver: Optional PatternSolver; a CP-SAT solver built from config by default.

    Returns:
        Rounds in round-number order; ``[]`` for no orders.

    Raises:
        InvalidWorkOrder / InvalidConfig: Bad input.
        UnsatisfiableDemand: A cut length exceeds the bar length.
        PatternLimitExceeded: Too many patterns for one material.
        SolverFailure: The solver found no usable plan.
    """
    return plan_cuts(orders, config, solver)["rounds"]


def plan_cuts(
    orders: Sequence[WorkOrder],
    config: Optional[Mapping[str, Any]] = None,
    solver: Optional[PatternSolver] = None,
) -> PlanResult:
    """Like ``optimize`` but also returns per-material and plan-level statistics."""
    cfg = resolve_config(config)
    validate_work_orders(orders)
    bar_length = to_thousandths(cfg["bar_length"])
    if solver is None:
        solver = make_solver("cp-sat", cfg)

    demands = aggregate_demand(orders)
    for demand in demands.values():
        ensure_satisfiable(demand, bar_length)

    counter = itertools.count(1)
    rounds: List[OptimizedRound] = []
    materials: Dict[str, MaterialSummary] = {}
    for material, demand in demands.items():
        patterns = generate_patterns(
            demand.cut_types, bar_length, cfg["max_cuts_per_bar"],
            max_patterns=cfg["max_patterns_per_material"], material=material,
        )
        model = build_model(demand, patterns, bar_length)
        result = solver.solve(model)

        material_rounds: List[OptimizedRound] = []
        for p, name in enumerate(model.variable_names):
            usage = result.usage.get(name, 0)
            if usage < 0:
                raise SolverFailure(
                    f"Material '{material}': solver returned negative usage {usage} for {name}",
                    status="INVALID_SOLUTION", material=material, model_text=model.render(),
                )
            if usage > 0:
                material_rounds.extend(split_into_rounds(
                    material, model.cut_types, model.patterns[p], usage,
                    bar_length, cfg["max_bars_per_round"], counter,
                ))

        summary = _material_summary(demand, model, material_rounds, result)
        _check_coverage(model, summary)
        logger.info(
            "material %r: %d bars in %d rounds from %d patterns (status %s)",
            material, summary["total_bars"], summary["rounds_count"], len(patterns), result.status,
        )
        rounds.extend(material_rounds)
        materials[material] = summary

    return {
        "rounds": rounds,
        "summary": {
            "bar_length": float(from_thousandths(bar_length)),
            "materials_count": len(materials),
            "orders_count": len(orders),
            "total_bars": sum(m["total_bars"] for m in materials.values()),
            "rounds_count": len(rounds),
            "total_waste": float(sum((r.total_waste for r in rounds), Decimal("0.000"))),
            "materials": materials,
        },
    }


def _material_summary(
    demand: MaterialDemand,
    model: CuttingModel,
    material_rounds: List[OptimizedRound],
    result: SolverResult,
) -> MaterialSummary:
    total_bars = sum(r.bars for r in material_rounds)
    used = sum((r.used_length * r.bars for r in material_rounds), Decimal("0.000"))
    waste = sum((r.total_waste for r in material_rounds), Decimal("0.000"))
    stock = from_thousandths(model.bar_length) * total_bars

    cut_types = []
    for length, need in zip(model.cut_types, model.demand):
        as_decimal = from_thousandths(length)
        produced = sum(r.cuts_of(as_decimal) for r in material_rounds)
        cut_types.append({
            "length": float(as_decimal),
            "demand": need,
            "produced": produced,
            "overproduction": max(0, produced - need),
        })

    return {
        "material": demand.material,
        "orders_count": len(demand.order_ids),
        "cut_types": cut_types,
        "patterns_count": model.num_variables,
        "total_bars": total_bars,
        "rounds_count": len(material_rounds),
        "total_waste": float(waste),
        "utilization_pct": float(used / stock * 100) if stock > 0 else 0.0,
        "solver_status": result.status,
        "objective_value": result.objective_value,
        "wall_time": result.wall_time,
        "solver_phases": list(result.phases),
        "tie_break_complete": result.tie_break_complete,
    }


def _check_coverage(model: CuttingModel, summary: MaterialSummary) -> None:
    """Reject a solver answer that leaves any length short."""
    for row in summary["cut_types"]:
        if row["produced"] < row["demand"]:
            raise SolverFailure(
                f"Material '{model.material}': plan produces {row['produced']} pieces of "
                f"{row['length']} but {row['demand']} are required",
                status="INVALID_SOLUTION", material=model.material, model_text=model.render(),
            )
