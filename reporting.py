# --------------------------- Reporting ---------------------------
from decimal import Decimal
from typing import Any, Dict, List, Optional

from datatypes import OptimizedRound
from domain_types import RejectedOrderRow
from plan_types import PlanResult, PlanSummary


def format_length(value: Decimal) -> str:
    """Decimal('20.000') -> '20', Decimal('45.500') -> '45.5'."""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_pattern(r: OptimizedRound) -> str:
    return " + ".join(f"{c.count} x {format_length(c.length)}" for c in r.pattern)


def rounds_markdown_by_material(rounds: List[OptimizedRound]) -> Dict[str, str]:
    """One Markdown table per material, materials in order of first round."""
    by_material: Dict[str, List[OptimizedRound]] = {}
    for r in rounds:
        by_material.setdefault(r.material, []).append(r)

    out: Dict[str, str] = {}
    for material, rs in by_material.items():
        bars = sum(r.bars for r in rs)
        header = (
            f"### {material} — rounds: {len(rs)} | bars: {bars}\n\n"
            "| Round | Bars | Pattern | Waste per bar |\n|---|---|---|---|\n"
        )
        rows = [f"| {r.round} | {r.bars} | {format_pattern(r)} | {format_length(r.waste_per_bar)} |" for r in rs]
        out[material] = header + "\n".join(rows) + "\n"
    return out


def summary_markdown(summary: PlanSummary) -> str:
    lines = [
        f"### Summary — bar length: {summary['bar_length']:g} | bars: {summary['total_bars']} "
        f"| rounds: {summary['rounds_count']} | waste: {summary['total_waste']:g}",
        "",
        "| Material | Orders | Patterns | Bars | Rounds | Waste | Utilization % | Status |",
        "|---|---|---|---|---|---|---|---|",
    ]
    for m in summary["materials"].values():
        lines.append(
            f"| {m['material']} | {m['orders_count']} | {m['patterns_count']} | {m['total_bars']} "
            f"| {m['rounds_count']} | {m['total_waste']:g} | {m['utilization_pct']:.1f} | {m['solver_status']} |"
        )
    if not summary["materials"]:
        lines.append("| *(none)* | — | — | — | — | — | — | — |")
    return "\n".join(lines) + "\n"


def rejected_markdown(rejected: List[RejectedOrderRow]) -> str:
    header = "### Rejected work orders\n\n| Index | Work order | Field | Reason |\n|---|---|---|---|\n"
    rows = [f"| {r['order_index']} | {r['workOrder']} | {r['field']} | {r['reason']} |" for r in rejected]
    return header + "\n".join(rows or ["| *(none)* | — | — | — |"]) + "\n"


def markdown_all_tables(result: PlanResult, rejected: Optional[List[RejectedOrderRow]] = None) -> str:
    parts = list(rounds_markdown_by_material(result["rounds"]).values())
    parts.append(summary_markdown(result["summary"]))
    if rejected:
        parts.append(rejected_markdown(rejected))
    return "\n".join(parts)


def plan_to_json(result: PlanResult, rejected: Optional[List[RejectedOrderRow]] = None) -> Dict[str, Any]:
    """JSON-ready dict: rounds as RoundRecord, summary unchanged."""
    return {
        "rounds": [r.to_record() for r in result["rounds"]],
        "summary": result["summary"],
        "rejected": list(rejected or []),
    }
