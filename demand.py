"""
Demand aggregation: group work orders per material and sum cut counts per length.

Lengths are converted to integer thousandths so that ``20``, ``20.0`` and
``"20.000"`` land on the same demand key regardless of float rounding.
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Iterable, List

from datatypes import LengthLike, MaterialDemand, WorkOrder

logger = logging.getLogger(__name__)

SCALE = 1000
_QUANTUM = Decimal("0.001")

JOB = "Job"
STOCK = "Stock"
PRIORITY_CLASSES = (JOB, STOCK)


def to_thousandths(value: LengthLike) -> int:
    """Convert a length to integer thousandths, rounding half-up past 3 decimals.

    Floats go through ``str`` first so ``0.1`` becomes exactly 100.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"length must be numeric, got {value!r}")
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        return int(dec.quantize(_QUANTUM, rounding=ROUND_HALF_UP) * SCALE)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"length must be a finite number, got {value!r}") from exc


def from_thousandths(value: int) -> Decimal:
    """Inverse of ``to_thousandths``: ``20000`` -> ``Decimal('20.000')``."""
    return (Decimal(value) / SCALE).quantize(_QUANTUM)


def partition_by_priority(orders: Iterable[WorkOrder]) -> List[WorkOrder]:
    """Return Job orders then Stock orders, each group in input order.

    Two passes over the input; never a comparator sort, so ties keep their
    relative order on every Python implementation.
    """
    orders = list(orders)
    jobs = [o for o in orders if o.job == JOB]
    stock = [o for o in orders if o.job != JOB]
    return jobs + stock


def group_by_material(orders: Iterable[WorkOrder]) -> Dict[str, List[WorkOrder]]:
    """Bucket orders per material, materials in first-encounter order."""
    out: Dict[str, List[WorkOrder]] = {}
    for order in orders:
        out.setdefault(order.material, []).append(order)
    return out


def aggregate_demand(orders: Iterable[WorkOrder]) -> Dict[str, MaterialDemand]:
    """Reduce work orders to one MaterialDemand per material.

    Within a material, orders are partitioned Job-first and their lengths
    normalized to thousandths; counts for equal normalized lengths are summed.
    Cut types keep first-encounter order of that partitioned sequence.

    Returns:
        Dict material -> MaterialDemand, in material first-encounter order.
    """
    result: Dict[str, MaterialDemand] = {}
    for material, bucket in group_by_material(orders).items():
        agg = MaterialDemand(material=material)
        for order in partition_by_priority(bucket):
            agg.add(to_thousandths(order.length), int(order.cuts), order.work_order)
        logger.debug(
            "material %r: %d orders, %d distinct cut lengths",
            material, len(bucket), len(agg.cut_types),
        )
        result[material] = agg
    return result
