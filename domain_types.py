"""
JSON record shapes exchanged with the order form and report consumers.
"""
from __future__ import annotations

from typing import List, Literal, TypedDict, Union

PriorityClass = Literal["Job", "Stock"]


class WorkOrderRecord(TypedDict):
    workOrder: str
    job: PriorityClass
    cuts: int
    length: Union[int, float, str]
    material: str


class CutEntryRecord(TypedDict):
    length: float
    count: int


class RoundRecord(TypedDict):
    """One serialized production round (see ``OptimizedRound.to_record``)."""
    round: int
    bars: int
    pattern: List[CutEntryRecord]
    wastePerBar: float
    material: str


class RejectedOrderRow(TypedDict):
    """One work order dropped by ``screen_work_orders`` and the reason why."""
    order_index: int
    workOrder: str
    field: str
    reason: str
