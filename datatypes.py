# --------------------------- Core value types ---------------------------


from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Tuple, Union

from domain_types import CutEntryRecord, RoundRecord, WorkOrderRecord

LengthLike = Union[int, float, str, Decimal]


@dataclass(frozen=True)
class WorkOrder:
    """
    One customer or stock request: ``cuts`` pieces of ``length`` in ``material``.

    Attributes
    ----------
    work_order : order identifier as shown on the shop floor
    job        : priority class, "Job" (customer work, cut first) or "Stock"
    cuts       : number of pieces required (positive int)
    length     : piece length; normalized to thousandths when aggregated
    material   : material label; orders are optimized per material
    """
    work_order: str
    job: str
    cuts: int
    length: LengthLike
    material: str

    @classmethod
    def from_record(cls, record: WorkOrderRecord) -> "WorkOrder":
        return cls(
            work_order=record["workOrder"],
            job=record["job"],
            cuts=record["cuts"],
            length=record["length"],
            material=record["material"],
        )


@dataclass(frozen=True)
class CutEntry:
    """``count`` pieces of ``length`` taken from one bar."""
    length: Decimal
    count: int

    def to_record(self) -> CutEntryRecord:
        return {"length": float(self.length), "count": self.count}


@dataclass(frozen=True)
class OptimizedRound:
    """
    A production run: ``bars`` bars of ``material`` all cut with the same pattern.

    ``waste_per_bar`` is the bar length minus the pattern's used length, exact
    to three decimals.
    """
    round: int
    bars: int
    pattern: Tuple[CutEntry, ...]
    waste_per_bar: Decimal
    material: str

    @property
    def used_length(self) -> Decimal:
        return sum((c.length * c.count for c in self.pattern), Decimal("0.000"))

    @property
    def total_waste(self) -> Decimal:
        return self.waste_per_bar * self.bars

    def cuts_of(self, length: Decimal) -> int:
        """Pieces of ``length`` produced by the whole round."""
        return sum(c.count for c in self.pattern if c.length == length) * self.bars

    def to_record(self) -> RoundRecord:
        return {
            "round": self.round,
            "bars": self.bars,
            "pattern": [c.to_record() for c in self.pattern],
            "wastePerBar": float(self.waste_per_bar),
            "material": self.material,
        }


@dataclass
class MaterialDemand:
    """
    Aggregated demand for one material.

    Lengths are integer thousandths. ``cut_types`` keeps first-encounter order
    (Job orders before Stock orders); ``demand`` maps each cut type to its
    summed count.
    """
    material: str
    cut_types: List[int] = field(default_factory=list)
    demand: Dict[int, int] = field(default_factory=dict)
    order_ids: List[str] = field(default_factory=list)

    def add(self, length: int, cuts: int, order_id: str) -> None:
        if length not in self.demand:
            self.cut_types.append(length)
            self.demand[length] = 0
        self.demand[length] += cuts
        self.order_ids.append(order_id)

    def counts(self) -> List[int]:
        """Demand counts aligned with ``cut_types``."""
        return [self.demand[c] for c in self.cut_types]
