"""
Exception types raised by the cutting planner.

Input problems derive from ``ValueError`` (through ``CuttingPlanError``) so
callers that already guard on ``ValueError`` keep working. Solver failures
are runtime problems and derive from ``RuntimeError``.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional


class CuttingPlanError(ValueError):
    """Base class for input errors detected before or while building a plan."""


class InvalidWorkOrder(CuttingPlanError):
    """A work order (or configuration value) failed validation.

    Attributes:
        order_id: Identifier of the offending order, if known.
        field: Name of the offending field (e.g. ``"cuts"``).
        index: Position of the order in the input list, if known.
    """

    def __init__(self, message: str, *, order_id: Optional[str] = None,
                 field: Optional[str] = None, index: Optional[int] = None) -> None:
        super().__init__(message)
        self.order_id = order_id
        self.field = field
        self.index = index


class InvalidConfig(InvalidWorkOrder):
    """A configuration value is missing, malformed or out of range."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message, field=field)


class UnsatisfiableDemand(CuttingPlanError):
    """A required cut length does not fit on a single bar."""

    def __init__(self, material: str, length: Decimal, bar_length: Decimal) -> None:
        super().__init__(
            f"Material '{material}': cut length {length} exceeds bar length {bar_length}; "
            "no pattern can produce it"
        )
        self.material = material
        self.length = length
        self.bar_length = bar_length


class PatternLimitExceeded(CuttingPlanError):
    """Pattern enumeration produced more patterns than allowed."""

    def __init__(self, material: str, limit: int, cut_type_count: int) -> None:
        super().__init__(
            f"Material '{material}': more than {limit} cutting patterns for "
            f"{cut_type_count} distinct cut lengths; reduce the number of distinct lengths "
            "or raise max_patterns_per_material"
        )
        self.material = material
        self.limit = limit
        self.cut_type_count = cut_type_count


class SolverFailure(RuntimeError):
    """The solver returned no usable solution.

    ``model_text`` holds the rendered model so the failing instance can be
    inspected or replayed.
    """

    def __init__(self, message: str, *, status: str, material: Optional[str] = None,
                 model_text: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.material = material
        self.model_text = model_text

    def __str__(self) -> str:
        base = super().__str__()
        if self.model_text:
            return f"{base}\n--- model ---\n{self.model_text}"
        return base
