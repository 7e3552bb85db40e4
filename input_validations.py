"""Input validation utilities for the cutting planner.

This module validates work orders and the cutting configuration before any
demand is aggregated or any model is built.

Functions
---------
validate_work_orders(orders)
    Fails fast on the first invalid order, naming the order and field.
screen_work_orders(orders)
    Per-order policy: splits orders into valid ones and rejected rows.
resolve_config(config)
    Applies defaults and camelCase aliases, rejects unknown keys and
    out-of-range values.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from cut_errors import InvalidConfig, InvalidWorkOrder
from datatypes import WorkOrder
from demand import PRIORITY_CLASSES, from_thousandths, to_thousandths
from domain_types import RejectedOrderRow
from plan_types import CuttingConfig

__all__ = [
  "DEFAULT_CONFIG",
  "validate_work_order",
  "validate_work_orders",
  "screen_work_orders",
  "resolve_config",
]

DEFAULT_CONFIG: CuttingConfig = {
  "bar_length": 160.0,
  "max_cuts_per_bar": 10,
  "max_bars_per_round": 6,
  "max_time_seconds": 30.0,
  "random_seed": 0,
  "num_search_workers": 1,
  "log_search_progress": False,
  "max_patterns_per_material": 250_000,
  "tie_break_deterministic_time": 5.0,
  "tie_break_node_limit": 10_000,
  "accept_unproven": False,
}

CONFIG_ALIASES = {
  "barLength": "bar_length",
  "maxCutsPerBar": "max_cuts_per_bar",
  "maxBarsPerRound": "max_bars_per_round",
  "maxTimeSeconds": "max_time_seconds",
}

_POSITIVE_INT_KEYS = (
  "max_cuts_per_bar",
  "max_bars_per_round",
  "num_search_workers",
  "max_patterns_per_material",
  "tie_break_node_limit",
)
_POSITIVE_SECONDS_KEYS = ("max_time_seconds", "tie_break_deterministic_time")
_BOOL_KEYS = ("log_search_progress", "accept_unproven")


def _as_int(value: Any) -> Optional[int]:
  """Return value as int if it is an int or an integral float, else None."""
  if isinstance(value, bool):
    return None
  if isinstance(value, int):
    return value
  if isinstance(value, float) and value.is_integer():
    return int(value)
  return None


def validate_work_order(order: WorkOrder, index: int = 0) -> None:
  """Validate a single work order.

  Args:
    order: The order to check.
    index: Its position in the input list (reported in errors).

  Raises:
    InvalidWorkOrder: On the first invalid field.
  """
  if not isinstance(order, WorkOrder):
    raise InvalidWorkOrder(f"Order at index {index} must be a WorkOrder, got {type(order).__name__}",
                           index=index)
  oid = order.work_order
  if not isinstance(oid, str) or not oid.strip():
    raise InvalidWorkOrder(f"Order at index {index}: workOrder must be a non-empty string",
                           order_id=None, field="workOrder", index=index)
  if order.job not in PRIORITY_CLASSES:
    raise InvalidWorkOrder(f"Order '{oid}': job must be one of {PRIORITY_CLASSES}, got {order.job!r}",
                           order_id=oid, field="job", index=index)
  cuts = _as_int(order.cuts)
  if cuts is None:
    raise InvalidWorkOrder(f"Order '{oid}': cuts must be an integer, got {order.cuts!r}",
                           order_id=oid, field="cuts", index=index)
  if cuts <= 0:
    raise InvalidWorkOrder(f"Order '{oid}': cuts must be > 0, got {order.cuts}",
                           order_id=oid, field="cuts", index=index)
  try:
    length = to_thousandths(order.length)
  except ValueError:
    raise InvalidWorkOrder(f"Order '{oid}': length must be a number, got {order.length!r}",
                           order_id=oid, field="length", index=index)
  if length <= 0:
    raise InvalidWorkOrder(f"Order '{oid}': length must be > 0, got {order.length}",
                           order_id=oid, field="length", index=index)
  if not isinstance(order.material, str) or not order.material.strip():
    raise InvalidWorkOrder(f"Order '{oid}': material must be a non-empty string",
                           order_id=oid, field="material", index=index)


def validate_work_orders(orders: Sequence[WorkOrder]) -> None:
  """Validate every order, stopping at the first failure.

  Raises:
    InvalidWorkOrder: If orders is not a list/tuple or any order is invalid.
  """
  if not isinstance(orders, (list, tuple)):
    raise InvalidWorkOrder("Work orders must be a list.")
  for idx, order in enumerate(orders):
    validate_work_order(order, idx)


def screen_work_orders(orders: Sequence[WorkOrder]) -> Tuple[List[WorkOrder], List[RejectedOrderRow]]:
  """Keep valid orders and report the rest instead of failing the batch.

  Returns:
    (valid orders in input order, one RejectedOrderRow per dropped order)
  """
  valid: List[WorkOrder] = []
  rejected: List[RejectedOrderRow] = []
  for idx, order in enumerate(orders):
    try:
      validate_work_order(order, idx)
    except InvalidWorkOrder as exc:
      rejected.append({
        "order_index": idx,
        "workOrder": str(getattr(order, "work_order", "")),
        "field": exc.field or "",
        "reason": str(exc),
      })
      continue
    valid.append(order)
  return valid, rejected


def resolve_config(config: Optional[Mapping[str, Any]] = None) -> CuttingConfig:
  """Merge a user configuration over DEFAULT_CONFIG and validate it.

  Args:
    config: Mapping with any CuttingConfig keys (or their camelCase aliases).

  Returns:
    A complete CuttingConfig.

  Raises:
    InvalidConfig: For unknown keys, duplicated aliases or invalid values.
  """
  if config is None:
    config = {}
  if not isinstance(config, Mapping):
    raise InvalidConfig("Configuration must be a mapping.")

  merged: Dict[str, Any] = dict(DEFAULT_CONFIG)
  seen = set()
  for key, value in config.items():
    canonical = CONFIG_ALIASES.get(key, key)
    if canonical not in DEFAULT_CONFIG:
      raise InvalidConfig(f"Unknown configuration key: {key!r}", field=key)
    if canonical in seen:
      raise InvalidConfig(f"Configuration key given twice: {canonical!r}", field=canonical)
    seen.add(canonical)
    merged[canonical] = value

  bar_length = merged["bar_length"]
  if bar_length is None:
    raise InvalidConfig("bar_length is required", field="bar_length")
  try:
    bar_thousandths = to_thousandths(bar_length)
  except ValueError:
    raise InvalidConfig(f"bar_length must be a number, got {bar_length!r}", field="bar_length")
  if bar_thousandths <= 0:
    raise InvalidConfig(f"bar_length must be > 0, got {bar_length}", field="bar_length")
  merged["bar_length"] = float(from_thousandths(bar_thousandths))

  for key in _POSITIVE_INT_KEYS:
    as_int = _as_int(merged[key])
    if as_int is None or as_int < 1:
      raise InvalidConfig(f"{key} must be an integer >= 1, got {merged[key]!r}", field=key)
    merged[key] = as_int

  for key in _POSITIVE_SECONDS_KEYS:
    seconds = merged[key]
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
      raise InvalidConfig(f"{key} must be a number > 0, got {seconds!r}", field=key)
    # NaN fails both comparisons, so test finiteness explicitly
    if not math.isfinite(seconds) or seconds <= 0:
      raise InvalidConfig(f"{key} must be a finite number > 0, got {seconds!r}", field=key)
    merged[key] = float(seconds)

  seed = merged["random_seed"]
  if seed is not None and _as_int(seed) is None:
    raise InvalidConfig(f"random_seed must be an integer or null, got {seed!r}", field="random_seed")
  merged["random_seed"] = None if seed is None else _as_int(seed)

  for key in _BOOL_KEYS:
    if not isinstance(merged[key], bool):
      raise InvalidConfig(f"{key} must be a boolean", field=key)

  return merged  # type: ignore[return-value]
