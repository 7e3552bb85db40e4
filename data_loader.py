"""
Data loading utilities for the cutting planner.

Provides loaders that turn JSON files into ``WorkOrder`` lists and resolved
``CuttingConfig`` mappings.
"""
import json
import os
from typing import Any, Dict, List

from datatypes import WorkOrder
from input_validations import resolve_config
from plan_types import CuttingConfig

_RECORD_KEYS = ("workOrder", "job", "cuts", "length", "material")


def load_work_orders(path: str) -> List[WorkOrder]:
    """Load work orders from a JSON file.

    Args:
        path: Path to a JSON file holding either a list of order records or an
              object with an "orders" list. Each record must include keys
              "workOrder" (str), "job" ("Job" | "Stock"), "cuts" (int),
              "length" (number) and "material" (str).

    Returns:
        A list of WorkOrder objects in file order. Field values are not
        range-checked here; ``optimize`` validates them.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is malformed or a record misses keys.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Work orders file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in work orders file: {path}") from exc

    if isinstance(data, dict):
        if "orders" not in data or not isinstance(data["orders"], list):
            raise ValueError("Work orders data must contain a list under 'orders' key.")
        data = data["orders"]
    if not isinstance(data, list):
        raise ValueError("Work orders data must be a list or an object with an 'orders' list.")

    orders: List[WorkOrder] = []
    for idx, record in enumerate(data):
        if not isinstance(record, dict):
            raise ValueError(f"Work order at index {idx} must be an object.")
        missing = [k for k in _RECORD_KEYS if k not in record]
        if missing:
            raise ValueError(f"Work order at index {idx} missing required keys: {missing}")
        orders.append(WorkOrder.from_record(record))  # type: ignore[arg-type]
    return orders


def load_settings(path: str) -> CuttingConfig:
    """Load cutting settings.

    Expects a JSON object with any of the CuttingConfig keys, e.g.:
    {
      "bar_length": 160.0,
      "max_cuts_per_bar": 10,
      "max_bars_per_round": 6,
      "max_time_seconds": 10
    }

    Args:
        path: Path to a JSON settings file.

    Returns:
        Complete CuttingConfig with defaults applied.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is malformed or values are invalid.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Settings file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data: Dict[str, Any] = json.load(f)
        except Exception as e:
            raise ValueError(f"Failed to parse settings JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a JSON object.")
    return resolve_config(data)
