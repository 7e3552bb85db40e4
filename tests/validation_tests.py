import unittest
from decimal import Decimal
from typing import List

from cut_errors import InvalidConfig, InvalidWorkOrder
from datatypes import WorkOrder
from input_validations import (
	DEFAULT_CONFIG,
	resolve_config,
	screen_work_orders,
	validate_work_order,
	validate_work_orders,
)


def _valid_orders() -> List[WorkOrder]:
	"""Return a baseline list of valid work orders."""
	return [
		WorkOrder(work_order="WO1", job="Job", cuts=5, length=20, material="Stainless Steel"),
		WorkOrder(work_order="WO2", job="Stock", cuts=3, length="45.5", material="Carbon Steel"),
	]


def _with(order: WorkOrder, **changes) -> WorkOrder:
	fields = dict(work_order=order.work_order, job=order.job, cuts=order.cuts,
	              length=order.length, material=order.material)
	fields.update(changes)
	return WorkOrder(**fields)


class TestWorkOrderValidation(unittest.TestCase):
	def test_valid_orders_pass(self) -> None:
		# Should not raise
		validate_work_orders(_valid_orders())

	def test_integral_float_cuts_accepted(self) -> None:
		validate_work_order(_with(_valid_orders()[0], cuts=5.0))

	def test_bad_fields_are_named(self) -> None:
		base = _valid_orders()[0]
		cases = [
			({"cuts": 0}, "cuts"),
			({"cuts": -2}, "cuts"),
			({"cuts": 2.5}, "cuts"),
			({"cuts": True}, "cuts"),
			({"length": 0}, "length"),
			({"length": -1.5}, "length"),
			({"length": "abc"}, "length"),
			({"length": "0.0001"}, "length"),
			({"job": "Urgent"}, "job"),
			({"material": "  "}, "material"),
			({"work_order": ""}, "workOrder"),
		]
		for changes, field in cases:
			with self.subTest(changes=changes):
				with self.assertRaises(InvalidWorkOrder) as ctx:
					validate_work_order(_with(base, **changes), index=3)
				self.assertEqual(ctx.exception.field, field)
				self.assertEqual(ctx.exception.index, 3)

	def test_order_id_in_message(self) -> None:
		with self.assertRaises(InvalidWorkOrder) as ctx:
			validate_work_order(_with(_valid_orders()[0], cuts=0))
		self.assertEqual(ctx.exception.order_id, "WO1")
		self.assertIn("WO1", str(ctx.exception))

	def test_fails_on_first_invalid(self) -> None:
		orders = _valid_orders()
		orders.insert(1, _with(orders[0], work_order="BAD", cuts=-1))
		with self.assertRaises(InvalidWorkOrder) as ctx:
			validate_work_orders(orders)
		self.assertEqual(ctx.exception.index, 1)

	def test_non_list_rejected(self) -> None:
		with self.assertRaises(InvalidWorkOrder):
			validate_work_orders("WO1")  # type: ignore[arg-type]

	def test_non_work_order_element(self) -> None:
		with self.assertRaises(InvalidWorkOrder):
			validate_work_orders([{"workOrder": "WO1"}])  # type: ignore[list-item]

	def test_screen_keeps_valid_and_reports_rest(self) -> None:
		orders = _valid_orders()
		orders.append(_with(orders[0], work_order="WO3", length=-5))
		valid, rejected = screen_work_orders(orders)
		self.assertEqual([o.work_order for o in valid], ["WO1", "WO2"])
		self.assertEqual(len(rejected), 1)
		self.assertEqual(rejected[0]["order_index"], 2)
		self.assertEqual(rejected[0]["workOrder"], "WO3")
		self.assertEqual(rejected[0]["field"], "length")


class TestResolveConfig(unittest.TestCase):
	def test_defaults(self) -> None:
		cfg = resolve_config()
		self.assertEqual(cfg, DEFAULT_CONFIG)
		self.assertEqual(cfg["bar_length"], 160.0)
		self.assertEqual(cfg["max_cuts_per_bar"], 10)
		self.assertEqual(cfg["max_bars_per_round"], 6)

	def test_aliases(self) -> None:
		cfg = resolve_config({"barLength": 240, "maxCutsPerBar": 4, "maxBarsPerRound": 3})
		self.assertEqual(cfg["bar_length"], 240)
		self.assertEqual(cfg["max_cuts_per_bar"], 4)
		self.assertEqual(cfg["max_bars_per_round"], 3)

	def test_integral_floats_become_ints(self) -> None:
		cfg = resolve_config({"max_bars_per_round": 4.0})
		self.assertEqual(cfg["max_bars_per_round"], 4)
		self.assertIsInstance(cfg["max_bars_per_round"], int)

	def test_bar_length_is_normalized_to_float(self) -> None:
		for given in ("160", 160, Decimal("160.000"), "  240.5 "):
			with self.subTest(given=given):
				cfg = resolve_config({"bar_length": given})
				self.assertIsInstance(cfg["bar_length"], float)
		self.assertEqual(resolve_config({"bar_length": "160"})["bar_length"], 160.0)
		self.assertEqual(resolve_config({"barLength": "  240.5 "})["bar_length"], 240.5)

	def test_finite_budgets_are_floats(self) -> None:
		cfg = resolve_config({"max_time_seconds": 12, "tie_break_deterministic_time": 2})
		self.assertEqual(cfg["max_time_seconds"], 12.0)
		self.assertIsInstance(cfg["max_time_seconds"], float)
		self.assertIsInstance(cfg["tie_break_deterministic_time"], float)

	def test_does_not_mutate_defaults(self) -> None:
		resolve_config({"bar_length": 99})
		self.assertEqual(DEFAULT_CONFIG["bar_length"], 160.0)

	def test_invalid_values(self) -> None:
		cases = [
			{"bar_length": 0},
			{"bar_length": -10},
			{"bar_length": None},
			{"bar_length": "long"},
			{"max_cuts_per_bar": 0},
			{"max_bars_per_round": 1.5},
			{"num_search_workers": 0},
			{"max_time_seconds": 0},
			{"max_time_seconds": True},
			{"max_time_seconds": float("inf")},
			{"max_time_seconds": float("-inf")},
			{"max_time_seconds": float("nan")},
			{"max_time_seconds": "30"},
			{"tie_break_deterministic_time": 0},
			{"tie_break_deterministic_time": float("inf")},
			{"tie_break_deterministic_time": float("nan")},
			{"tie_break_node_limit": 0},
			{"accept_unproven": 1},
			{"random_seed": "x"},
			{"log_search_progress": "yes"},
		]
		for payload in cases:
			with self.subTest(payload=payload):
				with self.assertRaises(InvalidConfig):
					resolve_config(payload)

	def test_unknown_and_duplicate_keys(self) -> None:
		with self.assertRaises(InvalidConfig) as ctx:
			resolve_config({"bar_lenght": 100})
		self.assertEqual(ctx.exception.field, "bar_lenght")
		with self.assertRaises(InvalidConfig):
			resolve_config({"bar_length": 100, "barLength": 100})

	def test_invalid_config_is_invalid_work_order(self) -> None:
		with self.assertRaises(InvalidWorkOrder):
			resolve_config({"bar_length": 0})


if __name__ == "__main__":
	unittest.main()
