# --------------------------- Command-line entry point ---------------------------
import argparse
import json
import logging
import sys

from cut_errors import SolverFailure
from cut_optimizer import plan_cuts
from data_loader import load_settings, load_work_orders
from input_validations import resolve_config, screen_work_orders
from reporting import markdown_all_tables, plan_to_json
from solver import SOLVER_NAMES, make_solver

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute minimal-bar cutting rounds for work orders")
    parser.add_argument("--orders-file", required=True, help="Path to work orders JSON file")
    parser.add_argument("--settings-file", help="Path to settings JSON file (defaults apply when omitted)")
    parser.add_argument("--solver", choices=SOLVER_NAMES, default="cp-sat", help="Solver backend")
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON instead of Markdown")
    parser.add_argument("--skip-invalid", action="store_true",
                        help="Drop invalid work orders and report them instead of failing")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        orders = load_work_orders(args.orders_file)
        config = load_settings(args.settings_file) if args.settings_file else resolve_config()
        rejected = []
        if args.skip_invalid:
            orders, rejected = screen_work_orders(orders)
            for row in rejected:
                logger.warning("skipping work order %r: %s", row["workOrder"], row["reason"])
        result = plan_cuts(orders, config, make_solver(args.solver, config))
    except (FileNotFoundError, ValueError, SolverFailure) as exc:
        logger.error("%s", exc)
        return 1

    if args.json:
        print(json.dumps(plan_to_json(result, rejected), indent=2))
    else:
        print(markdown_all_tables(result, rejected))
    return 0


if __name__ == "__main__":
    sys.exit(main())
