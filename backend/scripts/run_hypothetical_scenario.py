"""
run_hypothetical_scenario.py — Apply a what-if scenario to monthly metrics.

Loads a JSON list of period rows (one per month, e.g.
{"month": "Jan", "Tons": 100, "Product Revenue": "$500.00", ...}), applies
either a predefined scenario or an adjustments JSON file, recomputes every
derived metric, and writes adjusted rows plus the per-period impact.

Example:
    python scripts/run_hypothetical_scenario.py \
        --periods-json data/monthly_metrics.json \
        --scenario economic-downturn \
        --output-json outputs/economic_downturn.json

Adjustments file format:
    {"Jan": [{"metric": "Tons", "type": "percentage", "value": -20}]}
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from metrics_engine.core.errors import MetricsEngineError
from metrics_engine.core.logging import configure_logging, get_logger
from metrics_engine.services.calculation.engine import MetricsEngine
from metrics_engine.services.calculation.types import AdjustmentsByPeriod
from metrics_engine.services.reporting.formatting import format_records_for_display

logger = get_logger(__name__)


def _load_json(path_str: str, what: str):
    path = Path(path_str)
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path_str}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Apply a hypothetical scenario to monthly metrics and report the impact"
    )
    parser.add_argument(
        "--periods-json",
        type=str,
        help="Path to JSON list of period rows",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--scenario",
        type=str,
        help="Id of a predefined scenario (see --list-scenarios)",
    )
    source.add_argument(
        "--adjustments-json",
        type=str,
        help="Path to JSON object mapping period label -> list of adjustments",
    )
    parser.add_argument(
        "--output-json",
        type=str,
        help="Path to output JSON file (default: print to stdout)",
    )
    parser.add_argument(
        "--formatted",
        action="store_true",
        help="Emit display-formatted strings instead of raw numbers",
    )
    parser.add_argument(
        "--list-scenarios",
        action="store_true",
        help="List predefined scenarios and exit",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        engine = MetricsEngine()

        if args.list_scenarios:
            for option in engine.scenarios.scenario_options():
                print(f"{option['id']}: {option['name']}")
            return

        if not args.periods_json:
            parser.error("--periods-json is required unless --list-scenarios is given")

        rows = _load_json(args.periods_json, "Periods")
        if not isinstance(rows, list):
            raise ValueError("Periods JSON must be a list of row objects")
        records = engine.records_from_rows(rows)
        logger.info(f"Loaded {len(records)} period(s) from {args.periods_json}")

        if args.scenario:
            adjusted = engine.apply_scenario(records, args.scenario)
        elif args.adjustments_json:
            raw_adjustments = _load_json(args.adjustments_json, "Adjustments")
            adjustments = TypeAdapter(AdjustmentsByPeriod).validate_python(raw_adjustments)
            adjusted = engine.apply_adjustments(records, adjustments)
        else:
            adjusted = engine.recalculate(records)

        impacts = engine.period_impacts(records, adjusted)
        label_key = engine.settings.PERIOD_LABEL_KEY
        metric_names = engine.catalog.all_metric_names()

        if args.formatted:
            periods_out = format_records_for_display(adjusted, metric_names, label_key=label_key)
        else:
            periods_out = [record.to_mapping(label_key) for record in adjusted]

        output = {
            "scenario": args.scenario,
            "periods": periods_out,
            "impact": {
                label: {name: item.to_dict() for name, item in per_metric.items()}
                for label, per_metric in impacts.items()
            },
        }

        if args.output_json:
            output_path = Path(args.output_json)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open("w", encoding="utf-8") as f:
                json.dump(output, f, indent=2, ensure_ascii=False)
            print(f"Successfully wrote {len(adjusted)} adjusted period(s) to {args.output_json}")
        else:
            print(json.dumps(output, indent=2, ensure_ascii=False))

    except (FileNotFoundError, ValidationError, MetricsEngineError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
