"""CLI entry point for running predictions and managing the local history."""

import argparse
import json
import logging
import sys
from pathlib import Path

from cardio_risk.client.api import build_client
from cardio_risk.errors import CardioRiskError
from cardio_risk.schemas import HistoryFilters, PredictionInput
from cardio_risk.utils.config import load_client_settings


def _predict(client, args) -> int:
    data = PredictionInput.model_validate_json(Path(args.input).read_text())
    result = client.create_prediction(data)
    print(result.model_dump_json(by_alias=True, indent=2))
    return 0


def _history(client, args) -> int:
    filters = HistoryFilters(risk_level=args.risk_level, page=args.page, limit=args.limit)
    page = client.get_prediction_history(filters)
    for r in page.data:
        print(f"{r.id}  {r.created_at:%Y-%m-%d %H:%M}  {r.risk_score:>3}  {r.risk_level}")
    print(f"-- page {page.page}, {len(page.data)} of {page.total}{' (more)' if page.has_more else ''}")
    return 0


def _export(client, args) -> int:
    payload = client.export_history(args.format)
    output = Path(args.output or payload.filename)
    output.write_bytes(payload.content)
    logging.getLogger(__name__).info("Wrote %s (%s)", output, payload.media_type)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run a cardiovascular risk client command."""
    parser = argparse.ArgumentParser(
        description="Cardiovascular risk prediction client."
    )
    parser.add_argument(
        "--config-dir",
        type=str,
        default="configs",
        help="Path to the configuration directory (default: configs)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    predict_parser = subparsers.add_parser("predict", help="Classify an assessment from a JSON file")
    predict_parser.add_argument("input", help="Path to a JSON PredictionInput")
    predict_parser.set_defaults(handler=_predict)

    history_parser = subparsers.add_parser("history", help="List stored predictions")
    history_parser.add_argument("--risk-level", choices=["low", "medium", "high", "all"], default="all")
    history_parser.add_argument("--page", type=int, default=1)
    history_parser.add_argument("--limit", type=int, default=None)
    history_parser.set_defaults(handler=_history)

    export_parser = subparsers.add_parser("export", help="Export the history to a file")
    export_parser.add_argument("--format", choices=["csv", "json"], default="csv")
    export_parser.add_argument("--output", type=str, default=None)
    export_parser.set_defaults(handler=_export)

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger(__name__)

    with build_client(load_client_settings(args.config_dir)) as client:
        try:
            return args.handler(client, args)
        except CardioRiskError as e:
            logger.error("%s failed: %s", args.command, e)
            return 1


if __name__ == "__main__":
    sys.exit(main())
