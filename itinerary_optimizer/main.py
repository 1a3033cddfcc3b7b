"""
main.py
--------
Command-line entry point: optimize one trip request stored as JSON.

Run:
  python -m itinerary_optimizer request.json
  python -m itinerary_optimizer request.json --strategy TIME --out itinerary.json

The request file follows schemas/payload.py (TripOptimizationPayload). The
itinerary is printed as JSON; the exit status is 1 when any day failed or the
request was rejected.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from itinerary_optimizer.modules.planning.route_planner import RoutePlanner
from itinerary_optimizer.schemas.payload import TripOptimizationPayload
from itinerary_optimizer.schemas.places import OptimizationStrategy
from itinerary_optimizer.serialization import serialize_itinerary

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="itinerary_optimizer",
        description="Optimize a multi-day itinerary from a JSON request.",
    )
    parser.add_argument("request", type=Path, help="path to the request JSON file")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in OptimizationStrategy],
        help="override the request's optimization strategy",
    )
    parser.add_argument("--seed", type=int, help="override the clustering random seed")
    parser.add_argument("--out", type=Path, help="write the itinerary here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        raw = json.loads(args.request.read_text(encoding="utf-8"))
        payload = TripOptimizationPayload.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("ERROR_INVALID_REQUEST: %s: %s", args.request, exc)
        return 2

    request = payload.to_request()
    if args.strategy:
        request.strategy = OptimizationStrategy(args.strategy)
    if args.seed is not None:
        request.random_seed = args.seed

    itinerary = RoutePlanner().optimize(request)
    text = json.dumps(serialize_itinerary(itinerary), ensure_ascii=False, indent=2)

    if args.out:
        args.out.write_text(text + "\n", encoding="utf-8")
        logger.info("Itinerary written to %s", args.out)
    else:
        print(text)

    return 0 if itinerary.success else 1


if __name__ == "__main__":
    sys.exit(main())
