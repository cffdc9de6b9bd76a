"""
Command-line driver: rank counties by unemployment claims and write the
per-county reports, charts and the state map.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import CLAIMS_SOURCE, LABORFORCE_SOURCE
from .data_manager import write_artifacts
from .errors import PipelineError
from .geography import load_county_geojson
from .pipeline import run_pipeline

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rank counties by unemployment claims as a share of labor force."
    )
    parser.add_argument("--claims", default=CLAIMS_SOURCE, help="Weekly claims CSV.")
    parser.add_argument(
        "--laborforce", default=LABORFORCE_SOURCE, help="Labor-force estimates CSV."
    )
    parser.add_argument(
        "--period", default=None, help="Labor-force period to use (default: latest)."
    )
    parser.add_argument(
        "--shapefile",
        default=None,
        help="County boundary file for the state map; map is skipped if omitted.",
    )
    parser.add_argument(
        "--period-label",
        default="over the reporting period",
        help='Phrase for the report headline, e.g. "since March 14".',
    )
    parser.add_argument("--out", default=None, help="Output directory.")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = run_pipeline(
            claims_source=args.claims,
            laborforce_source=args.laborforce,
            period=args.period,
        )
        geojson = load_county_geojson(args.shapefile) if args.shapefile else None
        paths = write_artifacts(
            payload, args.out, geojson=geojson, period_label=args.period_label
        )
    except PipelineError as exc:
        logger.error("Pipeline aborted: %s", exc)
        return 1

    for name, path in paths.items():
        logger.info("%s -> %s", name, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
