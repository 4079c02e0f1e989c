import argparse
import logging
import os
import sys
from typing import Sequence

import geopandas as gpd

from . import config
from .errors import ConfigurationError
from .matcher import match_points_to_lines
from .qa import acceptance, summarize_matches

logger = logging.getLogger("riversnap.cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Match named points to named lines and snap confirmed matches onto their line"
    )
    ap.add_argument("points", help="Point layer (any format geopandas can read)")
    ap.add_argument("lines", help="Line layer in the same CRS as the points")
    ap.add_argument(
        "--out",
        required=True,
        help="Output path for the matched point layer (driver inferred from extension)",
    )
    ap.add_argument(
        "--name-column",
        default=config.DEFAULT_NAME_COLUMN,
        help=f"Name attribute present in both layers (default: {config.DEFAULT_NAME_COLUMN})",
    )
    ap.add_argument(
        "--search-dist",
        type=float,
        required=True,
        help="Search radius in the layers' linear unit",
    )
    ap.add_argument(
        "--fallback-policy",
        choices=config.FALLBACK_POLICIES,
        default=config.DEFAULT_FALLBACK_POLICY,
        help="Fallback scan: first qualifying line in layer order, or best scoring",
    )
    ap.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Thread count for per-point matching (default: sequential)",
    )
    ap.add_argument(
        "--casefold",
        action="store_true",
        help="Compare names with Unicode case folding instead of lower-casing",
    )
    ap.add_argument(
        "--include-line-id",
        action="store_true",
        help=f"Add the matched line's id as '{config.LINE_ID_COLUMN}'",
    )
    ap.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    return ap


def run_cli(args: argparse.Namespace) -> int:
    for path in (args.points, args.lines):
        if not os.path.exists(path):
            logger.error(f"Input not found: {path}")
            return 1

    points = gpd.read_file(args.points)
    lines = gpd.read_file(args.lines)
    logger.info(f"Loaded {len(points)} points and {len(lines)} lines")

    try:
        result = match_points_to_lines(
            points,
            lines,
            args.name_column,
            args.search_dist,
            fallback_policy=args.fallback_policy,
            casefold=args.casefold,
            max_workers=args.workers,
            progress=True,
            include_line_id=args.include_line_id,
        )
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return 130  # 128 + SIGINT

    ok, problems = acceptance(points, result, args.name_column)
    if not ok:
        for p in problems:
            logger.warning(f"[QA] {p}")
    logger.info(f"[QA] {summarize_matches(result)}")

    if args.include_line_id:
        # line ids can be of any index type; drivers need one field type
        result[config.LINE_ID_COLUMN] = result[config.LINE_ID_COLUMN].map(
            lambda v: None if v is None else str(v)
        )

    out_dir = os.path.dirname(args.out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    result.to_file(args.out)
    logger.info(f"Wrote {len(result)} rows to {args.out}")
    return 0


def main(argv: Sequence[str] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))
    return run_cli(args)


if __name__ == "__main__":
    sys.exit(main())
