# qa.py
from typing import Dict, List, Tuple

import geopandas as gpd
import pandas as pd

from .config import DISTANCE_COLUMN, MATCH_COLUMN
from .schema import MATCH_VALUES
from .similarity import normalize_name


def summarize_matches(result: gpd.GeoDataFrame) -> Dict[str, float]:
    """Outcome counts and distance statistics for a matched point layer."""
    counts = result[MATCH_COLUMN].value_counts()
    dist = result[DISTANCE_COLUMN]
    summary = {
        "points": int(len(result)),
        "true": int(counts.get("TRUE", 0)),
        "maybe": int(counts.get("MAYBE", 0)),
        "false": int(counts.get("FALSE", 0)),
        "no_distance": int(dist.isna().sum()),
    }
    known = dist.dropna()
    if not known.empty:
        summary["distance_median"] = float(known.median())
        summary["distance_max"] = float(known.max())
    return summary


def acceptance(
    points: gpd.GeoDataFrame, result: gpd.GeoDataFrame, name_column: str
) -> Tuple[bool, List[str]]:
    """
    Check a matched layer against its input.

    - one output row per input point, same index
    - match values are TRUE / MAYBE / FALSE only
    - geometry differs from the input only on TRUE rows
    - rows without a name are FALSE with no distance
    - distances are non-negative

    Returns:
        Tuple of (is_valid, list_of_problems)
    """
    problems: List[str] = []

    if len(result) != len(points) or not result.index.equals(points.index):
        problems.append(f"Cardinality/index mismatch: {len(points)} points in, {len(result)} rows out")
        return False, problems

    bad_values = set(result[MATCH_COLUMN].unique()) - MATCH_VALUES
    if bad_values:
        problems.append(f"Unexpected match values: {sorted(map(str, bad_values))}")

    before, after = points.geometry, result.geometry
    located = before.notna() & ~before.is_empty & after.notna()
    moved = located & ~after.geom_equals(before)
    moved_not_true = moved & (result[MATCH_COLUMN] != "TRUE")
    if moved_not_true.any():
        problems.append(f"{int(moved_not_true.sum())} non-TRUE rows have modified geometry")

    unnamed = points[name_column].map(lambda v: normalize_name(v) is None).astype(bool)
    if unnamed.any():
        sub = result[unnamed]
        if (sub[MATCH_COLUMN] != "FALSE").any():
            problems.append("Rows without a name were not classified FALSE")
        if sub[DISTANCE_COLUMN].notna().any():
            problems.append("Rows without a name carry a distance")

    dist = pd.to_numeric(result[DISTANCE_COLUMN], errors="coerce")
    if (dist < 0).any():
        problems.append(f"{int((dist < 0).sum())} negative distances")

    return not problems, problems
