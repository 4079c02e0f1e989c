"""
Match Record Schema

Defines the per-point match outcome and the checks applied to the point and
line layers before any geometric work begins.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Optional

import geopandas as gpd

from .config import FALLBACK_POLICIES, LINE_GEOM_TYPES, POINT_GEOM_TYPES
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class MatchOutcome(str, Enum):
    TRUE_MATCH = "TRUE"
    MAYBE_MATCH = "MAYBE"
    FALSE_MATCH = "FALSE"


MATCH_VALUES = frozenset(o.value for o in MatchOutcome)


@dataclass(frozen=True)
class MatchRecord:
    """
    Result for a single input point.

    distance is the distance to line_id, the line finally recorded as matched
    (the nearest line, or the fallback line when one was accepted). Both are
    None for points that were never compared.
    """
    outcome: MatchOutcome
    distance: Optional[float] = None
    line_id: Optional[Hashable] = None
    similarity: Optional[float] = None
    via_fallback: bool = False
    snapped: bool = False


UNCOMPARED = MatchRecord(MatchOutcome.FALSE_MATCH)


def validate_name_column(gdf: gpd.GeoDataFrame, name_column: str, label: str) -> None:
    """
    Raise ConfigurationError if name_column is absent from gdf.

    Args:
        gdf: Layer to check
        name_column: Attribute carrying the feature name
        label: Human-readable layer name for the error message
    """
    if name_column not in gdf.columns:
        raise ConfigurationError(
            f"Column {name_column!r} not found in the {label} layer. "
            f"Found columns: {sorted(map(str, gdf.columns))}"
        )


def validate_geometry_types(gdf: gpd.GeoDataFrame, allowed: tuple, label: str) -> None:
    """Raise ConfigurationError if any non-empty geometry has a type outside allowed."""
    g = gdf.geometry
    g = g[g.notna() & ~g.is_empty]
    bad = sorted(set(g.geom_type) - set(allowed))
    if bad:
        raise ConfigurationError(
            f"The {label} layer contains unsupported geometry types {bad}; expected {list(allowed)}"
        )


def validate_search_dist(search_dist) -> float:
    try:
        value = float(search_dist)
    except (TypeError, ValueError):
        raise ConfigurationError(f"search distance must be a number, got {search_dist!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"search distance must be positive and finite, got {search_dist!r}")
    return value


def validate_inputs(
    points: gpd.GeoDataFrame,
    lines: gpd.GeoDataFrame,
    name_column: str,
    search_dist,
    fallback_policy: str,
) -> float:
    """
    Boundary checks for a matching run. Nothing geometric happens before these pass.

    Returns:
        The search distance as a float

    Raises:
        ConfigurationError: on any structural problem with the inputs
    """
    for gdf, label in ((points, "point"), (lines, "line")):
        if not isinstance(gdf, gpd.GeoDataFrame):
            raise ConfigurationError(f"The {label} layer must be a GeoDataFrame, got {type(gdf).__name__}")
        validate_name_column(gdf, name_column, label)

    validate_geometry_types(points, POINT_GEOM_TYPES, "point")
    validate_geometry_types(lines, LINE_GEOM_TYPES, "line")

    if points.crs is not None and lines.crs is not None and points.crs != lines.crs:
        raise ConfigurationError(
            f"Point and line layers use different CRS ({points.crs} vs {lines.crs}); "
            "reproject one of them before matching"
        )
    crs = points.crs or lines.crs
    if crs is not None and crs.is_geographic:
        logger.warning(f"CRS {crs} is geographic; search distance and distances are in degrees")

    if fallback_policy not in FALLBACK_POLICIES:
        raise ConfigurationError(
            f"Unknown fallback policy {fallback_policy!r}; expected one of {FALLBACK_POLICIES}"
        )

    return validate_search_dist(search_dist)
