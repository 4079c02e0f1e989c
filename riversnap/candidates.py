"""
Candidate line reduction and R-tree backed line queries.

The line layer is cut down once to the lines that can possibly be reached
from the point layer, then wrapped in a read-only CandidateIndex that answers
nearest-line and radius queries for every point.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import geopandas as gpd
import numpy as np
from shapely.geometry.base import BaseGeometry

from .similarity import normalize_name

logger = logging.getLogger(__name__)


def _located(gdf: gpd.GeoDataFrame) -> gpd.GeoSeries:
    g = gdf.geometry
    return g[g.notna() & ~g.is_empty]


def drop_unnamed(gdf: gpd.GeoDataFrame, name_column: str) -> gpd.GeoDataFrame:
    """Rows whose name is missing (None / NaN / NA) are removed; order is kept."""
    named = gdf[name_column].map(lambda v: normalize_name(v) is not None).astype(bool)
    return gdf[named]


def reduce_candidates(
    points: gpd.GeoDataFrame,
    lines: gpd.GeoDataFrame,
    search_dist: float,
) -> gpd.GeoDataFrame:
    """
    Keep the lines that intersect the union of all points buffered by search_dist.

    Evaluated as a dwithin query against the line R-tree, which is the exact
    form of "intersects the buffered union" (a polygonal buffer would cut the
    circle's edge and drop lines lying right at search_dist).

    Args:
        points: Point layer
        lines: Line layer
        search_dist: Search radius in the layers' linear unit

    Returns:
        Subset of lines in their original order
    """
    pts = _located(points)
    if pts.empty or lines.empty:
        return lines.iloc[0:0]

    _, tree_idx = lines.sindex.query(pts.values, predicate="dwithin", distance=search_dist)
    keep = np.unique(tree_idx)
    reduced = lines.iloc[keep]
    logger.info(f"Kept {len(reduced)}/{len(lines)} lines within {search_dist:g} of {len(pts)} points")
    return reduced


class CandidateIndex:
    """
    Immutable view over the candidate lines.

    Positions (0..n-1) follow the candidate layer's native order; every query
    that can return several lines returns them in that order, and ties in the
    nearest-line query resolve to the lowest position.
    """

    def __init__(self, lines: gpd.GeoDataFrame, name_column: str, *, casefold: bool = False):
        self.ids = list(lines.index)
        self.geoms = list(lines.geometry)
        self.names = [normalize_name(v, casefold=casefold) for v in lines[name_column]]
        self._sindex = lines.sindex if len(lines) else None

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def empty(self) -> bool:
        return len(self) == 0

    def nearest(self, point: BaseGeometry) -> Optional[Tuple[int, float]]:
        """Position of the closest line and the point-to-line distance, or None if there are no lines."""
        if self._sindex is None:
            return None
        result = self._sindex.nearest(point, return_all=True)
        tree_idx = result[1]
        if len(tree_idx) == 0:
            return None
        pos = int(tree_idx.min())
        return pos, float(self.geoms[pos].distance(point))

    def within(self, point: BaseGeometry, distance: float) -> List[int]:
        """Positions of all lines within distance of point (inclusive), in native order."""
        if self._sindex is None:
            return []
        hits = self._sindex.query(point, predicate="dwithin", distance=distance)
        return sorted(int(i) for i in hits)
