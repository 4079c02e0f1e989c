"""
Point Snapping to Matched Lines

Replaces a point with its orthogonal projection onto the line it was matched to.
"""
from __future__ import annotations

import math
from typing import Optional

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.ops import nearest_points


def snap_to_line(point: Optional[BaseGeometry], line: Optional[BaseGeometry]) -> Optional[Point]:
    """
    Closest point on line to point.

    Returns:
        The projected Point, or None when either input is null/empty or the
        projection is degenerate (empty or non-finite coordinates)
    """
    if point is None or line is None or point.is_empty or line.is_empty:
        return None
    snapped = nearest_points(point, line)[1]
    if snapped.is_empty:
        return None
    if not all(math.isfinite(c) for c in snapped.coords[0]):
        return None
    return snapped
