"""
Fallback search for points whose nearest line fails the name test.

Only points classified FALSE against their nearest line are rescanned. The
scan looks at every candidate line within the search distance and accepts a
line only at the TRUE threshold; MAYBE-level similarity is never enough here.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from shapely.geometry.base import BaseGeometry

from .candidates import CandidateIndex
from .config import TRUE_THRESHOLD
from .similarity import name_similarity


class FallbackHit(NamedTuple):
    position: int
    distance: float
    similarity: float


def fallback_search(
    name: str,
    point: BaseGeometry,
    index: CandidateIndex,
    search_dist: float,
    policy: str = "first",
) -> Optional[FallbackHit]:
    """
    Find a same-named line within search_dist of point.

    policy="first" stops at the first qualifying line in the candidate layer's
    native order; this is the default and is order dependent on purpose.
    policy="best" takes the highest similarity instead, ties going to the
    earlier line.

    Returns:
        The accepted line, or None if nothing within search_dist qualifies
    """
    best: Optional[FallbackHit] = None
    for pos in index.within(point, search_dist):
        other = index.names[pos]
        if other is None:
            continue
        similarity = name_similarity(name, other)
        if similarity is None or similarity < TRUE_THRESHOLD:
            continue
        if best is not None and similarity <= best.similarity:
            continue
        best = FallbackHit(pos, float(index.geoms[pos].distance(point)), similarity)
        if policy == "first":
            break
    return best
