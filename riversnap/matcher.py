from __future__ import annotations

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Tuple

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from tqdm import tqdm

from . import config
from .candidates import CandidateIndex, drop_unnamed, reduce_candidates
from .errors import DegenerateGeometryWarning, EmptyCandidateCondition
from .fallback import fallback_search
from .schema import UNCOMPARED, MatchOutcome, MatchRecord, validate_inputs
from .similarity import normalize_name, score_names
from .snap import snap_to_line

logger = logging.getLogger(__name__)


class PointLineMatcher:
    """
    Match named points to named lines and snap confirmed matches onto their line.

    Per point: score the nearest candidate line's name; a FALSE result triggers
    a fallback scan of every candidate within search_dist; a TRUE result
    (initial or from fallback) moves the point onto the matched line.
    Points without a name are never compared and come out FALSE with no distance.
    """

    def __init__(
        self,
        points: gpd.GeoDataFrame,
        lines: gpd.GeoDataFrame,
        name_column: str,
        search_dist: float,
        *,
        fallback_policy: str = config.DEFAULT_FALLBACK_POLICY,
        casefold: bool = False,
        max_workers: Optional[int] = None,
        progress: bool = False,
    ):
        self.search_dist = validate_inputs(points, lines, name_column, search_dist, fallback_policy)
        self.points = points
        self.lines = lines
        self.name_column = name_column
        self.fallback_policy = fallback_policy
        self.casefold = casefold
        self.max_workers = max_workers
        self.progress = progress

        self._index: Optional[CandidateIndex] = None
        self._records: Optional[List[MatchRecord]] = None
        self._snapped: Optional[List[Optional[Point]]] = None
        self._pending: List[Tuple[str, type]] = []

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _point_names(self) -> List[Optional[str]]:
        return [normalize_name(v, casefold=self.casefold) for v in self.points[self.name_column]]

    def build_index(self) -> CandidateIndex:
        """Reduce the named lines to the search region and index them. Built once per matcher."""
        if self._index is None:
            named_lines = drop_unnamed(self.lines, self.name_column)
            named_points = drop_unnamed(self.points, self.name_column)
            candidates = reduce_candidates(named_points, named_lines, self.search_dist)
            self._index = CandidateIndex(candidates, self.name_column, casefold=self.casefold)
        return self._index

    def match_point(
        self, name: Optional[str], point: Optional[BaseGeometry]
    ) -> Tuple[MatchRecord, Optional[Point]]:
        """
        Full pipeline for a single point.

        Returns:
            (record, snapped geometry or None)
        """
        if name is None or point is None or point.is_empty:
            return UNCOMPARED, None

        index = self.build_index()
        nearest = index.nearest(point)
        if nearest is None:
            return UNCOMPARED, None
        pos, distance = nearest
        similarity, outcome = score_names(name, index.names[pos])

        via_fallback = False
        if outcome is MatchOutcome.FALSE_MATCH:
            hit = fallback_search(name, point, index, self.search_dist, self.fallback_policy)
            if hit is not None:
                pos, distance, similarity = hit
                outcome = MatchOutcome.TRUE_MATCH
                via_fallback = True

        snapped = None
        if outcome is MatchOutcome.TRUE_MATCH:
            snapped = snap_to_line(point, index.geoms[pos])

        record = MatchRecord(
            outcome=outcome,
            distance=distance,
            line_id=index.ids[pos],
            similarity=similarity,
            via_fallback=via_fallback,
            snapped=snapped is not None,
        )
        return record, snapped

    def _evaluate(self) -> None:
        n = len(self.points)
        names = self._point_names()
        geoms = list(self.points.geometry)

        # pre-sized; each task writes only its own slot
        records: List[MatchRecord] = [UNCOMPARED] * n
        snapped: List[Optional[Point]] = [None] * n

        work = [i for i in range(n) if names[i] is not None]
        logger.info(f"Matching {len(work)} named points ({n - len(work)} without a name)")
        unlocated = sum(1 for i in work if geoms[i] is None or geoms[i].is_empty)
        if unlocated:
            logger.warning(f"{unlocated} named points have no geometry; they will be FALSE")

        index = self.build_index()
        if index.empty:
            if work:
                self._pending.append((
                    f"No named line lies within {self.search_dist:g} of any point; all points are FALSE",
                    EmptyCandidateCondition,
                ))
            work = []

        bar = tqdm(total=len(work), desc="[match] points", unit="pt", disable=not self.progress)
        if self.max_workers is None or self.max_workers <= 1:
            for i in work:
                records[i], snapped[i] = self.match_point(names[i], geoms[i])
                bar.update(1)
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, max(1, len(work)))) as ex:
                futures = {ex.submit(self.match_point, names[i], geoms[i]): i for i in work}
                for fut in as_completed(futures):
                    i = futures[fut]
                    records[i], snapped[i] = fut.result()
                    bar.update(1)
        bar.close()

        for r in records:
            if r.outcome is MatchOutcome.TRUE_MATCH and not r.snapped:
                self._pending.append((
                    f"Could not project point onto line {r.line_id!r}; keeping original geometry",
                    DegenerateGeometryWarning,
                ))

        self._records = records
        self._snapped = snapped

        counts = {o.value: sum(1 for r in records if r.outcome is o) for o in MatchOutcome}
        n_fallback = sum(1 for r in records if r.via_fallback)
        n_snapped = sum(1 for r in records if r.snapped)
        logger.info(
            f"Match results: TRUE={counts['TRUE']} MAYBE={counts['MAYBE']} FALSE={counts['FALSE']} "
            f"(fallback upgrades={n_fallback}, snapped={n_snapped})"
        )

    def _flush_warnings(self, stacklevel: int) -> None:
        # stacklevel counts from the caller of _flush_warnings
        for message, category in self._pending:
            warnings.warn(message, category, stacklevel=stacklevel + 1)
        self._pending = []

    def _output(self, include_line_id: bool) -> gpd.GeoDataFrame:
        if self._records is None:
            self._evaluate()
        records = self._records
        out = self.points.copy()

        geom_col = out.geometry.name
        new_geoms = [
            s if s is not None else g
            for g, s in zip(out.geometry, self._snapped)
        ]
        out[geom_col] = gpd.GeoSeries(new_geoms, index=out.index, crs=out.crs)

        out[config.MATCH_COLUMN] = [r.outcome.value for r in records]
        out[config.DISTANCE_COLUMN] = np.array(
            [np.nan if r.distance is None else r.distance for r in records], dtype=float
        )
        if include_line_id:
            out[config.LINE_ID_COLUMN] = pd.Series([r.line_id for r in records], index=out.index, dtype=object)
        return out

    # -----------------------------
    # Public API
    # -----------------------------
    def records(self) -> List[MatchRecord]:
        """One MatchRecord per input point, in input order."""
        if self._records is None:
            self._evaluate()
        self._flush_warnings(stacklevel=2)
        return list(self._records)

    def run(self, include_line_id: bool = False) -> gpd.GeoDataFrame:
        """
        Copy of the point layer with match and distance_to_nearest added and
        TRUE matches moved onto their line. Index, row order and all other
        attributes are those of the input.
        """
        out = self._output(include_line_id)
        self._flush_warnings(stacklevel=2)
        return out


def match_points_to_lines(
    points: gpd.GeoDataFrame,
    lines: gpd.GeoDataFrame,
    name_column: str,
    search_dist: float,
    *,
    fallback_policy: str = config.DEFAULT_FALLBACK_POLICY,
    casefold: bool = False,
    max_workers: Optional[int] = None,
    progress: bool = False,
    include_line_id: bool = False,
) -> gpd.GeoDataFrame:
    """
    Match points to lines by name and snap TRUE matches.

    Args:
        points: Point layer with a name column
        lines: Line layer with the same name column, same CRS
        name_column: Attribute compared between the two layers
        search_dist: Radius (layer linear unit) bounding candidate lines and the fallback scan
        fallback_policy: "first" (default) or "best"
        casefold: Use Unicode case folding instead of lower-casing
        max_workers: Thread count for per-point matching; None runs sequentially
        progress: Show a tqdm progress bar
        include_line_id: Also add the matched line's index label as matched_line

    Returns:
        GeoDataFrame with the points' rows plus match and distance_to_nearest

    Raises:
        ConfigurationError: if the name column is missing, the CRS differ, or
            search_dist / fallback_policy are invalid
    """
    matcher = PointLineMatcher(
        points,
        lines,
        name_column,
        search_dist,
        fallback_policy=fallback_policy,
        casefold=casefold,
        max_workers=max_workers,
        progress=progress,
    )
    out = matcher._output(include_line_id)
    matcher._flush_warnings(stacklevel=2)
    return out
