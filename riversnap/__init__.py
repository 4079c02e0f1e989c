from .matcher import PointLineMatcher, match_points_to_lines
from .schema import MatchOutcome, MatchRecord
from .errors import ConfigurationError, DegenerateGeometryWarning, EmptyCandidateCondition

__all__ = [
    "PointLineMatcher",
    "match_points_to_lines",
    "MatchOutcome",
    "MatchRecord",
    "ConfigurationError",
    "DegenerateGeometryWarning",
    "EmptyCandidateCondition",
]

# -------------------------
# riversnap File structure
# -------------------------
# config.py: constants & defaults (thresholds, output columns).
# errors.py: configuration error + non-fatal warning categories.
# schema.py: MatchOutcome / MatchRecord and boundary validation.
# similarity.py: name normalization + edit-distance scoring.
# candidates.py: spatial reduction of the line set, R-tree backed nearest/radius queries.
# fallback.py: radius-bounded rescan for points whose nearest line fails the name test.
# snap.py: projection of a point onto its matched line.
# matcher.py: orchestration.
# qa.py: run summary and acceptance checks.
# cli.py: argparse entrypoint.
