"""
Error taxonomy for point/line matching.

Configuration problems abort a run before any geometric work. The two warning
categories mark per-run or per-point soft conditions; the affected records are
still emitted.
"""


class ConfigurationError(ValueError):
    """Inputs or options are unusable (missing name column, bad search distance, CRS mismatch)."""


class DegenerateGeometryWarning(UserWarning):
    """A TRUE match could not be snapped because the projection onto its line was empty."""


class EmptyCandidateCondition(UserWarning):
    """No line survived the spatial reduction; every named point resolves to FALSE."""
