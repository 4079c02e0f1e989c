# Name similarity thresholds (fixed, not per-call)
TRUE_THRESHOLD = 0.90
MAYBE_THRESHOLD = 0.70

# Output columns added to the point layer
MATCH_COLUMN = "match"
DISTANCE_COLUMN = "distance_to_nearest"
LINE_ID_COLUMN = "matched_line"

DEFAULT_NAME_COLUMN = "name"

# Fallback scan policy: "first" qualifying line in native order, or "best" scoring
FALLBACK_POLICIES = ("first", "best")
DEFAULT_FALLBACK_POLICY = "first"

POINT_GEOM_TYPES = ("Point",)
LINE_GEOM_TYPES = ("LineString", "MultiLineString")
