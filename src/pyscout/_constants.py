"""Internal constants shared across the library."""

#: Name of the durable slot holding the serialized snapshot.
STORAGE_KEY = "frc-scout-data"
USER_AGENT = "pyscout"

DEFAULT_REQUEST_TIMEOUT: float = 15.0

# ------------------------------------------------------------------
# Match form defaults
# ------------------------------------------------------------------

#: Letter grades offered for LETTER_GRADE fields, best first.
GRADES: tuple[str, ...] = ("S", "A", "B", "C", "D", "E", "F")
DEFAULT_GRADE = "C"

#: Counter upper bound used when a NUMERIC_COUNTER field declares no max.
DEFAULT_COUNTER_MAX = 99

#: Radar "full mark" used when a numeric field declares no max.
DEFAULT_FULL_MARK = 10

# ------------------------------------------------------------------
# Aggregation limits
# ------------------------------------------------------------------

MAX_COMPARISON_SUBJECTS = 8
RECENT_ACTIVITY_LIMIT = 10
