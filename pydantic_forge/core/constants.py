"""Default bounds used when a schema or factory leaves a dimension open."""

from __future__ import annotations

from typing import Final

# Generation stops once the current depth reaches this value, so the
# default produces levels 0 through 4.
DEFAULT_MAX_DEPTH: Final = 5

NUMBER_DEFAULT_MIN: Final = -1000
NUMBER_DEFAULT_MAX: Final = 1000
NUMBER_DEFAULT_SPAN: Final = 1000
EXCLUSIVE_BOUND_EPSILON: Final = 0.000_001

DECIMAL_DEFAULT_PLACES: Final = 2

ARRAY_DEFAULT_MIN: Final = 1
ARRAY_DEFAULT_MAX: Final = 5
ARRAY_MIN_ONLY_EXTRA: Final = 5
SET_DEFAULT_MIN: Final = 1
SET_DEFAULT_MAX: Final = 5
RECORD_DEFAULT_MIN: Final = 1
RECORD_DEFAULT_MAX: Final = 3
TUPLE_REST_MIN: Final = 0
TUPLE_REST_MAX: Final = 3

STRING_DEFAULT_MIN: Final = 5
STRING_DEFAULT_MAX: Final = 20
STRING_MIN_ONLY_EXTRA: Final = 10
STRING_PLACEHOLDER: Final = "placeholder"

OPTIONAL_PRESENT_PROBABILITY: Final = 0.7
NULLABLE_PRESENT_PROBABILITY: Final = 0.8

# Unique-value containers retry draws a bounded number of times per slot.
UNIQUE_DRAW_ATTEMPTS: Final = 10


__all__ = [
    "ARRAY_DEFAULT_MAX",
    "ARRAY_DEFAULT_MIN",
    "ARRAY_MIN_ONLY_EXTRA",
    "DECIMAL_DEFAULT_PLACES",
    "DEFAULT_MAX_DEPTH",
    "EXCLUSIVE_BOUND_EPSILON",
    "NULLABLE_PRESENT_PROBABILITY",
    "NUMBER_DEFAULT_MAX",
    "NUMBER_DEFAULT_MIN",
    "NUMBER_DEFAULT_SPAN",
    "OPTIONAL_PRESENT_PROBABILITY",
    "RECORD_DEFAULT_MAX",
    "RECORD_DEFAULT_MIN",
    "SET_DEFAULT_MAX",
    "SET_DEFAULT_MIN",
    "STRING_DEFAULT_MAX",
    "STRING_DEFAULT_MIN",
    "STRING_MIN_ONLY_EXTRA",
    "STRING_PLACEHOLDER",
    "TUPLE_REST_MAX",
    "TUPLE_REST_MIN",
    "UNIQUE_DRAW_ATTEMPTS",
]
