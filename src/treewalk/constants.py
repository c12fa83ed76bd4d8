from __future__ import annotations

from pathlib import Path

CONFIG_FILE = Path("treewalk.yaml")

DEFAULT_TRIALS = 200
DEFAULT_SEED = 0
DEFAULT_MAX_SIZE = 64
DEFAULT_MAX_LEAVES = 32
DEFAULT_WORKERS = 1
DEFAULT_TRAVERSAL = "stack"
DEFAULT_SHRINK_MAX_SECONDS = 5.0
DEFAULT_SHRINK_MAX_ITERATIONS = 500

PROPERTY_COMPLETENESS = "completeness"
PROPERTY_ORDERING = "ordering"
PROPERTY_EQUIVALENCE = "equivalence"
PROPERTY_NAMES = (
    PROPERTY_COMPLETENESS,
    PROPERTY_ORDERING,
    PROPERTY_EQUIVALENCE,
)

COMPLETENESS_VIOLATION = "COMPLETENESS_VIOLATION"
ORDERING_VIOLATION = "ORDERING_VIOLATION"
EQUIVALENCE_VIOLATION = "EQUIVALENCE_VIOLATION"

EXIT_SUCCESS = 0
EXIT_VIOLATION = 1
EXIT_INTERNAL_ERROR = 2
