"""Named constants — size ceilings, playback timing and iteration caps."""

from __future__ import annotations

TOKEN_SEPARATOR_PATTERN = r"[\s,，]+"
NULL_TOKEN = "null"

# Node-count ceilings per input kind
MAX_LEVEL_ORDER_NODES = 41
MAX_TREE_NODES = 31
MAX_KTH_TREE_NODES = 20
MAX_ROTATE_LENGTH = 12
MAX_SUBARRAY_LENGTH = 10
MAX_CYCLE_LIST_LENGTH = 10
MAX_INTERSECTION_LIST_LENGTH = 9
MAX_RANDOM_LIST_LENGTH = 8

NO_CYCLE = -1

# Playback timing (milliseconds)
DEFAULT_INTERVAL_MS = 1500
TREE_INTERVAL_MS = 1500
ROTATE_INTERVAL_MS = 1400
CYCLE_INTERVAL_MS = 1600
LIST_INTERVAL_MS = 1700

PLAYBACK_LOG_LIMIT = 18

# Caps against malformed pointer structures
CYCLE_ITERATION_FACTOR = 3
INTERSECTION_ITERATION_FACTOR = 4
INTERSECTION_ITERATION_SLACK = 4

INPUT_TREE = "tree"
INPUT_ARRAY = "array"
INPUT_ROTATION = "rotation"
INPUT_KTH = "kth"
INPUT_CYCLE_LIST = "cycle_list"
INPUT_INTERSECTION = "intersection"
INPUT_RANDOM_LIST = "random_list"
