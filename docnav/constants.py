"""Constants shared by the index engine and the version registry."""

import re

ONE_HOUR = 60 * 60  # seconds

# ============ COMPOSITE KEYS ============

# Members whose name starts with "_" or contains a bracket are private/internal
# and are not registered as queryable keys.
EXCLUSION_PATTERN = re.compile(r"(?:^_|\[|\])")

DEFAULT_FUZZY_LIMIT = 25

# ============ VERSION CATALOG ============

TREE_BLOB_TYPE = "blob"
