"""Documentation index engine.

- fuzzy: subsequence fuzzy matching shared by the index and the registry
- navigator: per-version lookup tables, disambiguation and fuzzy search
"""

from .fuzzy import FuzzyMatch, fuzzy_filter, fuzzy_match
from .navigator import CONNECTORS, TypeMap, TypeNavigator, is_excluded

__all__ = [
    "CONNECTORS",
    "FuzzyMatch",
    "TypeMap",
    "TypeNavigator",
    "fuzzy_filter",
    "fuzzy_match",
    "is_excluded",
]
