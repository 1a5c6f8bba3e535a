"""Subsequence fuzzy matching.

A candidate matches when every character of the pattern appears in it, in
order. Runs of consecutive matched characters score exponentially more than
scattered ones, and an exact (case-folded) match outranks everything.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class FuzzyMatch:
    """A candidate accepted by the fuzzy filter."""

    key: str
    score: float
    index: int  # position of the candidate in the input order

    @property
    def exact(self) -> bool:
        return math.isinf(self.score)


def fuzzy_match(pattern: str, candidate: str, case_sensitive: bool = False) -> float | None:
    """Score ``candidate`` against ``pattern``.

    Returns:
        The match score (higher is better, ``inf`` for an exact match), or
        None if the pattern is not a subsequence of the candidate.
    """
    compare = candidate if case_sensitive else candidate.lower()
    pattern = pattern if case_sensitive else pattern.lower()

    pattern_idx = 0
    total = 0
    run = 0
    for char in compare:
        if pattern_idx < len(pattern) and char == pattern[pattern_idx]:
            pattern_idx += 1
            run = run * 2 + 1
        else:
            run = 0
        total += run

    if pattern_idx != len(pattern):
        return None
    if compare == pattern:
        return math.inf
    return float(total)


def fuzzy_filter(
    pattern: str,
    candidates: Iterable[str],
    limit: int | None = None,
    case_sensitive: bool = False,
) -> list[FuzzyMatch]:
    """Return candidates matching ``pattern``, best first.

    Ties keep the input order. ``limit`` truncates after sorting.
    """
    matches = []
    for index, candidate in enumerate(candidates):
        score = fuzzy_match(pattern, candidate, case_sensitive)
        if score is not None:
            matches.append(FuzzyMatch(key=candidate, score=score, index=index))

    matches.sort(key=lambda m: (-m.score, m.index))
    if limit is not None:
        return matches[: max(limit, 0)]
    return matches
