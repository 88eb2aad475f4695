from __future__ import annotations

import logging
from typing import Iterable, List

from match3.components.grid import Grid
from match3.components.match import MatchCandidate, MatchSelection
from match3.systems.shape_classifier import classify

logger = logging.getLogger(__name__)


def resolve(candidates: Iterable[MatchCandidate]) -> MatchSelection:
    """Greedy, priority-first selection of token-disjoint candidates.

    ``sorted`` is stable, so candidates of equal priority keep scan order.
    """
    ordered = sorted(candidates, key=lambda candidate: candidate.priority, reverse=True)
    used: set[int] = set()
    chosen: List[MatchCandidate] = []
    for candidate in ordered:
        if candidate.overlaps(used):
            continue
        chosen.append(candidate)
        used.update(candidate.tokens)
    if chosen:
        logger.debug("Selected %d of %d candidates covering %d tokens", len(chosen), len(ordered), len(used))
    return MatchSelection(candidates=chosen)


def find_matches(grid: Grid) -> MatchSelection:
    """Classify the whole grid and reduce it to the final selection."""
    return resolve(classify(grid))


def has_matches(grid: Grid) -> bool:
    return bool(find_matches(grid))


def total_match_count(grid: Grid) -> int:
    return len(find_matches(grid).tokens())


def match_for_token(grid: Grid, token: int) -> MatchCandidate | None:
    return find_matches(grid).candidate_for(token)


def is_token_matched(grid: Grid, token: int) -> bool:
    return match_for_token(grid, token) is not None


def describe_selection(selection: MatchSelection) -> List[str]:
    """Human-readable one-line summary per selected candidate."""
    if not selection:
        return ["No matches"]
    lines = [f"{len(selection)} match groups:"]
    for index, candidate in enumerate(selection, start=1):
        cells = ", ".join(f"({col},{row})" for col, row in candidate.cells)
        lines.append(
            f"  {index}: {candidate.shape.slug} x{candidate.token_count} "
            f"{candidate.kind.value} priority={candidate.priority} at [{cells}]"
        )
    return lines
