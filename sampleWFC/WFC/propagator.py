from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence

import jax
import numpy as np

from sampleWFC.WFC.Grid import Grid
from sampleWFC.WFC.RuleSet import RuleSet


def neighbor_constraints(grid: Grid, rules: RuleSet, x: int, y: int) -> List[np.ndarray]:
    """allowed-id masks imposed on (x, y) by each existing neighbor

    For an offset d the neighbor sits at (x, y) - d, so d points from the neighbor toward the cell.
    """
    contributions = []
    for offset in rules.offsets:
        nx, ny = x - offset.dx, y - offset.dy
        if not grid.in_bounds(nx, ny):
            continue
        contributions.append(rules.allowed_mask(grid.mask(nx, ny), offset))
    return contributions


def intersect_constraints(own: np.ndarray, contributions: Sequence[np.ndarray]) -> np.ndarray:
    """intersection of the non-empty contributions with the cell's own candidates

    A neighbor without any matching rule contributes an empty mask and is left out. When no
    neighbor contributes anything the result is empty.
    """
    result = np.asarray(own, dtype=bool).copy()
    constrained = False
    for allowed in contributions:
        if not allowed.any():
            continue
        result &= allowed
        constrained = True
    if not constrained:
        result[:] = False
    return result


def sample_by_threshold(candidates: Sequence[int], weights, r: float) -> Optional[int]:
    """first candidate, by ascending weight, whose weight exceeds r

    Falls back to the highest weight candidate when none does, None when there are no candidates.
    Weights are sample frequencies, not renormalised over the candidates, so the fallback is common.
    """
    if len(candidates) == 0:
        return None
    candidates = np.asarray(sorted(candidates), dtype=np.int64)
    weights = np.asarray(weights, dtype=np.float64)
    ordered = candidates[np.argsort(weights[candidates], kind="stable")]
    for candidate in ordered:
        if r < weights[candidate]:
            return int(candidate)
    return int(ordered[-1])


def weighted_sample(key, candidates: Sequence[int], weights) -> Optional[int]:
    r = float(jax.random.uniform(key))
    return sample_by_threshold(candidates, weights, r)


def observe(grid: Grid, rules: RuleSet, weights, key, x: int, y: int) -> Optional[int]:
    """collapse (x, y) to one id consistent with its neighbors

    Returns the chosen id, or None after writing the empty candidate set (contradiction).
    """
    allowed = intersect_constraints(grid.mask(x, y), neighbor_constraints(grid, rules, x, y))
    chosen = weighted_sample(key, np.flatnonzero(allowed), weights)
    if chosen is None:
        grid.set_mask(x, y, np.zeros(grid.num_possibilities, dtype=bool))
    else:
        grid.collapse_cell(x, y, chosen)
    return chosen


def propagate(grid: Grid, rules: RuleSet, x: int, y: int) -> bool:
    """narrow the candidates of every cell reachable from (x, y) until nothing changes

    Worklist arc consistency: a cell is queued at most once at a time and candidate sets only
    shrink, so the loop ends. Returns False as soon as a cell runs out of candidates.
    """
    queued = np.zeros((grid.h, grid.w), dtype=bool)
    worklist = deque([(x, y)])
    queued[y, x] = True
    while worklist:
        cx, cy = worklist.popleft()
        queued[cy, cx] = False
        source = grid.mask(cx, cy)
        for offset in rules.offsets:
            tx, ty = cx + offset.dx, cy + offset.dy
            if not grid.in_bounds(tx, ty):
                continue
            allowed = rules.allowed_mask(source, offset)
            # no rule for this offset: no constraint
            if not allowed.any():
                continue
            current = grid.mask(tx, ty)
            narrowed = current & allowed
            if np.array_equal(narrowed, current):
                continue
            grid.set_mask(tx, ty, narrowed)
            if not narrowed.any():
                return False
            if not queued[ty, tx]:
                queued[ty, tx] = True
                worklist.append((tx, ty))
    return True
