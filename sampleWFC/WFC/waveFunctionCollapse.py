from __future__ import annotations

from typing import NamedTuple

import jax
import numpy as np
import tqdm

from sampleWFC.logging_config import get_logger, log_restart, log_step
from sampleWFC.WFC.errors import CollapseFailed, MissingSeed
from sampleWFC.WFC.Grid import Grid, GridState
from sampleWFC.WFC.propagator import observe, propagate
from sampleWFC.WFC.RuleSet import RuleSet
from sampleWFC.WFC.shannonEntropy import select_min_entropy

logger = get_logger(__name__)


class CollapseResult(NamedTuple):
    grid: Grid
    steps: int
    restarts: int


def seed_most_frequent(grid: Grid, weights, x: int = 0, y: int = 0) -> int:
    """seed (x, y) with the highest weight id, the first one on ties"""
    symbol_id = int(np.argmax(np.asarray(weights)))
    grid.seed(x, y, symbol_id)
    return symbol_id


class CollapseDriver:
    def __init__(self, rules: RuleSet, weights, *args, **kwargs):
        """drive a grid from its seeds to a fully collapsed state, restarting on contradiction

        Kwargs:
            seed (int): seed of the jax PRNG key. Defaults to 0.
            key (jax.Array): PRNG key to use instead of `seed`.
            max_restarts (int|None): restarts allowed before CollapseFailed is raised. Defaults to None, unbounded.
            propagate (bool): narrow neighbors after every collapse (worklist arc consistency). Defaults to False.
            progress (bool): show a tqdm progress bar. Defaults to False.
            visualizer (Visualizer): receives a frame after every step.
        """
        weights = np.array(weights, dtype=np.float64)
        if weights.shape != (rules.num_possibilities,):
            raise ValueError(f"expected {rules.num_possibilities} weights, got shape {weights.shape}")
        if np.any(weights < 0):
            raise ValueError("weights must be non-negative")
        if not np.any(weights > 0):
            raise ValueError("at least one weight must be positive")
        weights.setflags(write=False)
        self.rules = rules
        self.weights = weights

        seed = kwargs.pop("seed", 0)
        key = kwargs.pop("key", None)
        self.key = jax.random.PRNGKey(seed) if key is None else key
        self.max_restarts = kwargs.pop("max_restarts", None)
        self.use_propagation = kwargs.pop("propagate", False)
        self.progress = kwargs.pop("progress", False)
        self.visualizer = kwargs.pop("visualizer", None)
        if kwargs:
            raise TypeError(f"unexpected options: {', '.join(sorted(kwargs))}")
        if self.max_restarts is not None and self.max_restarts < 0:
            raise ValueError(f"max_restarts must be >= 0, got {self.max_restarts}")

        self.steps = 0
        self.restarts = 0
        # counters at the start of the current collapse() call
        self._start_steps = 0
        self._start_restarts = 0

    def _next_key(self):
        self.key, subkey = jax.random.split(self.key)
        return subkey

    def step(self, grid: Grid) -> GridState:
        """advance the state machine once and return the new grid state"""
        self.steps += 1
        state = grid.get_state()
        if state is GridState.COLLAPSED:
            return state

        if state is GridState.CONTRADICTING:
            self.restarts += 1
            log_restart(logger, self.steps, self.restarts)
            restarts = self.restarts - self._start_restarts
            if self.max_restarts is not None and restarts > self.max_restarts:
                logger.warning(f"restart ceiling {self.max_restarts} reached")
                raise CollapseFailed(restarts - 1, self.steps - self._start_steps)
            grid.reset()
            at = None
        else:
            x, y = select_min_entropy(grid, self.weights)
            chosen = observe(grid, self.rules, self.weights, self._next_key(), x, y)
            log_step(logger, self.steps, self.restarts, x, y, f"id={chosen}")
            if chosen is not None and self.use_propagation:
                propagate(grid, self.rules, x, y)
            at = (x, y)

        if self.visualizer is not None:
            self.visualizer.add_frame(grid, at=at)
        return grid.get_state()

    def collapse(self, grid: Grid) -> CollapseResult:
        if not grid.seeds:
            raise MissingSeed("seed at least one cell before collapsing the grid")
        if grid.num_possibilities != self.rules.num_possibilities:
            raise ValueError(
                f"grid has {grid.num_possibilities} possibilities, rules know {self.rules.num_possibilities}"
            )
        self._start_steps, self._start_restarts = self.steps, self.restarts
        num_cells = grid.w * grid.h
        pbar = tqdm.tqdm(total=num_cells, desc="collapsing", unit="tiles", disable=not self.progress)
        try:
            state = None
            while state is not GridState.COLLAPSED:
                restarts = self.restarts
                state = self.step(grid)
                if self.restarts != restarts:
                    pbar.set_description_str(f"restart {self.restarts - self._start_restarts}")
                pbar.n = int(np.sum(grid.counts() == 1))
                pbar.refresh()
        finally:
            pbar.close()

        result = CollapseResult(grid, self.steps - self._start_steps, self.restarts - self._start_restarts)
        logger.info(f"collapsed {grid.w}x{grid.h} grid in {result.steps} steps, {result.restarts} restarts")
        return result


def waveFunctionCollapse(grid: Grid, rules: RuleSet, weights, *args, **kwargs) -> CollapseResult:
    """a WFC function

    Args:
        grid (Grid): output grid with at least one seeded cell, solved in place
        rules (RuleSet): adjacency rules learned from the sample
        weights (array): (n_types,) sample frequency of every id

    Kwargs:
        see CollapseDriver

    Returns:
        CollapseResult: (grid, steps, restarts)
    """
    return CollapseDriver(rules, weights, *args, **kwargs).collapse(grid)
