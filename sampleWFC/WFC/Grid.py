from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Tuple

import numpy as np

from sampleWFC.WFC.errors import InvalidCellAccess


class GridState(Enum):
    UNCOLLAPSED = "uncollapsed"
    COLLAPSED = "collapsed"
    CONTRADICTING = "contradicting"


class Grid:
    def __init__(self, width: int, height: int, num_possibilities: int):
        """output lattice of cells, each cell is a set of candidate ids

        The wave is a boolean array (height, width, num_possibilities). A cell with exactly one
        candidate is collapsed, a cell with none is a contradiction.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"grid size must be positive, got {width}x{height}")
        if num_possibilities < 1:
            raise ValueError(f"a grid needs at least one possibility, got {num_possibilities}")
        self.w = width
        self.h = height
        self.num_possibilities = num_possibilities
        self.wave = np.ones((height, width, num_possibilities), dtype=bool)
        self.seeds: Dict[Tuple[int, int], int] = {}

    @classmethod
    def from_ids(cls, ids, num_possibilities: int | None = None) -> "Grid":
        """a fully collapsed grid holding `ids[y][x]`"""
        ids = np.asarray(ids, dtype=np.int64)
        if ids.ndim != 2:
            raise ValueError(f"ids must be a 2-D array, got shape {ids.shape}")
        if num_possibilities is None:
            num_possibilities = int(ids.max()) + 1 if ids.size else 0
        grid = cls(ids.shape[1], ids.shape[0], num_possibilities)
        if ids.min() < 0 or ids.max() >= num_possibilities:
            raise ValueError(f"ids out of range (0-{num_possibilities - 1})")
        grid.wave = np.arange(num_possibilities) == ids[..., None]
        return grid

    def __repr__(self):
        rows = []
        for y in range(self.h):
            cells = []
            for x in range(self.w):
                candidates = sorted(self.candidates(x, y))
                cells.append(str(candidates[0]) if len(candidates) == 1 else "{" + ",".join(map(str, candidates)) + "}")
            rows.append(" ".join(cells))
        return f"Grid({self.w}x{self.h}, N={self.num_possibilities})\n" + "\n".join(rows)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.w and 0 <= y < self.h

    def _check_id(self, symbol_id: int) -> int:
        if not 0 <= symbol_id < self.num_possibilities:
            raise ValueError(f"id '{symbol_id}' out of range (0-{self.num_possibilities - 1})")
        return int(symbol_id)

    def counts(self) -> np.ndarray:
        """number of candidates of every cell, shape (height, width)"""
        return self.wave.sum(axis=-1)

    def mask(self, x: int, y: int) -> np.ndarray:
        return self.wave[y, x]

    def candidates(self, x: int, y: int) -> FrozenSet[int]:
        return frozenset(int(i) for i in np.flatnonzero(self.wave[y, x]))

    def is_collapsed(self, x: int, y: int) -> bool:
        return int(self.wave[y, x].sum()) == 1

    def get_id(self, x: int, y: int) -> int:
        size = int(self.wave[y, x].sum())
        if size != 1:
            raise InvalidCellAccess(x, y, size)
        return int(np.argmax(self.wave[y, x]))

    def ids(self) -> np.ndarray:
        """id of every cell, shape (height, width); every cell must be collapsed"""
        counts = self.counts()
        if np.any(counts != 1):
            y, x = np.argwhere(counts != 1)[0]
            raise InvalidCellAccess(int(x), int(y), int(counts[y, x]))
        return np.argmax(self.wave, axis=-1)

    def set_mask(self, x: int, y: int, mask: np.ndarray) -> None:
        self.wave[y, x] = mask

    def set_candidates(self, x: int, y: int, candidates: Iterable[int]) -> None:
        mask = np.zeros(self.num_possibilities, dtype=bool)
        for candidate in candidates:
            mask[self._check_id(candidate)] = True
        self.wave[y, x] = mask

    def collapse_cell(self, x: int, y: int, symbol_id: int) -> None:
        self.set_candidates(x, y, (symbol_id,))

    def seed(self, x: int, y: int, symbol_id: int) -> None:
        """fix a cell before solving, seeds survive every reset"""
        if not self.in_bounds(x, y):
            raise ValueError(f"seed ({x}, {y}) is outside the {self.w}x{self.h} grid")
        self.collapse_cell(x, y, symbol_id)
        self.seeds[(x, y)] = int(symbol_id)

    def reset(self) -> None:
        """back to the all-uncertain wave, then re-apply the seeds"""
        self.wave = np.ones((self.h, self.w, self.num_possibilities), dtype=bool)
        for (x, y), symbol_id in self.seeds.items():
            self.collapse_cell(x, y, symbol_id)

    def get_state(self) -> GridState:
        counts = self.counts()
        if np.any(counts == 0):
            return GridState.CONTRADICTING
        if np.all(counts == 1):
            return GridState.COLLAPSED
        return GridState.UNCOLLAPSED

    def copy(self) -> "Grid":
        grid = Grid(self.w, self.h, self.num_possibilities)
        grid.wave = self.wave.copy()
        grid.seeds = dict(self.seeds)
        return grid
