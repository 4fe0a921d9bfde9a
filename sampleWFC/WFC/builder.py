from __future__ import annotations

import os
from typing import List, Optional, Sequence, Tuple

import numpy as np
import tqdm

from sampleWFC.logging_config import get_logger
from sampleWFC.WFC.FigureManager import FigureManager
from sampleWFC.WFC.Grid import Grid

logger = get_logger(__name__)


def _stack_tiles(tiles: Sequence[np.ndarray]) -> np.ndarray:
    tiles = np.stack([np.asarray(tile) for tile in tiles])
    if tiles.ndim < 3:
        raise ValueError(f"tiles must be 2-D images, got stacked shape {tiles.shape}")
    return tiles


def _blit(blocks: np.ndarray) -> np.ndarray:
    # (h, w, th, tw, ...) -> (h * th, w * tw, ...)
    h, w, th, tw = blocks.shape[:4]
    return blocks.swapaxes(1, 2).reshape((h * th, w * tw) + blocks.shape[4:])


def render(grid: Grid, tiles: Sequence[np.ndarray]) -> np.ndarray:
    """image of a collapsed grid, every cell replaced by its tile

    The result is (height * tile_height, width * tile_width[, channels]).
    """
    tiles = _stack_tiles(tiles)
    if len(tiles) != grid.num_possibilities:
        raise ValueError(f"{len(tiles)} tiles for {grid.num_possibilities} ids")
    return _blit(tiles[grid.ids()])


def preview(grid: Grid, tiles: Sequence[np.ndarray], weights=None) -> np.ndarray:
    """like render, but uncertain cells show the weighted blend of their candidate tiles"""
    tiles = _stack_tiles(tiles)
    weights = np.ones(grid.num_possibilities) if weights is None else np.asarray(weights, dtype=np.float64)
    probs = grid.wave * weights
    norm = np.sum(probs, axis=-1, keepdims=True)
    probs = probs / np.where(norm == 0, 1.0, norm)
    blocks = np.tensordot(probs, tiles.astype(np.float64), axes=([2], [0]))
    image = _blit(blocks)
    if np.issubdtype(tiles.dtype, np.integer):
        return np.rint(image).astype(tiles.dtype)
    return image.astype(tiles.dtype)


class Visualizer:
    def __init__(self, tiles: Sequence[np.ndarray], *args, **kwargs):
        """records one frame per solver step and draws them to image files"""
        self.tiles = list(tiles)
        self.weights = kwargs.pop("weights", None)
        self.figureManager: FigureManager = kwargs.pop("figureManager", None) or FigureManager()
        self.every = kwargs.pop("every", 1)
        self.frames: List[np.ndarray] = []
        self.collapse_list: List[Optional[Tuple[int, int]]] = []
        self._seen = 0

    def add_frame(self, grid: Grid, at: Optional[Tuple[int, int]] = None):
        self._seen += 1
        if (self._seen - 1) % self.every:
            return
        self.frames.append(grid.wave.copy())
        self.collapse_list.append(at)

    def draw(self, save_dir: str = "data/img", prefix: str = "") -> List[str]:
        os.makedirs(save_dir, exist_ok=True)
        paths = []
        for i, wave in tqdm.tqdm(enumerate(self.frames), desc="ploting", total=len(self.frames)):
            frame = Grid(wave.shape[1], wave.shape[0], wave.shape[2])
            frame.wave = wave
            at = self.collapse_list[i]
            self.figureManager.show_image(preview(frame, self.tiles, self.weights),
                                          title=f"step:{i}, at:{'restart' if at is None else at}")
            path = os.path.join(save_dir, f"{prefix}{i}.png")
            self.figureManager.save(path)
            paths.append(path)
        logger.info(f"{len(paths)} frames written to {save_dir}")
        return paths
