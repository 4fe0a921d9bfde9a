from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from sampleWFC.logging_config import get_logger
from sampleWFC.WFC.errors import NonFactorHeight, NonFactorWidth
from sampleWFC.WFC.Grid import Grid
from sampleWFC.WFC.RuleSet import CARDINAL, Offset, RuleSet
from sampleWFC.WFC.SymbolTable import SymbolTable

logger = get_logger(__name__)


def generate_tiles(image, tile_width: int = 1, tile_height: int = 1) -> Tuple[Grid, SymbolTable]:
    """split an image into uniform tiles and dedupe them by pixel equality

    Args:
        image (array): (height, width) or (height, width, channels)
        tile_width (int, optional): Defaults to 1, i.e. one symbol per pixel color.
        tile_height (int, optional): Defaults to 1.

    Returns:
        Tuple[Grid, SymbolTable]: collapsed sample grid, table whose symbols are the tile arrays
    """
    image = np.asarray(image)
    if tile_width <= 0 or tile_height <= 0:
        raise ValueError(f"tile size must be positive, got {tile_width}x{tile_height}")
    height, width = image.shape[:2]
    if width % tile_width != 0:
        raise NonFactorWidth(width, tile_width)
    if height % tile_height != 0:
        raise NonFactorHeight(height, tile_height)

    table = SymbolTable()
    ids = np.zeros((height // tile_height, width // tile_width), dtype=np.int64)
    for y in range(ids.shape[0]):
        for x in range(ids.shape[1]):
            tile = image[y * tile_height:(y + 1) * tile_height, x * tile_width:(x + 1) * tile_width]
            ids[y, x] = table.add(np.array(tile))
    logger.debug(f"{ids.shape[1]}x{ids.shape[0]} tiles of {tile_width}x{tile_height}, {len(table)} distinct")
    return Grid.from_ids(ids, len(table)), table


def generate_weights(sample: Grid) -> np.ndarray:
    """count of every id over the whole sample divided by the number of cells

    Uncollapsed sample cells count once for each of their candidates.
    """
    weights = sample.wave.sum(axis=(0, 1)).astype(np.float64) / (sample.w * sample.h)
    weights.setflags(write=False)
    return weights


def _interior(length: int, margin: int) -> range:
    # too short to have an interior: scan it all, neighbors are bounds checked
    if length > 2 * margin:
        return range(margin, length - margin)
    return range(length)


def generate_rules(sample: Grid, offsets: Iterable[Tuple[int, int]] = CARDINAL) -> RuleSet:
    """record every neighbor pair observed around interior sample cells"""
    offsets = [Offset(*offset) for offset in offsets]
    rules = RuleSet(sample.num_possibilities, offsets)
    margin_x = max((abs(o.dx) for o in offsets), default=0)
    margin_y = max((abs(o.dy) for o in offsets), default=0)
    for y in _interior(sample.h, margin_y):
        for x in _interior(sample.w, margin_x):
            current = sample.get_id(x, y)
            for offset in offsets:
                nx, ny = x + offset.dx, y + offset.dy
                if not sample.in_bounds(nx, ny):
                    continue
                rules.add(sample.get_id(nx, ny), current, offset)
    logger.debug(f"{len(rules)} rules from a {sample.w}x{sample.h} sample over {len(offsets)} offsets")
    return rules


def analyze_sample(sample: Grid, offsets: Iterable[Tuple[int, int]] = CARDINAL) -> Tuple[RuleSet, np.ndarray]:
    """(frozen rule set, read-only weights) learned from a sample grid"""
    rules = generate_rules(sample, offsets).freeze()
    weights = generate_weights(sample)
    return rules, weights
