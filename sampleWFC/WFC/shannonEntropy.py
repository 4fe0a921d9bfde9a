from __future__ import annotations

from typing import Optional, Tuple

import jax
jax.config.update('jax_platforms', 'cpu')

import jax.numpy as jnp
import numpy as np

from sampleWFC.WFC.Grid import Grid


@jax.jit
def shannon_entropy(wave: jnp.ndarray, weights: jnp.ndarray) -> jnp.ndarray:
    """
    weighted shannon entropy of every cell
    :param wave: (..., n_types) boolean candidate masks
    :param weights: (n_types,) weight of every id
    :return: (...) log2(sum w) - sum(w log2 w) / sum(w), exactly 0 for cells with <= 1 candidate
    """
    counts = jnp.sum(wave, axis=-1)
    w = jnp.where(wave, weights, 0.0)
    sum_w = jnp.sum(w, axis=-1)
    w_log_w = jnp.sum(jnp.where(w > 0, w * jnp.log2(jnp.where(w > 0, w, 1.0)), 0.0), axis=-1)
    safe_sum = jnp.where(sum_w > 0, sum_w, 1.0)
    entropy = jnp.log2(safe_sum) - w_log_w / safe_sum
    return jnp.where(counts > 1, entropy, 0.0)


def grid_entropy(grid: Grid, weights) -> np.ndarray:
    weights = np.asarray(weights, dtype=np.float32)
    if weights.shape != (grid.num_possibilities,):
        raise ValueError(f"expected {grid.num_possibilities} weights, got shape {weights.shape}")
    return np.asarray(shannon_entropy(jnp.asarray(grid.wave), jnp.asarray(weights)))


def cell_entropy(grid: Grid, x: int, y: int, weights) -> float:
    return float(grid_entropy(grid, weights)[y, x])


def select_min_entropy(grid: Grid, weights) -> Optional[Tuple[int, int]]:
    """(x, y) of the uncollapsed cell with the lowest entropy, None when there is none

    Collapsed and contradicting cells are never chosen. Ties go to the first cell in
    row-major order.
    """
    entropy = np.where(grid.counts() > 1, grid_entropy(grid, weights), np.inf)
    flat = int(np.argmin(entropy))
    if not np.isfinite(entropy.flat[flat]):
        return None
    y, x = divmod(flat, grid.w)
    return x, y
