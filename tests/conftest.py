"""Shared pytest fixtures for sampleWFC tests."""

import numpy as np
import pytest

from sampleWFC.WFC.Grid import Grid
from sampleWFC.WFC.RuleSet import CARDINAL, RuleSet
from sampleWFC.WFC.sampleAnalyzer import analyze_sample, generate_tiles
from sampleWFC.WFC.SymbolTable import tabulate


# =============================================================================
# Samples
# =============================================================================

@pytest.fixture
def uniform_image() -> np.ndarray:
    """A 2x2 RGB image of a single color."""
    return np.full((2, 2, 3), 7, dtype=np.uint8)


@pytest.fixture
def checkerboard_rows() -> list:
    """A 4x4 checkerboard of A and B, A in the top left corner."""
    return ["ABAB", "BABA", "ABAB", "BABA"]


@pytest.fixture
def checkerboard(checkerboard_rows):
    """(sample, table, rules, weights) learned from the checkerboard."""
    sample, table = tabulate(checkerboard_rows)
    rules, weights = analyze_sample(sample)
    return sample, table, rules, weights


@pytest.fixture
def uniform(uniform_image):
    """(sample, table, rules, weights) learned from the single color image."""
    sample, table = generate_tiles(uniform_image)
    rules, weights = analyze_sample(sample)
    return sample, table, rules, weights


# =============================================================================
# Rules
# =============================================================================

@pytest.fixture
def permissive_rules() -> RuleSet:
    """Three ids, every id may sit next to every id in every direction."""
    rules = RuleSet(3)
    for offset in CARDINAL:
        for neighbor in range(3):
            for subject in range(3):
                rules.add(neighbor, subject, offset)
    return rules.freeze()


@pytest.fixture
def seeded_grid() -> Grid:
    """A 3x3 grid over two ids with the center seeded to 0."""
    grid = Grid(3, 3, 2)
    grid.seed(1, 1, 0)
    return grid
