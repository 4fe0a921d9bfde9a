"""Tests for sampleWFC.WFC.sampleAnalyzer."""

import numpy as np
import pytest

from sampleWFC.WFC.errors import InvalidCellAccess, NonFactorDimension, NonFactorHeight, NonFactorWidth
from sampleWFC.WFC.Grid import Grid
from sampleWFC.WFC.RuleSet import CARDINAL, LEFT, RIGHT, Offset, Rule
from sampleWFC.WFC.sampleAnalyzer import (
    analyze_sample,
    generate_rules,
    generate_tiles,
    generate_weights,
)
from sampleWFC.WFC.SymbolTable import tabulate


class TestGenerateTiles:
    """Tests for splitting an image into tiles."""

    def test_pixel_mode(self, uniform_image):
        sample, table = generate_tiles(uniform_image)
        assert len(table) == 1
        assert sample.ids().tolist() == [[0, 0], [0, 0]]
        assert table.get_symbol(0).shape == (1, 1, 3)

    def test_identical_tiles_share_an_id(self):
        image = np.zeros((2, 6), dtype=np.uint8)
        image[:, 2:4] = 1
        sample, table = generate_tiles(image, tile_width=2, tile_height=2)
        assert sample.ids().tolist() == [[0, 1, 0]]
        assert len(table) == 2

    def test_non_factor_width(self):
        with pytest.raises(NonFactorWidth) as excinfo:
            generate_tiles(np.zeros((4, 5, 3)), tile_width=2, tile_height=2)
        assert excinfo.value.size == 5
        assert excinfo.value.tile_size == 2

    def test_non_factor_height(self):
        with pytest.raises(NonFactorHeight):
            generate_tiles(np.zeros((5, 4, 3)), tile_width=2, tile_height=2)

    def test_non_factor_is_value_error(self):
        with pytest.raises(ValueError):
            generate_tiles(np.zeros((3, 3)), tile_width=2, tile_height=1)
        assert issubclass(NonFactorWidth, NonFactorDimension)


class TestGenerateWeights:
    """Tests for sample frequencies."""

    def test_row_sample(self):
        sample, _ = tabulate([["A", "B", "A"]])
        assert generate_weights(sample) == pytest.approx([2 / 3, 1 / 3])

    def test_uncollapsed_cells_count_every_candidate(self):
        sample = Grid(2, 1, 2)
        sample.collapse_cell(1, 0, 1)
        assert generate_weights(sample) == pytest.approx([0.5, 1.0])

    def test_read_only(self, uniform):
        _, _, _, weights = uniform
        assert weights.tolist() == [1.0]
        with pytest.raises(ValueError):
            weights[0] = 0.5


class TestGenerateRules:
    """Tests for rule derivation."""

    def test_uniform_block_self_adjacency(self, uniform):
        _, _, rules, _ = uniform
        assert rules.rules == {Rule(0, 0, offset) for offset in CARDINAL}

    def test_row_sample_scans_interior_only(self):
        sample, _ = tabulate([["A", "B", "A"]])
        rules = generate_rules(sample)
        assert rules.rules == {Rule(0, 1, LEFT), Rule(0, 1, RIGHT)}

    def test_checkerboard(self, checkerboard):
        _, _, rules, _ = checkerboard
        expected = {Rule(1, 0, offset) for offset in CARDINAL} | {Rule(0, 1, offset) for offset in CARDINAL}
        assert rules.rules == expected

    def test_border_cells_are_not_subjects(self):
        sample, table = tabulate(["CCCC", "CABC", "CCCC"])
        rules = generate_rules(sample)
        c = table.get_id("C")
        assert all(rule.subject != c for rule in rules)

    def test_idempotent(self, checkerboard_rows):
        sample, _ = tabulate(checkerboard_rows)
        assert generate_rules(sample) == generate_rules(sample)
        assert len(generate_rules(sample)) == 8

    def test_generalized_offsets(self):
        sample, _ = tabulate(["ABCDE"])
        rules = generate_rules(sample, offsets=[(2, 0), (-2, 0)])
        # margin 2 leaves only x=2 (C) as a subject
        assert rules.rules == {Rule(4, 2, Offset(2, 0)), Rule(0, 2, Offset(-2, 0))}

    def test_uncollapsed_interior_cell(self):
        sample = Grid.from_ids([[0, 0, 0], [0, 1, 0], [0, 0, 0]])
        sample.set_candidates(1, 1, [0, 1])
        with pytest.raises(InvalidCellAccess):
            generate_rules(sample)

    def test_analyze_sample_freezes_rules(self, checkerboard):
        _, _, rules, weights = checkerboard
        assert rules.frozen
        assert weights.tolist() == [0.5, 0.5]

    def test_analyze_twice(self, checkerboard_rows):
        sample, _ = tabulate(checkerboard_rows)
        assert analyze_sample(sample)[0] == analyze_sample(sample)[0]
