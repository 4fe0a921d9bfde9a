"""End-to-end tests for the sample-wfc command line."""

import numpy as np
import pytest

from sampleWFC.main import build_parser, main
from sampleWFC.utiles.imageIO import load_image, save_image


@pytest.fixture
def sample_path(tmp_path):
    """A 4x4 black and white checkerboard saved as PNG."""
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    for y in range(4):
        for x in range(4):
            if (x + y) % 2:
                image[y, x] = 255
    path = tmp_path / "sample.png"
    save_image(path, image)
    return path


class TestMain:
    """Tests for main()."""

    def test_defaults(self):
        args = build_parser().parse_args(["in.png"])
        assert args.width == 32 and args.height == 32
        assert args.max_restarts is None
        assert args.propagate is False

    def test_negative_max_restarts(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["in.png", "--max-restarts", "-1"])
        assert excinfo.value.code == 2
        assert "must be >= 0" in capsys.readouterr().err

    def test_max_restarts(self):
        assert build_parser().parse_args(["in.png", "--max-restarts", "0"]).max_restarts == 0

    def test_checkerboard(self, sample_path, tmp_path):
        out = tmp_path / "out.png"
        assert main([str(sample_path), "-W", "5", "-H", "4", "-o", str(out), "--seed", "3"]) == 0
        image = load_image(out)[..., :3]
        assert image.shape == (4, 5, 3)
        assert image[0, 0].tolist() == [0, 0, 0]
        assert np.array_equal(image[0, 0], image[1, 1])
        assert not np.array_equal(image[0, 0], image[0, 1])

    def test_frames(self, sample_path, tmp_path):
        frames = tmp_path / "frames"
        out = tmp_path / "out.png"
        assert main([str(sample_path), "-W", "3", "-H", "3", "-o", str(out), "--frames", str(frames),
                     "--propagate"]) == 0
        assert any(frames.iterdir())

    def test_non_factor_tile_size(self, sample_path, tmp_path):
        assert main([str(sample_path), "--tile-width", "3", "-o", str(tmp_path / "out.png")]) == 2
