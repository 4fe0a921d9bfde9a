import argparse
import logging
import sys

from sampleWFC.logging_config import get_logger, setup_logging
from sampleWFC.utiles.imageIO import load_image, save_image
from sampleWFC.WFC.builder import Visualizer, render
from sampleWFC.WFC.errors import CollapseFailed, NonFactorDimension
from sampleWFC.WFC.FigureManager import FigureManager
from sampleWFC.WFC.Grid import Grid
from sampleWFC.WFC.sampleAnalyzer import analyze_sample, generate_tiles
from sampleWFC.WFC.waveFunctionCollapse import CollapseDriver, seed_most_frequent

logger = get_logger(__name__)


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='synthesize an image that locally resembles a sample')
    parser.add_argument('sample', help='sample image')
    parser.add_argument('-o', '--output', default='out.png', help='output image (default: out.png)')
    parser.add_argument('--tile-width', type=int, default=1, help='tile width in pixels (default: 1)')
    parser.add_argument('--tile-height', type=int, default=1, help='tile height in pixels (default: 1)')
    parser.add_argument('-W', '--width', type=int, default=32, help='output width in tiles (default: 32)')
    parser.add_argument('-H', '--height', type=int, default=32, help='output height in tiles (default: 32)')
    parser.add_argument('-s', '--seed', type=int, default=0, help='random seed (default: 0)')
    parser.add_argument('--max-restarts', type=non_negative_int, default=None,
                        help='give up after this many contradictions (default: never)')
    parser.add_argument('--propagate', action='store_true', help='narrow neighbors after every collapse')
    parser.add_argument('--frames', default=None, help='directory to write one image per step')
    parser.add_argument('-p', '--progress', action='store_true', help='show a progress bar')
    parser.add_argument('--log-dir', default=None, help='directory of the debug log file')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='console log level (default: WARNING)')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_dir, console_level=getattr(logging, args.log_level))

    image = load_image(args.sample)
    try:
        sample, table = generate_tiles(image, args.tile_width, args.tile_height)
    except NonFactorDimension as e:
        logger.error(str(e))
        return 2
    rules, weights = analyze_sample(sample)
    logger.info(f"{len(table)} symbols, {len(rules)} rules")

    grid = Grid(args.width, args.height, len(table))
    seed_most_frequent(grid, weights)

    visualizer = Visualizer(table.symbols, weights=weights) if args.frames else None
    driver = CollapseDriver(
        rules, weights,
        seed=args.seed,
        max_restarts=args.max_restarts,
        propagate=args.propagate,
        progress=args.progress,
        visualizer=visualizer,
    )
    try:
        result = driver.collapse(grid)
    except CollapseFailed as e:
        logger.error(str(e))
        return 1

    save_image(args.output, render(result.grid, table.symbols))
    if visualizer is not None:
        visualizer.draw(save_dir=args.frames)
        FigureManager.close()
    print(f"{args.output}: {grid.w}x{grid.h} tiles, {result.steps} steps, {result.restarts} restarts")
    return 0


if __name__ == "__main__":
    sys.exit(main())
