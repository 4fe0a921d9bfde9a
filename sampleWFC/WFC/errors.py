class WFCError(Exception):
    """base class of every error raised by sampleWFC"""


class NonFactorDimension(WFCError, ValueError):
    """the sample image can not be split into whole tiles"""
    axis = "dimension"

    def __init__(self, size: int, tile_size: int):
        self.size = size
        self.tile_size = tile_size
        super().__init__(f"sample {self.axis} {size} is not a multiple of tile {self.axis} {tile_size}")


class NonFactorWidth(NonFactorDimension):
    axis = "width"


class NonFactorHeight(NonFactorDimension):
    axis = "height"


class InvalidCellAccess(WFCError, LookupError):
    """reading the id of a cell whose candidate set is not exactly one symbol"""

    def __init__(self, x: int, y: int, size: int):
        self.x = x
        self.y = y
        self.size = size
        super().__init__(f"cell ({x}, {y}) has {size} candidates, it is not collapsed")


class MissingSeed(WFCError, ValueError):
    """collapse started on a grid without any pre-collapsed cell"""


class CollapseFailed(WFCError, RuntimeError):
    """the restart ceiling was reached before the grid collapsed"""

    def __init__(self, restarts: int, steps: int):
        self.restarts = restarts
        self.steps = steps
        super().__init__(f"gave up after {restarts} restarts ({steps} steps)")
