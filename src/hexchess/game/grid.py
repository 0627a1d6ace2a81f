"""Hexagram grid geometry for Hex Chess.

The board is a six-pointed star of flat-topped hexes: a radius-R hexagon with
a triangle of cells added on each of its six sides. Cells are addressed by
axial coordinates (q, r) and, everywhere else in the engine, by a stable
0-based index assigned by sorting the coordinates column-major.
"""

import logging
from enum import IntEnum

logger = logging.getLogger(__name__)

Coord = tuple[int, int]
Cube = tuple[int, int, int]


class Direction(IntEnum):
    """Orthogonal (edge-adjacent) directions."""

    N = 0
    NW = 1
    SW = 2
    S = 3
    SE = 4
    NE = 5


class Diagonal(IntEnum):
    """Diagonal (corner-adjacent) directions."""

    E = 0
    NE = 1
    NW = 2
    W = 3
    SW = 4
    SE = 5


# Axial (dq, dr) offsets, indexed by Direction
AXIAL_DIRECTIONS: tuple[Coord, ...] = (
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
    (1, 0),
    (1, -1),
)

# Axial (dq, dr) offsets, indexed by Diagonal
AXIAL_DIAGONALS: tuple[Coord, ...] = (
    (2, -1),
    (1, -2),
    (-1, -1),
    (-2, 1),
    (-1, 2),
    (1, 1),
)

# Cube offsets in the same rotational order as AXIAL_DIRECTIONS
_CUBE_DIRECTIONS: tuple[Cube, ...] = (
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
    (1, -1, 0),
    (1, 0, -1),
)


class GridError(Exception):
    """Raised when the generated grid does not have the expected shape."""


def expected_cell_count(radius: int) -> int:
    """Closed-form number of cells in a hexagram of the given radius."""
    return 6 * radius * radius + 6 * radius + 1


def _add(a: Cube, b: Cube) -> Cube:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _scale(a: Cube, k: int) -> Cube:
    return (a[0] * k, a[1] * k, a[2] * k)


def _hexagon(radius: int) -> list[Cube]:
    cells: list[Cube] = []
    for x in range(-radius, radius + 1):
        for y in range(max(-radius, -x - radius), min(radius, -x + radius) + 1):
            cells.append((x, y, -x - y))
    return cells


def build_hexagram(radius: int = 2) -> tuple[Coord, ...]:
    """Build the axial coordinates of a hexagram board.

    Starts from a hexagon of the given radius and adds a triangle of cells on
    each side. The result is sorted by q ascending, then r descending, which
    fixes the board index of every cell.

    Args:
        radius: Radius of the inner hexagon (2 gives the 37-cell board)

    Returns:
        Tuple of (q, r) coordinates in index order

    Raises:
        GridError: If the cell count differs from 6R^2 + 6R + 1
    """
    cells: dict[Cube, None] = dict.fromkeys(_hexagon(radius))

    for side in range(6):
        outward = _CUBE_DIRECTIONS[side]
        inward = _scale(outward, -1)
        along = _CUBE_DIRECTIONS[(side + 1) % 6]
        corner = _scale(outward, radius)

        for steps in range(radius):
            edge_cell = _add(corner, _scale(along, steps + 1))
            for row in range(1, steps + 1):
                cells[_add(edge_cell, _scale(inward, row))] = None
            cells[edge_cell] = None

    coords = [(x, z) for x, _, z in cells]

    expected = expected_cell_count(radius)
    if len(coords) != expected:
        logger.error(f"Hexagram of radius {radius}: expected {expected} cells, got {len(coords)}")
        raise GridError(f"Expected {expected} cells, got {len(coords)}")

    coords.sort(key=lambda c: (c[0], -c[1]))
    return tuple(coords)


class HexGrid:
    """Immutable index <-> coordinate mapping with direction stepping.

    Attributes:
        radius: Radius the grid was built with
        coords: Axial coordinates, position in the tuple is the cell index
    """

    def __init__(self, radius: int = 2) -> None:
        self.radius = radius
        self.coords: tuple[Coord, ...] = build_hexagram(radius)
        self._index_by_coord: dict[Coord, int] = {c: i for i, c in enumerate(self.coords)}

    def __len__(self) -> int:
        return len(self.coords)

    def index_of(self, q: int, r: int) -> int | None:
        """Get the cell index for a coordinate, or None if off-board."""
        return self._index_by_coord.get((q, r))

    def coord_of(self, index: int) -> Coord:
        """Get the axial coordinate of a cell index."""
        return self.coords[index]

    def is_valid_index(self, index: int) -> bool:
        """Check if an index addresses a cell on this grid."""
        return 0 <= index < len(self.coords)

    def step(self, index: int, direction: int, steps: int = 1) -> int | None:
        """Move `steps` units along an orthogonal direction.

        Returns:
            Destination index, or None if it falls off the board
        """
        q, r = self.coords[index]
        dq, dr = AXIAL_DIRECTIONS[direction]
        return self.index_of(q + dq * steps, r + dr * steps)

    def step_diagonal(self, index: int, direction: int, steps: int = 1) -> int | None:
        """Move `steps` units along a diagonal (corner) direction."""
        q, r = self.coords[index]
        dq, dr = AXIAL_DIAGONALS[direction]
        return self.index_of(q + dq * steps, r + dr * steps)

    def offset(self, index: int, dq: int, dr: int) -> int | None:
        """Move by an arbitrary axial offset."""
        q, r = self.coords[index]
        return self.index_of(q + dq, r + dr)

    def neighbors(self, index: int) -> tuple[int, ...]:
        """Get all on-board orthogonal neighbours of a cell."""
        result = (self.step(index, d) for d in Direction)
        return tuple(i for i in result if i is not None)


# The 37-cell board every game is played on
GRID = HexGrid(2)
