"""Board representation for Hex Chess."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from hexchess.game.grid import GRID
from hexchess.game.pieces import Color, Piece, PieceKind


# Board layout (1-based labels as shown to players in brackets)
# White back rank: 3, 10, 16, 21, 27   [4, 11, 17, 22, 28]
# White pawns:     4, 11, 17, 22, 28   [5, 12, 18, 23, 29]
# Black pawns:     8, 14, 19, 25, 32   [9, 15, 20, 26, 33]
# Black back rank: 9, 15, 20, 26, 33   [10, 16, 21, 27, 34]
BACK_RANK: MappingProxyType[Color, tuple[int, ...]] = MappingProxyType(
    {
        Color.WHITE: (3, 10, 16, 21, 27),
        Color.BLACK: (9, 15, 20, 26, 33),
    }
)

PAWN_START: MappingProxyType[Color, tuple[int, ...]] = MappingProxyType(
    {
        Color.WHITE: (4, 11, 17, 22, 28),
        Color.BLACK: (8, 14, 19, 25, 32),
    }
)

# Non-pawn pieces each side places during setup, in "place all (fixed)" order
DEFAULT_SETUP_KINDS: tuple[PieceKind, ...] = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
)

SETUP_POOL: MappingProxyType[Color, tuple[str, ...]] = MappingProxyType(
    {color: tuple(Piece(color, kind).code for kind in DEFAULT_SETUP_KINDS) for color in Color}
)


def validate_setup_kinds(kinds: Sequence[PieceKind]) -> tuple[PieceKind, ...]:
    """Check a setup lineup: one piece per back-rank cell, no pawns, one king.

    Raises:
        ValueError: If the lineup cannot produce a playable game
    """
    kinds = tuple(kinds)
    if len(kinds) != len(BACK_RANK[Color.WHITE]):
        raise ValueError(
            f"Setup lineup needs {len(BACK_RANK[Color.WHITE])} pieces, got {len(kinds)}"
        )
    if PieceKind.PAWN in kinds:
        raise ValueError("Pawns cannot be part of the setup lineup")
    if kinds.count(PieceKind.KING) != 1:
        raise ValueError("Setup lineup must contain exactly one king")
    return kinds


def build_setup_pools(kinds: Sequence[PieceKind] | None = None) -> dict[Color, list[str]]:
    """Create fresh, mutable per-color setup pools.

    The canonical SETUP_POOL is never handed out; callers always get copies.
    """
    if kinds is None:
        return {color: list(SETUP_POOL[color]) for color in Color}
    kinds = validate_setup_kinds(kinds)
    return {color: [Piece(color, kind).code for kind in kinds] for color in Color}


def is_back_rank(color: Color, index: int) -> bool:
    """Check if a cell is on the back rank of `color`."""
    return index in BACK_RANK[color]


def is_pawn_start(color: Color, index: int) -> bool:
    """Check if a cell is a pawn starting cell for `color` (double step allowed)."""
    return index in PAWN_START[color]


def _empty_cells() -> list[Piece | None]:
    return [None] * len(GRID)


@dataclass
class Board:
    """Hex chess board.

    Attributes:
        cells: One entry per grid index, holding a Piece or None
    """

    cells: list[Piece | None] = field(default_factory=_empty_cells)

    def __post_init__(self) -> None:
        if len(self.cells) != len(GRID):
            raise ValueError(f"Board needs {len(GRID)} cells, got {len(self.cells)}")

    @classmethod
    def create_empty(cls) -> "Board":
        """Create an empty board (useful for tests)."""
        return cls()

    @classmethod
    def create_initial(cls) -> "Board":
        """Create the starting board: pawns placed, back ranks empty."""
        board = cls()
        for color in Color:
            pawn = Piece(color, PieceKind.PAWN)
            for index in PAWN_START[color]:
                board.cells[index] = pawn
        return board

    def copy(self) -> "Board":
        """Create an independent copy of the board."""
        return Board(cells=list(self.cells))

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Piece | None:
        return self.cells[index]

    def __setitem__(self, index: int, piece: Piece | None) -> None:
        self.cells[index] = piece

    def is_empty(self, index: int) -> bool:
        """Check if a cell holds no piece."""
        return self.cells[index] is None

    def find_king(self, color: Color) -> int | None:
        """Get the index of the king of `color`, or None if it was captured."""
        for index, piece in enumerate(self.cells):
            if piece is not None and piece.kind == PieceKind.KING and piece.color == color:
                return index
        return None

    def get_pieces_for_color(self, color: Color) -> list[tuple[int, Piece]]:
        """Get (index, piece) for every piece of a color, in index order."""
        return [
            (index, piece)
            for index, piece in enumerate(self.cells)
            if piece is not None and piece.color == color
        ]

    def empty_back_rank(self, color: Color) -> list[int]:
        """Get the still-empty back-rank cells of a color."""
        return [index for index in BACK_RANK[color] if self.cells[index] is None]

    def codes(self) -> list[str | None]:
        """Get the cell contents as piece codes."""
        return [piece.code if piece is not None else None for piece in self.cells]
