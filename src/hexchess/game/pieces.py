"""Piece definitions for Hex Chess."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Color(Enum):
    """Player colors. White moves first."""

    WHITE = "W"
    BLACK = "B"

    def __str__(self) -> str:
        return self.value

    @property
    def opponent(self) -> "Color":
        """Get the other color."""
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceKind(Enum):
    """Movement kinds.

    Charger, dragon and guardian are the non-orthodox kinds:
    - Charger slides along its three forward-facing directions
    - Dragon moves one or two cells, burning the jumped cell on a two-step capture
    - Guardian moves one cell and may swap places with a friendly piece
    """

    PAWN = "P"
    KING = "K"
    KNIGHT = "N"
    ROOK = "R"
    BISHOP = "B"
    QUEEN = "Q"
    CHARGER = "C"
    DRAGON = "D"
    GUARDIAN = "G"

    def __str__(self) -> str:
        return self.value


_GLYPHS: dict[tuple[Color, PieceKind], str] = {
    (Color.WHITE, PieceKind.PAWN): "♙",
    (Color.BLACK, PieceKind.PAWN): "♟",
    (Color.WHITE, PieceKind.KING): "♔",
    (Color.BLACK, PieceKind.KING): "♚",
    (Color.WHITE, PieceKind.QUEEN): "♕",
    (Color.BLACK, PieceKind.QUEEN): "♛",
    (Color.WHITE, PieceKind.BISHOP): "♗",
    (Color.BLACK, PieceKind.BISHOP): "♝",
    (Color.WHITE, PieceKind.KNIGHT): "♘",
    (Color.BLACK, PieceKind.KNIGHT): "♞",
    (Color.WHITE, PieceKind.ROOK): "♖",
    (Color.BLACK, PieceKind.ROOK): "♜",
    (Color.WHITE, PieceKind.CHARGER): "C",
    (Color.BLACK, PieceKind.CHARGER): "c",
    (Color.WHITE, PieceKind.DRAGON): "D",
    (Color.BLACK, PieceKind.DRAGON): "d",
    (Color.WHITE, PieceKind.GUARDIAN): "G",
    (Color.BLACK, PieceKind.GUARDIAN): "g",
}


@dataclass(frozen=True)
class Piece:
    """A piece value stored in a board cell.

    Pieces have no identity beyond color and kind; moving or capturing just
    overwrites cells.

    Attributes:
        color: Owning color
        kind: Movement kind
    """

    color: Color
    kind: PieceKind

    @property
    def code(self) -> str:
        """Two-letter code, e.g. "WR" for a white rook."""
        return f"{self.color.value}{self.kind.value}"

    @property
    def glyph(self) -> str:
        """Display glyph (cosmetic only)."""
        return _GLYPHS[(self.color, self.kind)]

    @classmethod
    def from_code(cls, code: str) -> "Piece":
        """Parse a two-letter piece code.

        Raises:
            KeyError: If the code is unknown
        """
        return PIECES[code]

    def __str__(self) -> str:
        return self.code


PIECES: MappingProxyType[str, Piece] = MappingProxyType(
    {
        f"{color.value}{kind.value}": Piece(color, kind)
        for color in Color
        for kind in PieceKind
    }
)


def color_of(code: str | None) -> Color | None:
    """Get the color of a piece code, or None if unknown."""
    piece = PIECES.get(code) if code is not None else None
    return piece.color if piece is not None else None


def kind_of(code: str | None) -> PieceKind | None:
    """Get the kind of a piece code, or None if unknown."""
    piece = PIECES.get(code) if code is not None else None
    return piece.kind if piece is not None else None


def glyph_of(code: str | None) -> str | None:
    """Get the display glyph of a piece code, or None if unknown."""
    piece = PIECES.get(code) if code is not None else None
    return piece.glyph if piece is not None else None


def is_enemy(a: Piece | None, b: Piece | None) -> bool:
    """True iff both pieces are present and belong to different colors.

    An empty cell is never an enemy; callers check emptiness separately.
    """
    if a is None or b is None:
        return False
    return a.color != b.color
