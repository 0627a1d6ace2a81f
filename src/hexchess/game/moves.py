"""Move generation and application for Hex Chess.

Every generator takes a board and a cell index and returns the destination
indices the piece on that cell may move to. Generators only answer "where can
this piece go"; side effects of a move (dragon collateral, guardian swap,
promotion) happen in apply_move().
"""

from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType

from hexchess.game.board import BACK_RANK, Board, is_pawn_start
from hexchess.game.grid import GRID, AXIAL_DIRECTIONS, Direction
from hexchess.game.pieces import Color, Piece, PieceKind, is_enemy

MoveGenerator = Callable[[Board, int], list[int]]

PAWN_FORWARD: MappingProxyType[Color, Direction] = MappingProxyType(
    {Color.WHITE: Direction.N, Color.BLACK: Direction.S}
)

PAWN_CAPTURE_DIRECTIONS: MappingProxyType[Color, tuple[Direction, ...]] = MappingProxyType(
    {
        Color.WHITE: (Direction.NW, Direction.NE),
        Color.BLACK: (Direction.SW, Direction.SE),
    }
)

ROOK_DIRECTIONS: tuple[Direction, ...] = (Direction.N, Direction.S)
BISHOP_DIRECTIONS: tuple[Direction, ...] = (
    Direction.NW,
    Direction.SW,
    Direction.SE,
    Direction.NE,
)
QUEEN_DIRECTIONS: tuple[Direction, ...] = tuple(Direction)

CHARGER_DIRECTIONS: MappingProxyType[Color, tuple[Direction, ...]] = MappingProxyType(
    {
        Color.WHITE: (Direction.N, Direction.NW, Direction.NE),
        Color.BLACK: (Direction.S, Direction.SW, Direction.SE),
    }
)


def _can_land(board: Board, piece: Piece, target: int) -> bool:
    """Empty or enemy-occupied."""
    occupant = board[target]
    return occupant is None or is_enemy(piece, occupant)


def slide(board: Board, from_index: int, direction: int) -> list[int]:
    """Walk one direction until blocked.

    Empty cells are added and the walk continues; the first enemy cell is
    added and the walk stops; a friendly piece stops the walk without being
    added.
    """
    piece = board[from_index]
    destinations: list[int] = []
    if piece is None:
        return destinations

    current = from_index
    while True:
        nxt = GRID.step(current, direction)
        if nxt is None:
            break
        occupant = board[nxt]
        if occupant is None:
            destinations.append(nxt)
            current = nxt
            continue
        if is_enemy(piece, occupant):
            destinations.append(nxt)
        break

    return destinations


def _slide_all(board: Board, index: int, directions: tuple[Direction, ...]) -> list[int]:
    destinations: list[int] = []
    for direction in directions:
        destinations.extend(slide(board, index, direction))
    return destinations


def knight_targets(index: int) -> list[int]:
    """Cells an L-jump from `index` lands on, ignoring occupancy.

    For each direction: two steps along it, then one step along each of the
    two adjacent directions. Landing cells reached twice are listed once.
    """
    targets: dict[int, None] = {}

    for direction in Direction:
        dq, dr = AXIAL_DIRECTIONS[direction]
        for side in ((direction + 5) % 6, (direction + 1) % 6):
            sq, sr = AXIAL_DIRECTIONS[side]
            target = GRID.offset(index, 2 * dq + sq, 2 * dr + sr)
            if target is not None:
                targets[target] = None

    return list(targets)


def pawn_moves(board: Board, index: int) -> list[int]:
    """Pawn moves.

    - One step forward onto an empty cell
    - Two steps forward from a starting cell if both cells are empty
    - Captures one step along either capture direction, enemies only
    """
    piece = board[index]
    if piece is None:
        return []

    forward = PAWN_FORWARD[piece.color]
    one_step = GRID.step(index, forward, 1)
    two_steps = GRID.step(index, forward, 2)

    destinations: list[int] = []

    if one_step is not None and board.is_empty(one_step):
        destinations.append(one_step)
        if (
            is_pawn_start(piece.color, index)
            and two_steps is not None
            and board.is_empty(two_steps)
        ):
            destinations.append(two_steps)

    for direction in PAWN_CAPTURE_DIRECTIONS[piece.color]:
        target = GRID.step(index, direction, 1)
        if target is not None and is_enemy(piece, board[target]):
            destinations.append(target)

    return destinations


def king_moves(board: Board, index: int) -> list[int]:
    """King moves: one step in any direction onto an empty or enemy cell."""
    piece = board[index]
    if piece is None:
        return []
    return [target for target in GRID.neighbors(index) if _can_land(board, piece, target)]


def knight_moves(board: Board, index: int) -> list[int]:
    """Knight moves: L-jumps over anything onto an empty or enemy cell."""
    piece = board[index]
    if piece is None:
        return []
    return [target for target in knight_targets(index) if _can_land(board, piece, target)]


def rook_moves(board: Board, index: int) -> list[int]:
    """Rook moves: slides along the two vertical directions."""
    return _slide_all(board, index, ROOK_DIRECTIONS)


def bishop_moves(board: Board, index: int) -> list[int]:
    """Bishop moves: slides along the four non-vertical directions."""
    return _slide_all(board, index, BISHOP_DIRECTIONS)


def queen_moves(board: Board, index: int) -> list[int]:
    """Queen moves: slides along all six directions."""
    return _slide_all(board, index, QUEEN_DIRECTIONS)


def charger_moves(board: Board, index: int) -> list[int]:
    """Charger moves: slides along its color's three forward directions."""
    piece = board[index]
    if piece is None:
        return []
    return _slide_all(board, index, CHARGER_DIRECTIONS[piece.color])


def dragon_moves(board: Board, index: int) -> list[int]:
    """Dragon moves: one or two steps in any direction.

    The two-step move jumps the intermediate cell regardless of what is on it.
    """
    piece = board[index]
    if piece is None:
        return []

    destinations: list[int] = []
    for direction in Direction:
        for steps in (1, 2):
            target = GRID.step(index, direction, steps)
            if target is not None and _can_land(board, piece, target):
                destinations.append(target)
    return destinations


def guardian_moves(board: Board, index: int) -> list[int]:
    """Guardian moves: one step onto any cell (a friendly piece is swapped)."""
    if board[index] is None:
        return []
    return list(GRID.neighbors(index))


MOVE_GENERATORS: MappingProxyType[PieceKind, MoveGenerator] = MappingProxyType(
    {
        PieceKind.PAWN: pawn_moves,
        PieceKind.KING: king_moves,
        PieceKind.KNIGHT: knight_moves,
        PieceKind.ROOK: rook_moves,
        PieceKind.BISHOP: bishop_moves,
        PieceKind.QUEEN: queen_moves,
        PieceKind.CHARGER: charger_moves,
        PieceKind.DRAGON: dragon_moves,
        PieceKind.GUARDIAN: guardian_moves,
    }
)


def legal_destinations(board: Board, index: int) -> list[int]:
    """Get the legal destination cells for the piece on `index`.

    Returns an empty list for an empty cell. King safety is not considered.
    """
    piece = board[index]
    if piece is None:
        return []
    generator = MOVE_GENERATORS.get(piece.kind)
    if generator is None:
        return []
    return generator(board, index)


@dataclass
class MoveEffect:
    """What happened when a move was applied to a board.

    Attributes:
        piece: The piece that moved (before any promotion)
        from_index: Origin cell
        to_index: Destination cell
        captured: Enemy piece removed from the destination, if any
        collateral_index: Cell cleared by a dragon's two-step capture, if any
        collateral: Piece removed from collateral_index, if any
        swapped: Friendly piece a guardian traded places with, if any
        promoted_at: Cell where a pawn was promoted to a queen, if any
    """

    piece: Piece
    from_index: int
    to_index: int
    captured: Piece | None = None
    collateral_index: int | None = None
    collateral: Piece | None = None
    swapped: Piece | None = None
    promoted_at: int | None = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def notation(self) -> str:
        """Format the move for the move log (1-based cells)."""
        if self.swapped is not None:
            text = f"{self.piece.kind}{self.from_index + 1}<>{self.to_index + 1}"
        else:
            sep = "x" if self.captured is not None else "-"
            text = f"{self.piece.kind}{self.from_index + 1}{sep}{self.to_index + 1}"
        if self.collateral_index is not None:
            text += f"*{self.collateral_index + 1}"
        if self.promoted_at is not None:
            text += "=Q"
        return text


def should_promote(piece: Piece | None, index: int) -> bool:
    """Check if a piece standing on `index` should be promoted.

    A pawn is promoted when it stands on the opponent's back rank.
    """
    if piece is None or piece.kind != PieceKind.PAWN:
        return False
    return index in BACK_RANK[piece.color.opponent]


def _dragon_jumped_cell(from_index: int, to_index: int) -> int | None:
    """Intermediate cell of a two-step dragon move, None for a one-step move."""
    for direction in Direction:
        if GRID.step(from_index, direction, 2) == to_index:
            return GRID.step(from_index, direction, 1)
    return None


def apply_move(board: Board, from_index: int, to_index: int) -> MoveEffect:
    """Apply a move to `board` in place.

    The move is not validated; callers check legal_destinations() first.
    Handles guardian swaps, dragon collateral and pawn promotion.
    """
    piece = board[from_index]
    if piece is None:
        raise ValueError(f"No piece on cell {from_index}")

    occupant = board[to_index]
    effect = MoveEffect(piece=piece, from_index=from_index, to_index=to_index)

    if piece.kind == PieceKind.GUARDIAN and occupant is not None and occupant.color == piece.color:
        # Swap with a friendly piece
        board[to_index] = piece
        board[from_index] = occupant
        effect.swapped = occupant
    else:
        if is_enemy(piece, occupant):
            effect.captured = occupant
        board[to_index] = piece
        board[from_index] = None

        if piece.kind == PieceKind.DRAGON and effect.captured is not None:
            jumped = _dragon_jumped_cell(from_index, to_index)
            if jumped is not None and board[jumped] is not None:
                effect.collateral_index = jumped
                effect.collateral = board[jumped]
                board[jumped] = None

    for index in (to_index, from_index):
        promoted = board[index]
        if should_promote(promoted, index):
            board[index] = Piece(promoted.color, PieceKind.QUEEN)
            effect.promoted_at = index

    return effect
