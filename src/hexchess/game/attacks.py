"""King safety detection and look-ahead positions.

is_cell_attacked() mirrors every attacking pattern in moves.py. A new piece
kind must be added here as well, or the AI's king-safety pruning will miss
its attacks.
"""

from hexchess.game.board import Board
from hexchess.game.grid import GRID, Direction
from hexchess.game.moves import (
    BISHOP_DIRECTIONS,
    CHARGER_DIRECTIONS,
    PAWN_CAPTURE_DIRECTIONS,
    ROOK_DIRECTIONS,
    apply_move,
    knight_targets,
)
from hexchess.game.pieces import Color, Piece, PieceKind

_ADJACENT_ATTACKERS = frozenset({PieceKind.KING, PieceKind.DRAGON, PieceKind.GUARDIAN})


def _first_occupant(board: Board, index: int, direction: int) -> Piece | None:
    current = index
    while True:
        nxt = GRID.step(current, direction)
        if nxt is None:
            return None
        if board[nxt] is not None:
            return board[nxt]
        current = nxt


def _is_enemy_kind(piece: Piece | None, enemy: Color, *kinds: PieceKind) -> bool:
    return piece is not None and piece.color == enemy and piece.kind in kinds


def is_cell_attacked(board: Board, index: int, defender: Color) -> bool:
    """Check whether any enemy of `defender` attacks the cell `index`.

    Checked in order: pawns, knights, rook/bishop/queen rays, charger rays,
    then adjacent kings, dragons and guardians plus two-step dragon jumps.
    """
    enemy = defender.opponent

    # 1) Pawns: an enemy pawn sits where the defender's own pawn would capture
    for direction in PAWN_CAPTURE_DIRECTIONS[defender]:
        source = GRID.step(index, direction)
        if source is not None and _is_enemy_kind(board[source], enemy, PieceKind.PAWN):
            return True

    # 2) Knights (L-jumps are symmetric)
    for source in knight_targets(index):
        if _is_enemy_kind(board[source], enemy, PieceKind.KNIGHT):
            return True

    # 3) Sliding rook/bishop/queen rays
    for direction in Direction:
        attacker = _first_occupant(board, index, direction)
        if _is_enemy_kind(attacker, enemy, PieceKind.QUEEN):
            return True
        if direction in ROOK_DIRECTIONS and _is_enemy_kind(attacker, enemy, PieceKind.ROOK):
            return True
        if direction in BISHOP_DIRECTIONS and _is_enemy_kind(attacker, enemy, PieceKind.BISHOP):
            return True

    # 4) Chargers only attack along their forward directions
    for direction in Direction:
        reverse = Direction((direction + 3) % 6)
        if reverse not in CHARGER_DIRECTIONS[enemy]:
            continue
        attacker = _first_occupant(board, index, direction)
        if _is_enemy_kind(attacker, enemy, PieceKind.CHARGER):
            return True

    # 5) Contact attacks
    for direction in Direction:
        source = GRID.step(index, direction, 1)
        if source is not None and board[source] is not None:
            piece = board[source]
            if piece.color == enemy and piece.kind in _ADJACENT_ATTACKERS:
                return True
        jump = GRID.step(index, direction, 2)
        if jump is not None and _is_enemy_kind(board[jump], enemy, PieceKind.DRAGON):
            return True

    return False


def is_king_attacked(board: Board, color: Color) -> bool:
    """Check whether the king of `color` is attacked.

    A missing (captured) king counts as attacked.
    """
    king_index = board.find_king(color)
    if king_index is None:
        return True
    return is_cell_attacked(board, king_index, color)


def next_position(board: Board, from_index: int, to_index: int) -> Board:
    """Return the board after a move, leaving `board` untouched.

    Includes the move's side effects (collateral, swap, promotion). Used for
    look-ahead only; real moves go through the engine.
    """
    preview = board.copy()
    apply_move(preview, from_index, to_index)
    return preview
