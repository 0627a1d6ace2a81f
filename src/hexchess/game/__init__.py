"""Game engine module for Hex Chess."""

from hexchess.game.attacks import is_cell_attacked, is_king_attacked, next_position
from hexchess.game.board import (
    BACK_RANK,
    PAWN_START,
    SETUP_POOL,
    Board,
    build_setup_pools,
    is_back_rank,
    is_pawn_start,
)
from hexchess.game.engine import (
    AIMove,
    GameEngine,
    GameEvent,
    GameEventType,
    MoveResult,
    PlacementMove,
    PlayMove,
    RejectReason,
)
from hexchess.game.grid import GRID, Diagonal, Direction, GridError, HexGrid, build_hexagram
from hexchess.game.moves import MOVE_GENERATORS, MoveEffect, apply_move, legal_destinations, slide
from hexchess.game.pieces import (
    PIECES,
    Color,
    Piece,
    PieceKind,
    color_of,
    glyph_of,
    is_enemy,
    kind_of,
)
from hexchess.game.state import GameState, Outcome, Phase, TurnRecord

__all__ = [
    # Grid
    "GRID",
    "HexGrid",
    "Direction",
    "Diagonal",
    "GridError",
    "build_hexagram",
    # Pieces
    "PIECES",
    "Color",
    "Piece",
    "PieceKind",
    "color_of",
    "kind_of",
    "glyph_of",
    "is_enemy",
    # Board
    "Board",
    "BACK_RANK",
    "PAWN_START",
    "SETUP_POOL",
    "build_setup_pools",
    "is_back_rank",
    "is_pawn_start",
    # Moves
    "MOVE_GENERATORS",
    "MoveEffect",
    "apply_move",
    "legal_destinations",
    "slide",
    # Attacks
    "is_cell_attacked",
    "is_king_attacked",
    "next_position",
    # State
    "GameState",
    "Outcome",
    "Phase",
    "TurnRecord",
    # Engine
    "GameEngine",
    "GameEvent",
    "GameEventType",
    "MoveResult",
    "RejectReason",
    "PlacementMove",
    "PlayMove",
    "AIMove",
]
