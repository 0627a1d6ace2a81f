"""Core game engine for Hex Chess.

This module provides the main game logic. State is mutated in place by the
command methods (place_piece, place_all_fixed, place_all_random, play); a
rejected command leaves the state untouched. Use GameState.copy() if you
need to preserve state.

King safety is only consulted by enumerate_ai_moves(). Human and API moves
are validated against piece movement rules alone: kings may be left
attacked, and capturing a king is the only way to win.
"""

import logging
import uuid
from collections.abc import Callable, MutableSequence, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hexchess.game.attacks import is_king_attacked, next_position
from hexchess.game.board import Board, build_setup_pools, is_back_rank
from hexchess.game.grid import GRID
from hexchess.game.moves import apply_move, legal_destinations
from hexchess.game.pieces import PIECES, Color, PieceKind
from hexchess.game.state import GameState, Outcome, Phase

logger = logging.getLogger(__name__)

Shuffle = Callable[[MutableSequence[Any]], None]


class GameEventType(Enum):
    """Types of events produced by engine commands."""

    PIECE_PLACED = "piece_placed"
    MOVE = "move"
    CAPTURE = "capture"
    COLLATERAL_CAPTURE = "collateral_capture"
    SWAP = "swap"
    PROMOTION = "promotion"
    PHASE_CHANGED = "phase_changed"
    GAME_OVER = "game_over"
    DRAW = "draw"


@dataclass
class GameEvent:
    """An event that occurred while applying a command.

    Attributes:
        type: Type of event
        ply: Ply at which the event occurred
        data: Event-specific data
    """

    type: GameEventType
    ply: int
    data: dict


class RejectReason(Enum):
    """Why a command was rejected."""

    WRONG_PHASE = "wrong_phase"
    GAME_OVER = "game_over"
    WRONG_SIDE = "wrong_side"
    INVALID_INDEX = "invalid_index"
    EMPTY_CELL = "empty_cell"
    ILLEGAL_DESTINATION = "illegal_destination"
    NOT_BACK_RANK = "not_back_rank"
    CELL_OCCUPIED = "cell_occupied"
    NOT_IN_POOL = "not_in_pool"
    WRONG_COLOR = "wrong_color"
    NOTHING_TO_PLACE = "nothing_to_place"
    # Raised by the game service, not the engine
    GAME_NOT_FOUND = "game_not_found"
    INVALID_KEY = "invalid_key"


@dataclass
class MoveResult:
    """Result of attempting a command."""

    success: bool
    error: RejectReason | None = None
    message: str | None = None
    events: list[GameEvent] = field(default_factory=list)


@dataclass(frozen=True)
class PlacementMove:
    """A setup-phase candidate: place `code` on `target`."""

    color: Color
    target: int
    code: str


@dataclass(frozen=True)
class PlayMove:
    """A play-phase candidate: move the piece on `from_index` to `to_index`."""

    from_index: int
    to_index: int


AIMove = PlacementMove | PlayMove


def _reject(error: RejectReason, message: str) -> MoveResult:
    logger.debug(f"Rejected command: {error.value} ({message})")
    return MoveResult(success=False, error=error, message=message)


class GameEngine:
    """Core game logic for Hex Chess.

    All methods are static. Commands mutate state in place and return a
    MoveResult carrying the events they produced.
    """

    @staticmethod
    def create_game(
        game_id: str | None = None,
        setup_kinds: Sequence[PieceKind] | None = None,
    ) -> GameState:
        """Create a new game in the setup phase with pawns already placed.

        Args:
            game_id: Optional game ID (generated if not provided)
            setup_kinds: Lineup each side places during setup (default R N B Q K)

        Returns:
            New GameState instance
        """
        if game_id is None:
            game_id = str(uuid.uuid4())[:8].upper()

        return GameState(
            game_id=game_id,
            board=Board.create_initial(),
            phase=Phase.SETUP,
            setup_pools=build_setup_pools(setup_kinds),
        )

    @staticmethod
    def create_game_from_board(
        board: Board,
        phase: Phase = Phase.PLAY,
        side_to_move: Color = Color.WHITE,
        game_id: str | None = None,
    ) -> GameState:
        """Create a game from a custom position (for tests and puzzles).

        Setup pools start empty.
        """
        if game_id is None:
            game_id = str(uuid.uuid4())[:8].upper()

        return GameState(
            game_id=game_id,
            board=board,
            phase=phase,
            ply=0 if side_to_move == Color.WHITE else 1,
        )

    # Setup phase

    @staticmethod
    def can_place(state: GameState, color: Color) -> bool:
        """Check if `color` still has a piece and an empty back-rank cell."""
        return bool(state.setup_pools[color]) and bool(state.board.empty_back_rank(color))

    @staticmethod
    def _check_setup_turn(state: GameState, color: Color) -> MoveResult | None:
        if state.phase != Phase.SETUP:
            return _reject(RejectReason.WRONG_PHASE, "Not in setup phase")
        if color != state.side_to_move:
            return _reject(RejectReason.WRONG_SIDE, f"It is not {color.name}'s turn")
        return None

    @staticmethod
    def place_piece(state: GameState, color: Color, target: int, code: str) -> MoveResult:
        """Place one piece from `color`'s pool on one of its back-rank cells.

        Args:
            state: Game state (mutated on success)
            color: Acting color
            target: Back-rank cell index
            code: Piece code from the color's pool (e.g. "WR")

        Returns:
            MoveResult with PIECE_PLACED (and possibly PHASE_CHANGED) events
        """
        rejection = GameEngine._check_setup_turn(state, color)
        if rejection is not None:
            return rejection

        if not GRID.is_valid_index(target) or not is_back_rank(color, target):
            return _reject(RejectReason.NOT_BACK_RANK, f"Cell {target} is not a back-rank cell")
        if not state.board.is_empty(target):
            return _reject(RejectReason.CELL_OCCUPIED, f"Cell {target} is occupied")
        if code not in state.setup_pools[color]:
            return _reject(RejectReason.NOT_IN_POOL, f"{code} is not in the setup pool")
        piece = PIECES.get(code)
        if piece is None or piece.color != color:
            return _reject(RejectReason.WRONG_COLOR, f"{code} does not belong to {color.name}")

        state.board[target] = piece
        state.setup_pools[color].remove(code)
        state.record_move(color, f"{piece.kind}@{target + 1}")

        events = [
            GameEvent(
                type=GameEventType.PIECE_PLACED,
                ply=state.ply,
                data={"color": color.value, "target": target, "code": code},
            )
        ]
        events.extend(GameEngine._end_setup_turn(state))
        return MoveResult(success=True, events=events)

    @staticmethod
    def place_all_fixed(state: GameState, color: Color) -> MoveResult:
        """Fill every empty back-rank cell of `color` in pool order."""
        return GameEngine._place_all(state, color, shuffle=None)

    @staticmethod
    def place_all_random(state: GameState, color: Color, shuffle: Shuffle) -> MoveResult:
        """Fill every empty back-rank cell of `color` in shuffled pool order.

        Args:
            state: Game state (mutated on success)
            color: Acting color
            shuffle: In-place shuffle, e.g. random.Random(seed).shuffle
        """
        return GameEngine._place_all(state, color, shuffle=shuffle)

    @staticmethod
    def _place_all(state: GameState, color: Color, shuffle: Shuffle | None) -> MoveResult:
        rejection = GameEngine._check_setup_turn(state, color)
        if rejection is not None:
            return rejection

        cells = state.board.empty_back_rank(color)
        pool = state.setup_pools[color]
        count = min(len(cells), len(pool))
        if count == 0:
            return _reject(RejectReason.NOTHING_TO_PLACE, f"{color.name} has nothing to place")

        order = list(pool)
        if shuffle is not None:
            shuffle(order)

        events: list[GameEvent] = []
        entries: list[str] = []
        for target, code in zip(cells[:count], order[:count]):
            piece = PIECES[code]
            state.board[target] = piece
            pool.remove(code)
            entries.append(f"{piece.kind}@{target + 1}")
            events.append(
                GameEvent(
                    type=GameEventType.PIECE_PLACED,
                    ply=state.ply,
                    data={"color": color.value, "target": target, "code": code},
                )
            )

        state.record_move(color, " ".join(entries))
        events.extend(GameEngine._end_setup_turn(state))
        return MoveResult(success=True, events=events)

    @staticmethod
    def _end_setup_turn(state: GameState) -> list[GameEvent]:
        """Pass the turn, skipping a color with nothing left to place.

        Switches to the play phase (White to move) once neither color can place.
        """
        state.ply += 1
        if not GameEngine.can_place(state, state.side_to_move):
            state.ply += 1

        if any(GameEngine.can_place(state, color) for color in Color):
            return []

        state.phase = Phase.PLAY
        state.ply = 0
        logger.info(f"Game {state.game_id}: setup complete, starting play")
        return [
            GameEvent(
                type=GameEventType.PHASE_CHANGED,
                ply=state.ply,
                data={"phase": Phase.PLAY.value},
            )
        ]

    # Play phase

    @staticmethod
    def play(state: GameState, from_index: int, to_index: int) -> MoveResult:
        """Move the piece on `from_index` to `to_index`.

        Only piece movement rules are checked; a move may leave the mover's
        own king attacked.

        Args:
            state: Game state (mutated on success)
            from_index: Cell of the piece to move
            to_index: Destination cell

        Returns:
            MoveResult with MOVE and any CAPTURE, COLLATERAL_CAPTURE, SWAP,
            PROMOTION, GAME_OVER or DRAW events
        """
        if state.phase != Phase.PLAY:
            return _reject(RejectReason.WRONG_PHASE, "Not in play phase")
        if GameEngine.check_outcome(state) is not None:
            return _reject(RejectReason.GAME_OVER, "The game is over")
        if not GRID.is_valid_index(from_index) or not GRID.is_valid_index(to_index):
            return _reject(RejectReason.INVALID_INDEX, f"Invalid cell {from_index} or {to_index}")

        piece = state.board[from_index]
        if piece is None:
            return _reject(RejectReason.EMPTY_CELL, f"Cell {from_index} is empty")
        mover = state.side_to_move
        if piece.color != mover:
            return _reject(RejectReason.WRONG_SIDE, f"It is not {piece.color.name}'s turn")
        if to_index not in legal_destinations(state.board, from_index):
            return _reject(
                RejectReason.ILLEGAL_DESTINATION,
                f"{piece.code} cannot move from {from_index} to {to_index}",
            )

        ply = state.ply
        effect = apply_move(state.board, from_index, to_index)
        state.record_move(mover, effect.notation())

        events = [
            GameEvent(
                type=GameEventType.MOVE,
                ply=ply,
                data={"code": piece.code, "from": from_index, "to": to_index},
            )
        ]
        if effect.captured is not None:
            events.append(
                GameEvent(
                    type=GameEventType.CAPTURE,
                    ply=ply,
                    data={"captured": effect.captured.code, "position": to_index},
                )
            )
        if effect.collateral is not None:
            events.append(
                GameEvent(
                    type=GameEventType.COLLATERAL_CAPTURE,
                    ply=ply,
                    data={"captured": effect.collateral.code, "position": effect.collateral_index},
                )
            )
        if effect.swapped is not None:
            events.append(
                GameEvent(
                    type=GameEventType.SWAP,
                    ply=ply,
                    data={"swapped": effect.swapped.code, "position": from_index},
                )
            )
        if effect.promoted_at is not None:
            events.append(
                GameEvent(
                    type=GameEventType.PROMOTION,
                    ply=ply,
                    data={"position": effect.promoted_at, "new_kind": PieceKind.QUEEN.value},
                )
            )

        state.ply += 1

        outcome = GameEngine.check_outcome(state)
        if outcome is not None:
            logger.info(f"Game {state.game_id} finished: {outcome.value}")
            if outcome == Outcome.DRAW:
                events.append(GameEvent(type=GameEventType.DRAW, ply=state.ply, data={}))
            else:
                events.append(
                    GameEvent(
                        type=GameEventType.GAME_OVER,
                        ply=state.ply,
                        data={"winner": outcome.winner.value},
                    )
                )

        return MoveResult(success=True, events=events)

    @staticmethod
    def check_outcome(state: GameState) -> Outcome | None:
        """Evaluate end conditions. Never ends the game during setup.

        Returns:
            None if the game continues, otherwise the Outcome
        """
        if state.phase != Phase.PLAY:
            return None

        kings = [color for color in Color if state.board.find_king(color) is not None]

        if not kings:
            return Outcome.DRAW
        if len(kings) == 1:
            return Outcome.win_for(kings[0])
        if not GameEngine.get_legal_moves(state, state.side_to_move):
            return Outcome.DRAW
        return None

    # Queries

    @staticmethod
    def legal_moves_for(state: GameState, index: int) -> list[int]:
        """Get legal destinations for the piece on `index` (read-only)."""
        if not GRID.is_valid_index(index):
            return []
        return legal_destinations(state.board, index)

    @staticmethod
    def get_legal_moves(state: GameState, color: Color) -> list[PlayMove]:
        """Get every legal move of `color`, ignoring king safety."""
        return [
            PlayMove(from_index, to_index)
            for from_index, _ in state.board.get_pieces_for_color(color)
            for to_index in legal_destinations(state.board, from_index)
        ]

    @staticmethod
    def enumerate_ai_moves(state: GameState) -> list[AIMove]:
        """Enumerate candidate moves for the side to move.

        Setup: every (empty back-rank cell, pool code) pair.
        Play: legal moves that do not leave the mover's king attacked (all
        legal moves if none are safe), moves onto occupied cells first.
        """
        color = state.side_to_move

        if state.phase == Phase.SETUP:
            return [
                PlacementMove(color=color, target=target, code=code)
                for target in state.board.empty_back_rank(color)
                for code in state.setup_pools[color]
            ]

        if GameEngine.check_outcome(state) is not None:
            return []

        all_moves = GameEngine.get_legal_moves(state, color)
        safe_moves = [
            move
            for move in all_moves
            if not is_king_attacked(
                next_position(state.board, move.from_index, move.to_index), color
            )
        ]
        candidates = safe_moves or all_moves
        return sorted(candidates, key=lambda move: state.board.is_empty(move.to_index))

    @staticmethod
    def apply_ai_move(state: GameState, move: AIMove) -> MoveResult:
        """Dispatch an enumerated candidate to the matching command."""
        if isinstance(move, PlacementMove):
            return GameEngine.place_piece(state, move.color, move.target, move.code)
        return GameEngine.play(state, move.from_index, move.to_index)
