"""Game state management for Hex Chess."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hexchess.game.board import Board
from hexchess.game.pieces import PIECES, Color


class Phase(Enum):
    """Game phase.

    Setup: players alternately place their non-pawn pieces on their back rank.
    Play: normal alternating moves. There is no transition out of play; the
    game ends when GameEngine.check_outcome() reports a result.
    """

    SETUP = "setup"
    PLAY = "play"


class Outcome(Enum):
    """Final result of a game."""

    WHITE_WINS = "white_wins"
    BLACK_WINS = "black_wins"
    DRAW = "draw"

    @classmethod
    def win_for(cls, color: Color) -> "Outcome":
        return cls.WHITE_WINS if color == Color.WHITE else cls.BLACK_WINS

    @property
    def winner(self) -> Color | None:
        """Winning color, or None for a draw."""
        if self == Outcome.WHITE_WINS:
            return Color.WHITE
        if self == Outcome.BLACK_WINS:
            return Color.BLACK
        return None


@dataclass
class TurnRecord:
    """One row of the move log: at most one entry per color.

    Attributes:
        turn: 1-based turn number
        white: White's move text for this turn
        black: Black's move text for this turn
    """

    turn: int
    white: str | None = None
    black: str | None = None


@dataclass
class GameState:
    """Complete state of a Hex Chess game.

    Attributes:
        game_id: Unique identifier for the game
        board: Current board
        phase: Current phase
        setup_pools: Piece codes each color still has to place
        move_log: Human-readable move history, one record per turn
        ply: Moves made in the current phase; even means White to move
    """

    game_id: str
    board: Board
    phase: Phase = Phase.SETUP
    setup_pools: dict[Color, list[str]] = field(
        default_factory=lambda: {Color.WHITE: [], Color.BLACK: []}
    )
    move_log: list[TurnRecord] = field(default_factory=list)
    ply: int = 0

    @property
    def side_to_move(self) -> Color:
        """Color whose turn it is."""
        return Color.WHITE if self.ply % 2 == 0 else Color.BLACK

    @property
    def is_setup(self) -> bool:
        return self.phase == Phase.SETUP

    @property
    def is_playing(self) -> bool:
        return self.phase == Phase.PLAY

    def record_move(self, color: Color, text: str) -> None:
        """Append an entry to the move log.

        White always opens a new turn record. Black fills the latest record
        if its black slot is free, otherwise opens a new record.
        """
        last = self.move_log[-1] if self.move_log else None
        if color == Color.BLACK and last is not None and last.black is None:
            last.black = text
            return

        record = TurnRecord(turn=len(self.move_log) + 1)
        if color == Color.WHITE:
            record.white = text
        else:
            record.black = text
        self.move_log.append(record)

    @property
    def last_move(self) -> str | None:
        """Most recent move log entry, if any."""
        if not self.move_log:
            return None
        last = self.move_log[-1]
        return last.black if last.black is not None else last.white

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return GameState(
            game_id=self.game_id,
            board=self.board.copy(),
            phase=self.phase,
            setup_pools={color: list(pool) for color, pool in self.setup_pools.items()},
            move_log=[
                TurnRecord(turn=r.turn, white=r.white, black=r.black) for r in self.move_log
            ],
            ply=self.ply,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize game state to a dictionary."""
        return {
            "game_id": self.game_id,
            "cells": self.board.codes(),
            "phase": self.phase.value,
            "setup_pools": {
                color.value: list(pool) for color, pool in self.setup_pools.items()
            },
            "move_log": [
                {"turn": r.turn, "white": r.white, "black": r.black} for r in self.move_log
            ],
            "ply": self.ply,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Rebuild a game state produced by to_dict().

        Raises:
            KeyError: If a piece code is unknown
            ValueError: If a color or phase is unknown or the cell count is wrong
        """
        cells = [PIECES[code] if code is not None else None for code in data["cells"]]
        pools = {Color(color): list(pool) for color, pool in data["setup_pools"].items()}
        for color in Color:
            pools.setdefault(color, [])

        return cls(
            game_id=data["game_id"],
            board=Board(cells=cells),
            phase=Phase(data["phase"]),
            setup_pools=pools,
            move_log=[
                TurnRecord(turn=r["turn"], white=r.get("white"), black=r.get("black"))
                for r in data["move_log"]
            ],
            ply=data["ply"],
        )
