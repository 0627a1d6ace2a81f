"""Wire models for exposing and driving a game.

GameSnapshot round-trips a GameState losslessly (board, phase, setup pools,
move log and turn counter). The move log cannot be rebuilt from the board, so
it is always carried along.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ValidationError, field_validator

from hexchess.game.engine import GameEngine, MoveResult
from hexchess.game.grid import GRID
from hexchess.game.pieces import PIECES, Color
from hexchess.game.state import GameState


class ClientMessageType(Enum):
    """Types of messages sent from client to server."""

    PLACE = "place"
    PLACE_ALL = "place_all"
    PLAY = "play"


class TurnRecordModel(BaseModel):
    """One row of the move log."""

    turn: int
    white: str | None = None
    black: str | None = None


class GameSnapshot(BaseModel):
    """Full, serializable game state."""

    type: str = "state"
    game_id: str
    cells: list[str | None]
    phase: Literal["setup", "play"]
    setup_pools: dict[str, list[str]]
    move_log: list[TurnRecordModel]
    ply: int
    side_to_move: str | None = None
    outcome: str | None = None  # "white_wins" | "black_wins" | "draw"

    @field_validator("cells")
    @classmethod
    def _check_cells(cls, cells: list[str | None]) -> list[str | None]:
        if len(cells) != len(GRID):
            raise ValueError(f"Expected {len(GRID)} cells, got {len(cells)}")
        for code in cells:
            if code is not None and code not in PIECES:
                raise ValueError(f"Unknown piece code: {code}")
        return cells

    @field_validator("setup_pools")
    @classmethod
    def _check_pools(cls, pools: dict[str, list[str]]) -> dict[str, list[str]]:
        for color, codes in pools.items():
            if color not in {c.value for c in Color}:
                raise ValueError(f"Unknown color: {color}")
            for code in codes:
                if PIECES.get(code) is None or PIECES[code].color.value != color:
                    raise ValueError(f"Invalid pool entry for {color}: {code}")
        return pools

    @classmethod
    def from_state(cls, state: GameState) -> "GameSnapshot":
        """Build a snapshot of the current state."""
        outcome = GameEngine.check_outcome(state)
        return cls.model_validate(
            {
                **state.to_dict(),
                "side_to_move": state.side_to_move.value,
                "outcome": outcome.value if outcome is not None else None,
            }
        )

    def to_state(self) -> GameState:
        """Rebuild the game state from this snapshot."""
        return GameState.from_dict(
            self.model_dump(exclude={"type", "side_to_move", "outcome"})
        )


# Client -> Server Messages


class PlaceMessage(BaseModel):
    """Request to place one piece during setup."""

    type: str = "place"
    target: int
    code: str


class PlaceAllMessage(BaseModel):
    """Request to fill the remaining back-rank cells."""

    type: str = "place_all"
    random: bool = False


class PlayMessage(BaseModel):
    """Request to move a piece."""

    type: str = "play"
    from_index: int
    to_index: int


# Server -> Client Messages


class MoveRejectedMessage(BaseModel):
    """Sent when a command is rejected."""

    type: str = "move_rejected"
    reason: str | None
    message: str | None = None

    @classmethod
    def from_result(cls, result: MoveResult) -> "MoveRejectedMessage":
        return cls(
            reason=result.error.value if result.error is not None else None,
            message=result.message,
        )


def parse_client_message(
    data: dict[str, Any],
) -> PlaceMessage | PlaceAllMessage | PlayMessage | None:
    """Parse a client message from JSON data.

    Args:
        data: Parsed JSON data

    Returns:
        Parsed message or None if invalid
    """
    msg_type = data.get("type")

    try:
        if msg_type == ClientMessageType.PLACE.value:
            return PlaceMessage.model_validate(data)
        elif msg_type == ClientMessageType.PLACE_ALL.value:
            return PlaceAllMessage.model_validate(data)
        elif msg_type == ClientMessageType.PLAY.value:
            return PlayMessage.model_validate(data)
    except ValidationError:
        return None

    return None
