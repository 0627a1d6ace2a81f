"""AI that prefers captures and otherwise moves at random.

Candidates come from GameEngine.enumerate_ai_moves(), which already drops
moves that leave the AI's king attacked and lists captures first.
"""

import random

from hexchess.ai.base import AIPlayer
from hexchess.game.engine import AIMove, GameEngine, PlayMove
from hexchess.game.pieces import is_enemy
from hexchess.game.state import GameState


class CaptureFirstAI(AIPlayer):
    """Picks a random capture if one exists, else a random candidate."""

    def __init__(self, rng: random.Random | None = None):
        """Initialize the AI.

        Args:
            rng: Random source; pass a seeded instance for reproducible games
        """
        self.rng = rng if rng is not None else random.Random()

    def get_move(self, state: GameState) -> AIMove | None:
        """Return a capture when available, otherwise any candidate."""
        candidates = GameEngine.enumerate_ai_moves(state)
        if not candidates:
            return None

        captures = [
            move
            for move in candidates
            if isinstance(move, PlayMove)
            and is_enemy(state.board[move.from_index], state.board[move.to_index])
        ]
        return self.rng.choice(captures or candidates)
