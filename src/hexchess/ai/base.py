"""Base class for AI implementations."""

from abc import ABC, abstractmethod

from hexchess.game.engine import AIMove
from hexchess.game.state import GameState


class AIPlayer(ABC):
    """Base class for AI implementations.

    AI players pick one of the candidates the engine enumerates for the side
    to move. The engine itself never chooses a move.
    """

    @abstractmethod
    def get_move(self, state: GameState) -> AIMove | None:
        """Return the move the AI wants to make.

        Args:
            state: Current game state (the AI plays the side to move)

        Returns:
            A placement or play move, or None if there is nothing to do
        """
