"""Game service for managing active games.

This service maps player keys to colors, dispatches validated commands to the
engine and runs AI turns. Games are stored in-memory only; each game owns its
own state and lock, nothing mutable is shared between games.
"""

import logging
import random
import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from hexchess.ai.base import AIPlayer
from hexchess.ai.capture_first import CaptureFirstAI
from hexchess.game.engine import GameEngine, GameEvent, MoveResult, RejectReason
from hexchess.game.pieces import Color, PieceKind
from hexchess.game.state import GameState
from hexchess.protocol import GameSnapshot
from hexchess.settings import get_settings

logger = logging.getLogger(__name__)

Command = Callable[[GameState, Color, "ManagedGame"], MoveResult]


@dataclass
class ManagedGame:
    """A game being managed by the service.

    Attributes:
        state: The game state
        player_keys: Map of color to secret key for human players
        ai_players: Map of color to AI instance
        rng: Random source for random placement
        lock: Serializes every command on this game
        last_activity: When the game was last accessed
    """

    state: GameState
    player_keys: dict[Color, str] = field(default_factory=dict)
    ai_players: dict[Color, AIPlayer] = field(default_factory=dict)
    rng: random.Random = field(default_factory=random.Random)
    lock: threading.Lock = field(default_factory=threading.Lock)
    last_activity: datetime = field(default_factory=datetime.now)


def _generate_player_key(color: Color) -> str:
    """Generate a secret player key."""
    return f"{color.value.lower()}_{secrets.token_urlsafe(16)}"


def _generate_game_id() -> str:
    """Generate a unique game ID."""
    return secrets.token_urlsafe(6).upper()[:8]


class GameService:
    """Manages active games and their state.

    This service is responsible for:
    - Creating new games (human vs AI or human vs human)
    - Validating player keys
    - Processing setup and play commands
    - Running AI turns after each human command
    """

    def __init__(
        self,
        setup_kinds: tuple[PieceKind, ...] | None = None,
        default_seed: int | None = None,
    ) -> None:
        """Initialize the game service.

        Args:
            setup_kinds: Setup lineup for new games (default R N B Q K)
            default_seed: Seed used by create_game when none is passed
        """
        self.games: dict[str, ManagedGame] = {}
        self.setup_kinds = setup_kinds
        self.default_seed = default_seed
        self._games_lock = threading.Lock()

    def create_game(
        self,
        opponent: str | None = None,
        seed: int | None = None,
    ) -> tuple[str, str, Color]:
        """Create a new game.

        Args:
            opponent: "bot:<name>" for an AI opponent, None for a second human
            seed: Seed for the game's random source and AI (default_seed if None)

        Returns:
            Tuple of (game_id, player_key, color); the creator always plays White
        """
        if seed is None:
            seed = self.default_seed

        with self._games_lock:
            game_id = _generate_game_id()
            while game_id in self.games:
                game_id = _generate_game_id()

            state = GameEngine.create_game(game_id=game_id, setup_kinds=self.setup_kinds)
            player_key = _generate_player_key(Color.WHITE)

            managed_game = ManagedGame(
                state=state,
                player_keys={Color.WHITE: player_key},
                rng=random.Random(seed),
            )
            if opponent is not None:
                bot_name = opponent.removeprefix("bot:")
                managed_game.ai_players[Color.BLACK] = self._create_ai(bot_name, seed)

            self.games[game_id] = managed_game

        logger.info(f"Created game {game_id} (opponent={opponent})")
        return game_id, player_key, Color.WHITE

    def join_game(self, game_id: str) -> tuple[str, Color] | None:
        """Claim the Black seat of a human vs human game.

        Returns:
            Tuple of (player_key, color) or None if the seat is unavailable
        """
        managed_game = self._lookup(game_id)
        if managed_game is None:
            return None

        with managed_game.lock:
            if Color.BLACK in managed_game.player_keys or Color.BLACK in managed_game.ai_players:
                return None
            player_key = _generate_player_key(Color.BLACK)
            managed_game.player_keys[Color.BLACK] = player_key
            managed_game.last_activity = datetime.now()

        return player_key, Color.BLACK

    def _create_ai(self, bot_name: str, seed: int | None) -> AIPlayer:
        """Create an AI instance based on bot name."""
        if bot_name != "capture_first":
            logger.warning(f"Unknown bot {bot_name!r}, using capture_first")
        # Offset the seed so the AI does not mirror the placement shuffles
        rng = random.Random(seed + 1) if seed is not None else random.Random()
        return CaptureFirstAI(rng=rng)

    def get_game(self, game_id: str) -> GameState | None:
        """Get the current game state."""
        managed_game = self.get_managed_game(game_id)
        return managed_game.state if managed_game is not None else None

    def _lookup(self, game_id: str) -> ManagedGame | None:
        with self._games_lock:
            return self.games.get(game_id)

    def get_managed_game(self, game_id: str) -> ManagedGame | None:
        """Get the managed game object."""
        managed_game = self._lookup(game_id)
        if managed_game is not None:
            managed_game.last_activity = datetime.now()
        return managed_game

    def snapshot(self, game_id: str) -> GameSnapshot | None:
        """Get a serializable snapshot of a game."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        with managed_game.lock:
            return GameSnapshot.from_state(managed_game.state)

    def validate_player_key(self, game_id: str, player_key: str) -> Color | None:
        """Validate a player key and return the player's color."""
        managed_game = self._lookup(game_id)
        if managed_game is None:
            return None

        for color, key in managed_game.player_keys.items():
            if key == player_key:
                return color

        return None

    def get_legal_moves(self, game_id: str, player_key: str, index: int) -> list[int] | None:
        """Get legal destinations for one of the player's pieces."""
        managed_game = self._lookup(game_id)
        if managed_game is None or self.validate_player_key(game_id, player_key) is None:
            return None
        with managed_game.lock:
            return GameEngine.legal_moves_for(managed_game.state, index)

    def place_piece(self, game_id: str, player_key: str, target: int, code: str) -> MoveResult:
        """Place one piece during setup."""
        return self._dispatch(
            game_id,
            player_key,
            lambda state, color, _: GameEngine.place_piece(state, color, target, code),
        )

    def place_all(self, game_id: str, player_key: str, randomize: bool = False) -> MoveResult:
        """Place every remaining piece, in pool order or shuffled."""

        def command(state: GameState, color: Color, managed_game: ManagedGame) -> MoveResult:
            if randomize:
                return GameEngine.place_all_random(state, color, managed_game.rng.shuffle)
            return GameEngine.place_all_fixed(state, color)

        return self._dispatch(game_id, player_key, command)

    def play(self, game_id: str, player_key: str, from_index: int, to_index: int) -> MoveResult:
        """Move a piece during play."""
        return self._dispatch(
            game_id,
            player_key,
            lambda state, _color, _game: GameEngine.play(state, from_index, to_index),
        )

    def _dispatch(self, game_id: str, player_key: str, command: Command) -> MoveResult:
        """Run a human command, then any AI turns that follow it."""
        managed_game = self._lookup(game_id)
        if managed_game is None:
            return MoveResult(
                success=False,
                error=RejectReason.GAME_NOT_FOUND,
                message="Game not found",
            )

        color = self.validate_player_key(game_id, player_key)
        if color is None:
            return MoveResult(
                success=False,
                error=RejectReason.INVALID_KEY,
                message="Invalid player key",
            )

        with managed_game.lock:
            managed_game.last_activity = datetime.now()
            state = managed_game.state

            if state.side_to_move != color:
                return MoveResult(
                    success=False,
                    error=RejectReason.WRONG_SIDE,
                    message="It is not your turn",
                )

            result = command(state, color, managed_game)
            if result.success:
                result.events.extend(self._run_ai_turns(managed_game))
            return result

    def _run_ai_turns(self, managed_game: ManagedGame) -> list[GameEvent]:
        """Let AI players move while it is their turn. Caller holds the lock."""
        state = managed_game.state
        events: list[GameEvent] = []

        while GameEngine.check_outcome(state) is None:
            ai = managed_game.ai_players.get(state.side_to_move)
            if ai is None:
                break

            move = ai.get_move(state)
            if move is None:
                break

            result = GameEngine.apply_ai_move(state, move)
            if not result.success:
                logger.warning(
                    f"Game {state.game_id}: AI move {move} rejected ({result.error})"
                )
                break
            events.extend(result.events)

        return events

    def remove_game(self, game_id: str) -> bool:
        """Remove a game. Returns True if it existed."""
        with self._games_lock:
            return self.games.pop(game_id, None) is not None

    def cleanup_stale_games(self, max_age_seconds: int = 3600) -> int:
        """Remove games that haven't been accessed recently.

        Args:
            max_age_seconds: Maximum age in seconds before cleanup

        Returns:
            Number of games cleaned up
        """
        now = datetime.now()
        with self._games_lock:
            stale_games = [
                game_id
                for game_id, game in self.games.items()
                if (now - game.last_activity).total_seconds() > max_age_seconds
            ]
            for game_id in stale_games:
                del self.games[game_id]

        return len(stale_games)


# Global singleton instance
_game_service: GameService | None = None


def get_game_service() -> GameService:
    """Get the global game service instance."""
    global _game_service
    if _game_service is None:
        settings = get_settings()
        _game_service = GameService(
            setup_kinds=settings.setup_kinds,
            default_seed=settings.ai_seed,
        )
    return _game_service
