"""Self-play entry point for Hex Chess.

Runs one AI vs AI game from setup to the end and prints the move log. Useful
as a smoke test of the engine: `python -m hexchess.main --seed 7`.
"""

import argparse
import logging
import random
import sys

from hexchess.ai.capture_first import CaptureFirstAI
from hexchess.game.engine import GameEngine
from hexchess.game.pieces import Color
from hexchess.game.state import GameState, Outcome
from hexchess.settings import get_settings

logger = logging.getLogger(__name__)

# Stop runaway games between two passive AIs
MAX_PLIES = 500


def setup_logging(level: str | None = None) -> None:
    """Configure logging for the application."""
    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if level is None:
        level = get_settings().log_level

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("hexchess").setLevel(level)


def run_selfplay(
    seed: int | None = None,
    max_plies: int = MAX_PLIES,
) -> tuple[GameState, Outcome | None]:
    """Play one AI vs AI game.

    Args:
        seed: Seed for both AIs (None for a random game)
        max_plies: Give up after this many play-phase moves

    Returns:
        Tuple of (final state, outcome or None if the ply limit was hit)
    """
    settings = get_settings()
    state = GameEngine.create_game(setup_kinds=settings.setup_kinds)
    base = random.Random(seed)
    players = {color: CaptureFirstAI(rng=random.Random(base.random())) for color in Color}

    plies = 0
    while plies < max_plies:
        outcome = GameEngine.check_outcome(state)
        if outcome is not None:
            return state, outcome

        move = players[state.side_to_move].get_move(state)
        if move is None:
            break

        was_playing = state.is_playing
        result = GameEngine.apply_ai_move(state, move)
        if not result.success:
            logger.error(f"AI produced a rejected move {move}: {result.error}")
            break
        if was_playing:
            plies += 1

    logger.info(f"Game {state.game_id} stopped after {plies} plies without a result")
    return state, GameEngine.check_outcome(state)


def main(argv: list[str] | None = None) -> int:
    """Run a self-play game and print the move log."""
    parser = argparse.ArgumentParser(description="Play one Hex Chess game between two AIs")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--max-plies", type=int, default=MAX_PLIES)
    args = parser.parse_args(argv)

    setup_logging()
    seed = args.seed if args.seed is not None else get_settings().ai_seed

    state, outcome = run_selfplay(seed=seed, max_plies=args.max_plies)
    for record in state.move_log:
        print(f"{record.turn:>3}. {record.white or '...':<24} {record.black or '...'}")
    print(f"Result: {outcome.value if outcome is not None else 'unfinished'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
