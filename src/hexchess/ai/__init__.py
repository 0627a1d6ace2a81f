"""AI players for Hex Chess."""

from hexchess.ai.base import AIPlayer
from hexchess.ai.capture_first import CaptureFirstAI

__all__ = ["AIPlayer", "CaptureFirstAI"]
