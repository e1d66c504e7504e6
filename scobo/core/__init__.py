"""Core components of the Scobo score board."""

from .scoreboard import ScoreBoard, ShutdownReport

__all__ = ["ScoreBoard", "ShutdownReport"]
