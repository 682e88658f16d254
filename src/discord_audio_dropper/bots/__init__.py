"""
Discord bot implementations for the Discord Audio Dropper system.
"""

from .dropper_bot import AudioDropperBot, main, prepare_library, run

__all__ = ["AudioDropperBot", "main", "prepare_library", "run"]
