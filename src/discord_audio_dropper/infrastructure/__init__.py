"""
Infrastructure components for the Discord Audio Dropper system.

This package contains infrastructure concerns including:
- Logging configuration with environment-based levels
- Custom exception definitions
"""

from .logging import setup_logging, get_logger
from .logging_manager import (
    LoggingManager,
    Environment,
    is_production,
    get_environment,
)
from .exceptions import (
    AudioDropperError,
    ConfigurationError,
    PreparationError,
    TranscodeError,
    EmptyInventoryError,
    ChannelError,
    NoActiveChannelError,
    VoiceConnectionError,
    PlaybackError,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "LoggingManager",
    "Environment",
    "is_production",
    "get_environment",
    # Exceptions
    "AudioDropperError",
    "ConfigurationError",
    "PreparationError",
    "TranscodeError",
    "EmptyInventoryError",
    "ChannelError",
    "NoActiveChannelError",
    "VoiceConnectionError",
    "PlaybackError",
]
