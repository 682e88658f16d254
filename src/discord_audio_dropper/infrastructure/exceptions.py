"""
Custom exceptions for the Discord Audio Dropper system.

This module defines all custom exceptions used throughout the system,
split between fatal startup errors and recoverable per-cycle errors.
"""


class AudioDropperError(Exception):
    """Base exception for all Audio Dropper related errors."""

    pass


class ConfigurationError(AudioDropperError):
    """Raised when there are configuration-related errors."""

    pass


class PreparationError(AudioDropperError):
    """Raised when the sound library cannot be prepared."""

    pass


class TranscodeError(PreparationError):
    """Raised when a source clip cannot be encoded."""

    pass


class EmptyInventoryError(PreparationError):
    """Raised when preparation yields no playable clips."""

    pass


class ChannelError(AudioDropperError):
    """Raised when there are voice channel-related errors."""

    pass


class NoActiveChannelError(ChannelError):
    """Raised when no voice channel in the category has participants."""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"No active voice channel in category {category_id}")


class VoiceConnectionError(AudioDropperError):
    """Raised when joining a voice channel fails."""

    pass


class PlaybackError(AudioDropperError):
    """Raised when streaming a clip fails before end of stream."""

    pass
