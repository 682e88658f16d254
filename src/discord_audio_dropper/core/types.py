"""
Common types and constants for the Discord Audio Dropper system.

This module centralizes environment variable names and defaults to avoid
hardcoding throughout the codebase.
"""

from typing import Final

# Environment Variable Names (from .env file)
ENV_TOKEN: Final[str] = "TOKEN"
ENV_CLIENT_ID: Final[str] = "CLIENT_ID"
ENV_GUILD_ID: Final[str] = "GUILD_ID"
ENV_CATEGORY_ID: Final[str] = "CATEGORY_ID"
ENV_AUDIO_INPUT_FOLDER: Final[str] = "AUDIO_INPUT_FOLDER"
ENV_AUDIO_OUTPUT_FOLDER: Final[str] = "AUDIO_OUTPUT_FOLDER"
ENV_INTERVAL_SECONDS: Final[str] = "INTERVAL_SECONDS"
ENV_RANDOM_SEED: Final[str] = "RANDOM_SEED"
ENV_BOT_STATUS: Final[str] = "BOT_STATUS"
ENV_LOG_LEVEL: Final[str] = "LOG_LEVEL"
ENV_FFMPEG_PATH: Final[str] = "FFMPEG_PATH"

# Default Values
DEFAULT_AUDIO_INPUT_FOLDER: Final[str] = "resources/audio"
DEFAULT_AUDIO_OUTPUT_FOLDER: Final[str] = "resources/encoded"
DEFAULT_INTERVAL_SECONDS: Final[float] = 60.0
DEFAULT_SETTLE_DELAY: Final[float] = 0.25
DEFAULT_BOT_STATUS: Final[str] = "😈"
DEFAULT_FFMPEG_PATH: Final[str] = "ffmpeg"

# Encoding
ENCODED_EXTENSION: Final[str] = ".dca"
PARTIAL_EXTENSION: Final[str] = ".part"
ENCODE_BITRATE_KBPS: Final[int] = 96
ENCODE_SAMPLE_RATE: Final[int] = 48000
ENCODE_CHANNELS: Final[int] = 2
ENCODE_FRAME_DURATION_MS: Final[int] = 20
