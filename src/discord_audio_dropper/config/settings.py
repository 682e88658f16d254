"""
Configuration management for the Discord Audio Dropper bot.

The configuration is read from the environment once at startup and frozen;
components receive it explicitly instead of reading globals.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from discord_audio_dropper.core.types import (
    DEFAULT_AUDIO_INPUT_FOLDER,
    DEFAULT_AUDIO_OUTPUT_FOLDER,
    DEFAULT_BOT_STATUS,
    DEFAULT_FFMPEG_PATH,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_SETTLE_DELAY,
    ENV_AUDIO_INPUT_FOLDER,
    ENV_AUDIO_OUTPUT_FOLDER,
    ENV_BOT_STATUS,
    ENV_CATEGORY_ID,
    ENV_CLIENT_ID,
    ENV_FFMPEG_PATH,
    ENV_GUILD_ID,
    ENV_INTERVAL_SECONDS,
    ENV_LOG_LEVEL,
    ENV_RANDOM_SEED,
    ENV_TOKEN,
)
from discord_audio_dropper.infrastructure.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DropperConfig:
    """Immutable configuration for the audio dropper bot."""

    # Required configuration
    token: str
    guild_id: int
    category_id: int

    # Optional configuration with defaults
    client_id: Optional[int] = None
    audio_input_folder: Path = Path(DEFAULT_AUDIO_INPUT_FOLDER)
    audio_output_folder: Path = Path(DEFAULT_AUDIO_OUTPUT_FOLDER)
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    settle_delay: float = DEFAULT_SETTLE_DELAY
    random_seed: Optional[int] = None
    bot_status: str = DEFAULT_BOT_STATUS
    ffmpeg_path: str = DEFAULT_FFMPEG_PATH
    log_level: Optional[str] = None

    def __post_init__(self):
        """Validate values that can be wrong even when present."""
        if self.interval_seconds <= 0:
            raise ConfigurationError(
                f"{ENV_INTERVAL_SECONDS} must be positive, got {self.interval_seconds}"
            )
        if self.settle_delay < 0:
            raise ConfigurationError(
                f"settle_delay must not be negative, got {self.settle_delay}"
            )


class ConfigManager:
    """Builds a :class:`DropperConfig` from environment variables."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to environment file
        """
        self.env_file_path = env_file_path
        self._load_environment()

    def _load_environment(self):
        """Load environment variables from file."""
        if os.path.exists(self.env_file_path):
            load_dotenv(dotenv_path=self.env_file_path)
            logger.info(f"Loaded environment from {self.env_file_path}")
        else:
            logger.debug(f"Environment file {self.env_file_path} not found")

    def _get_required_env(self, key: str) -> str:
        """
        Get required environment variable.

        Raises:
            ConfigurationError: If environment variable is not set
        """
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"Required environment variable {key} is not set")
        return value

    def _get_optional_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get optional environment variable, treating empty values as unset."""
        return os.getenv(key) or default

    @staticmethod
    def _parse_int(key: str, value: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(
                f"Environment variable {key} must be an integer, got {value!r}"
            ) from None

    def _get_optional_int(self, key: str) -> Optional[int]:
        value = self._get_optional_env(key)
        return None if value is None else self._parse_int(key, value)

    def _get_interval(self) -> float:
        value = self._get_optional_env(ENV_INTERVAL_SECONDS)
        if value is None:
            return DEFAULT_INTERVAL_SECONDS
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(
                f"Environment variable {ENV_INTERVAL_SECONDS} must be a number, got {value!r}"
            ) from None

    def get_config(self) -> DropperConfig:
        """
        Get the bot configuration.

        Returns:
            DropperConfig: Bot configuration

        Raises:
            ConfigurationError: If required configuration is missing or malformed
        """
        try:
            config = DropperConfig(
                token=self._get_required_env(ENV_TOKEN),
                guild_id=self._parse_int(
                    ENV_GUILD_ID, self._get_required_env(ENV_GUILD_ID)
                ),
                category_id=self._parse_int(
                    ENV_CATEGORY_ID, self._get_required_env(ENV_CATEGORY_ID)
                ),
                client_id=self._get_optional_int(ENV_CLIENT_ID),
                audio_input_folder=Path(
                    self._get_optional_env(
                        ENV_AUDIO_INPUT_FOLDER, DEFAULT_AUDIO_INPUT_FOLDER
                    )
                ),
                audio_output_folder=Path(
                    self._get_optional_env(
                        ENV_AUDIO_OUTPUT_FOLDER, DEFAULT_AUDIO_OUTPUT_FOLDER
                    )
                ),
                interval_seconds=self._get_interval(),
                random_seed=self._get_optional_int(ENV_RANDOM_SEED),
                bot_status=self._get_optional_env(ENV_BOT_STATUS, DEFAULT_BOT_STATUS),
                ffmpeg_path=self._get_optional_env(ENV_FFMPEG_PATH, DEFAULT_FFMPEG_PATH),
                log_level=self._get_optional_env(ENV_LOG_LEVEL),
            )
        except ConfigurationError as e:
            logger.error(f"Failed to load configuration: {e}")
            raise

        logger.info("Configuration loaded successfully")
        return config
