"""
Logging management for the Discord Audio Dropper system.

This module provides centralized logging configuration with environment-based
log levels and YAML configuration support.

Environment Log Levels:
- Development: DEBUG and above
- Staging: INFO and above
- Production: WARNING and above
"""

import logging
import logging.config
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PACKAGE_LOGGER = "discord_audio_dropper"

NOISY_LOGGERS = (
    "discord.voice_state",
    "discord.voice_client",
    "discord.gateway",
    "discord.client",
    "discord.player",
)


class Environment(Enum):
    """Environment enumeration."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LoggingManager:
    """Centralized logging management with production controls."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize logging manager.

        Args:
            config_path: Path to YAML configuration file. If None, uses the
                ``logging.yaml`` shipped with the package.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent / "logging.yaml"

        self.config_path = config_path
        self._config_cache: Optional[Dict[str, Any]] = None
        self._environment = self._detect_environment()

    def _detect_environment(self) -> Environment:
        """Detect current environment from environment variables."""
        env = os.getenv("ENVIRONMENT", "development").lower()

        if env in ["prod", "production"]:
            return Environment.PRODUCTION
        elif env in ["staging", "stage"]:
            return Environment.STAGING
        else:
            return Environment.DEVELOPMENT

    def _load_yaml_config(self) -> Optional[Dict[str, Any]]:
        """Load YAML logging configuration."""
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            return None

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            logging.getLogger(__name__).warning(
                f"Failed to load YAML logging config {self.config_path}: {e}"
            )
            return None

        self._config_cache = config
        return config

    def _get_environment_log_level(self) -> str:
        """Get appropriate log level for current environment."""
        if self._environment == Environment.PRODUCTION:
            return "WARNING"
        elif self._environment == Environment.STAGING:
            return "INFO"
        else:
            return "DEBUG"

    def _apply_environment_level(
        self, config: Dict[str, Any], level: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Return a copy of ``config`` with application loggers at ``level``.

        ``level`` defaults to the environment level. ``discord`` loggers keep
        the levels from the YAML file.
        """
        level = (level or self._get_environment_log_level()).upper()
        config = dict(config)

        if "root" in config:
            config["root"] = dict(config["root"], level=level)

        if "loggers" in config:
            loggers = {}
            for logger_name, logger_config in config["loggers"].items():
                if logger_name.startswith("discord.") or logger_name == "discord":
                    loggers[logger_name] = logger_config
                else:
                    loggers[logger_name] = dict(logger_config, level=level)
            config["loggers"] = loggers

        return config

    def setup_logging(
        self,
        component_name: str,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> logging.Logger:
        """
        Set up logging for a component with environment-aware configuration.

        Args:
            component_name: Name of the component
            log_level: Level for every application logger (if None, uses the
                environment level)
            log_file: Optional extra file to write this component's records to

        Returns:
            Configured logger instance
        """
        # ENVIRONMENT may have been loaded from .env since the last call
        self._environment = self._detect_environment()
        level = (log_level or self._get_environment_log_level()).upper()
        config = self._load_yaml_config()

        if config:
            logging.config.dictConfig(self._apply_environment_level(config, level))
            logger = logging.getLogger(component_name)
        else:
            logger = self._setup_basic_logging(component_name, level)
            logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, level))

        if log_file:
            self._add_file_handler(logger, log_file)

        self._suppress_noisy_loggers()
        return logger

    def _setup_basic_logging(self, component_name: str, log_level: str) -> logging.Logger:
        """Set up basic console logging when YAML config is not available."""
        logger = logging.getLogger(component_name)
        logger.setLevel(getattr(logging, log_level.upper()))
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logger.level)
        console_handler.setFormatter(self._formatter())
        logger.addHandler(console_handler)

        return logger

    def _add_file_handler(self, logger: logging.Logger, log_file: str) -> None:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(
            logging.WARNING if self.is_production() else logging.DEBUG
        )
        file_handler.setFormatter(self._formatter())
        logger.addHandler(file_handler)

    def _formatter(self) -> logging.Formatter:
        if self.is_production():
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
        return logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def _suppress_noisy_loggers(self):
        """Suppress noisy third-party library loggers."""
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    def get_environment(self) -> Environment:
        """Get current environment."""
        return self._environment

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self._environment == Environment.PRODUCTION


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Set up logging for a component (convenience function)."""
    return _logging_manager.setup_logging(component_name, log_level, log_file)


def get_logger(component_name: str) -> logging.Logger:
    """Get a logger for a component."""
    return logging.getLogger(component_name)


def is_production() -> bool:
    """Check if running in production mode."""
    return _logging_manager.is_production()


def get_environment() -> Environment:
    """Get current environment."""
    return _logging_manager.get_environment()
