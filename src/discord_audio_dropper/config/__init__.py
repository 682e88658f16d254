"""
Configuration management for the Discord Audio Dropper system.

This package provides:
- The immutable configuration dataclass
- Environment variable loading and validation
"""

from .settings import DropperConfig, ConfigManager

__all__ = [
    "DropperConfig",
    "ConfigManager",
]
