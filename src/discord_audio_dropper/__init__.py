"""
Discord Audio Dropper - drops random sound clips into the busiest voice channel.

On a fixed interval the bot joins the voice channel with the most members
inside a configured category, plays one pre-encoded clip and leaves.

Architecture:
- Audio: Clip transcoding, the cached sound library and playback sources
- Core: Channel selection, the playback cycle and its scheduler
- Bots: Discord client wiring and process lifecycle
- Config: Configuration management
- Infrastructure: Logging and exceptions
"""

__version__ = "1.0.0"

# Audio components
from .audio import ClipInventory, DCAAudioSource, FFmpegEncoder, SoundLibrary, prepare

# Core components
from .core import (
    ActiveChannelSelector,
    DropScheduler,
    PlaybackController,
    PlaybackState,
)

# Configuration
from .config import DropperConfig, ConfigManager

# Infrastructure
from .infrastructure.logging import setup_logging, get_logger
from .infrastructure.exceptions import (
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

# Bot implementation
from .bots import AudioDropperBot

__all__ = [
    "__version__",
    # Audio components
    "ClipInventory",
    "DCAAudioSource",
    "FFmpegEncoder",
    "SoundLibrary",
    "prepare",
    # Core components
    "ActiveChannelSelector",
    "DropScheduler",
    "PlaybackController",
    "PlaybackState",
    # Configuration
    "DropperConfig",
    "ConfigManager",
    # Infrastructure
    "setup_logging",
    "get_logger",
    "AudioDropperError",
    "ConfigurationError",
    "PreparationError",
    "TranscodeError",
    "EmptyInventoryError",
    "ChannelError",
    "NoActiveChannelError",
    "VoiceConnectionError",
    "PlaybackError",
    # Bot implementation
    "AudioDropperBot",
]
