"""
Pytest configuration and shared fixtures for the Discord Audio Dropper test suite.

This module provides common fixtures and configuration for all tests.
"""

from pathlib import Path
from typing import BinaryIO, List, Optional
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_audio_dropper.audio.sources import write_dca_frame
from discord_audio_dropper.config.settings import DropperConfig
from discord_audio_dropper.infrastructure.exceptions import TranscodeError

GUILD_ID = 123456789
CATEGORY_ID = 555000
OTHER_CATEGORY_ID = 666000


class FakeEncoder:
    """Clip encoder writing a few fixed frames instead of running ffmpeg."""

    def __init__(self, frames: int = 3, fail_on: Optional[str] = None):
        self.frames = frames
        self.fail_on = fail_on
        self.calls: List[Path] = []

    def encode(self, source: Path, destination: BinaryIO) -> int:
        self.calls.append(Path(source))
        if self.fail_on and Path(source).name == self.fail_on:
            destination.write(b"\x01")
            raise TranscodeError(f"cannot encode {source}")
        for index in range(self.frames):
            write_dca_frame(destination, bytes([index + 1]) * 4)
        return self.frames


def make_voice_channel(
    channel_id: int,
    name: str,
    members: int = 0,
    category_id: Optional[int] = CATEGORY_ID,
    channel_type: discord.ChannelType = discord.ChannelType.voice,
):
    """Create a mock voice channel with ``members`` connected members."""
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = channel_id
    channel.name = name
    channel.type = channel_type
    channel.category_id = category_id

    states = {}
    for index in range(members):
        state = MagicMock(spec=discord.VoiceState)
        state.channel = channel
        states[channel_id * 100 + index] = state
    channel.voice_states = states
    return channel


def make_guild(channels: list, guild_id: int = GUILD_ID):
    """Create a mock guild holding ``channels``."""
    guild = MagicMock(spec=discord.Guild)
    guild.id = guild_id
    guild.name = "Test Guild"
    guild.channels = channels
    guild.get_channel = MagicMock(
        side_effect=lambda channel_id: next(
            (channel for channel in channels if channel.id == channel_id), None
        )
    )
    return guild


@pytest.fixture
def fake_encoder():
    return FakeEncoder()


@pytest.fixture
def clip_dirs(tmp_path):
    input_dir = tmp_path / "audio"
    output_dir = tmp_path / "encoded"
    input_dir.mkdir()
    output_dir.mkdir()
    return input_dir, output_dir


@pytest.fixture
def encoded_clip(tmp_path) -> Path:
    """A valid three-frame DCA file."""
    path = tmp_path / "clip.wav.dca"
    with open(path, "wb") as f:
        for packet in (b"\x01\x02", b"\x03\x04\x05", b"\x06"):
            write_dca_frame(f, packet)
    return path


@pytest.fixture
def mock_config(tmp_path):
    """Create a configuration for testing."""
    return DropperConfig(
        token="mock_token",
        guild_id=GUILD_ID,
        category_id=CATEGORY_ID,
        client_id=42,
        audio_input_folder=tmp_path / "audio",
        audio_output_folder=tmp_path / "encoded",
        interval_seconds=60,
        settle_delay=0,
        random_seed=7,
    )


@pytest.fixture
def mock_voice_client():
    """Create a mock voice client that plays sources to completion."""
    voice_client = MagicMock(spec=discord.VoiceClient)
    voice_client.ws = MagicMock()
    voice_client.ws.speak = AsyncMock()
    voice_client.disconnect = AsyncMock()
    voice_client.played_frames = []

    def play(source, *, after=None, **kwargs):
        while True:
            try:
                packet = source.read()
            except Exception as exc:
                source.cleanup()
                after(exc)
                return
            if not packet:
                break
            voice_client.played_frames.append(packet)
        source.cleanup()
        after(None)

    voice_client.play = MagicMock(side_effect=play)
    return voice_client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
