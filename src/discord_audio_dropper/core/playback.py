"""
Playback cycle for the Discord Audio Dropper system.

One cycle joins the busiest channel, plays a single clip and leaves:

    IDLE -> SELECT -> JOIN -> SETTLE_IN -> SPEAKING_ON -> STREAM
         -> SPEAKING_OFF -> SETTLE_OUT -> LEAVE -> IDLE

The voice connection is only "connected" before it can carry media, and
disconnecting right after clearing the speaking flag cuts the end of the
clip on some clients, hence the settle delays on both edges.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import discord

from discord_audio_dropper.audio.sources import DCAAudioSource
from discord_audio_dropper.core.channel_selector import ActiveChannelSelector
from discord_audio_dropper.core.types import DEFAULT_SETTLE_DELAY
from discord_audio_dropper.infrastructure.exceptions import (
    PlaybackError,
    VoiceConnectionError,
)

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    """Steps of a playback cycle."""

    IDLE = "idle"
    SELECT = "select"
    JOIN = "join"
    SETTLE_IN = "settle_in"
    SPEAKING_ON = "speaking_on"
    STREAM = "stream"
    SPEAKING_OFF = "speaking_off"
    SETTLE_OUT = "settle_out"
    LEAVE = "leave"


class PlaybackSession:
    """
    One voice connection, scoped to a single cycle.

    Used as an async context manager: the connection is opened on enter and
    always disconnected on exit, whatever happened in between.
    """

    def __init__(self, channel: discord.VoiceChannel):
        self.channel = channel
        self.voice_client: Optional[discord.VoiceClient] = None

    async def __aenter__(self) -> "PlaybackSession":
        try:
            # Deafened: the bot never needs to receive audio
            self.voice_client = await self.channel.connect(
                self_mute=False, self_deaf=True
            )
        except (discord.ClientException, discord.HTTPException, asyncio.TimeoutError) as e:
            raise VoiceConnectionError(
                f"Failed to join {self.channel.name}: {e}"
            ) from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.release()

    async def release(self) -> None:
        """Disconnect from the channel. Failures are logged, not raised."""
        if self.voice_client is None:
            return
        voice_client, self.voice_client = self.voice_client, None
        try:
            await voice_client.disconnect(force=True)
        except Exception as e:
            logger.warning(f"Error disconnecting from {self.channel.name}: {e}")

    async def set_speaking(self, speaking: bool) -> None:
        state = discord.SpeakingState.voice if speaking else discord.SpeakingState.none
        try:
            await self.voice_client.ws.speak(state)
        except (discord.ConnectionClosed, OSError) as e:
            raise PlaybackError(f"Failed to set speaking={speaking}: {e}") from e

    async def stream(self, source: discord.AudioSource) -> None:
        """
        Play ``source`` until it is exhausted.

        Raises:
            PlaybackError: If the player stops with an error
        """
        loop = asyncio.get_running_loop()
        finished: asyncio.Future = loop.create_future()

        def after(error: Optional[Exception]) -> None:
            # Runs on the player thread
            loop.call_soon_threadsafe(_settle, error)

        def _settle(error: Optional[Exception]) -> None:
            if not finished.done():
                finished.set_result(error)

        try:
            self.voice_client.play(source, after=after)
        except (discord.ClientException, discord.opus.OpusNotLoaded) as e:
            source.cleanup()
            raise PlaybackError(f"Failed to start playback: {e}") from e

        error = await finished
        if error is not None:
            if isinstance(error, PlaybackError):
                raise error
            raise PlaybackError(f"Stream failed: {error}") from error


class PlaybackController:
    """Runs join/play/leave cycles against a guild."""

    def __init__(
        self,
        guild_provider: Callable[[], Optional[discord.Guild]],
        selector: ActiveChannelSelector,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        source_factory: Callable[[Path], discord.AudioSource] = DCAAudioSource,
    ):
        """
        Initialize the controller.

        Args:
            guild_provider: Returns the current guild from the client cache
            selector: Picks the channel to join
            settle_delay: Seconds to wait after joining and before leaving
            source_factory: Builds the audio source for a clip path
        """
        self.guild_provider = guild_provider
        self.selector = selector
        self.settle_delay = settle_delay
        self.source_factory = source_factory
        self.state = PlaybackState.IDLE

    def _enter(self, state: PlaybackState) -> None:
        self.state = state
        logger.debug(f"Playback state -> {state.value}")

    async def run_cycle(self, clip: Path) -> None:
        """
        Play ``clip`` once in the busiest channel.

        Raises:
            NoActiveChannelError: Nobody to play to; nothing was joined
            VoiceConnectionError: Joining the channel failed
            PlaybackError: Streaming failed; the connection was still released
        """
        try:
            self._enter(PlaybackState.SELECT)
            channel = self.selector.select(self.guild_provider())

            logger.info(f"playing [{Path(clip).name}] in {channel.name}")

            self._enter(PlaybackState.JOIN)
            async with PlaybackSession(channel) as session:
                self._enter(PlaybackState.SETTLE_IN)
                await asyncio.sleep(self.settle_delay)

                self._enter(PlaybackState.SPEAKING_ON)
                await session.set_speaking(True)

                self._enter(PlaybackState.STREAM)
                await session.stream(self.source_factory(clip))

                self._enter(PlaybackState.SPEAKING_OFF)
                await session.set_speaking(False)

                self._enter(PlaybackState.SETTLE_OUT)
                await asyncio.sleep(self.settle_delay)

                self._enter(PlaybackState.LEAVE)
        finally:
            self._enter(PlaybackState.IDLE)
