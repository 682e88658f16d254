#!/usr/bin/env python3
"""
Audio Dropper Bot process.

Prepares the sound library, logs in, and once the session is ready drops a
random clip into the busiest voice channel of the configured category
every interval until SIGINT or SIGTERM.
"""

import asyncio
import logging
import random
import signal
import sys
from typing import Optional

import discord

from discord_audio_dropper.audio import ClipInventory, FFmpegEncoder, SoundLibrary
from discord_audio_dropper.config import ConfigManager, DropperConfig
from discord_audio_dropper.core import (
    ActiveChannelSelector,
    DropScheduler,
    PlaybackController,
)
from discord_audio_dropper.infrastructure import (
    AudioDropperError,
    setup_logging,
)

from .handlers import EventHandlers

COMPONENT_NAME = "audio_dropper"


class AudioDropperBot:
    """Audio dropper bot: one guild, one category, one clip per interval."""

    def __init__(self, config: DropperConfig, inventory: ClipInventory):
        """
        Initialize the audio dropper bot.

        Args:
            config: Immutable bot configuration
            inventory: Prepared clips; must not be empty
        """
        self.logger = logging.getLogger(COMPONENT_NAME)
        self.config = config
        self.inventory = inventory.require_clips()

        self.client = discord.Client(intents=self.get_discord_intents())

        self.playback = PlaybackController(
            guild_provider=lambda: self.client.get_guild(self.config.guild_id),
            selector=ActiveChannelSelector(self.config.category_id),
            settle_delay=self.config.settle_delay,
        )
        self.scheduler = DropScheduler(
            self.inventory, random.Random(self.config.random_seed)
        )

        self.startup_error: Optional[AudioDropperError] = None
        self._stopped = False
        self._shutdown_task: Optional[asyncio.Task] = None

        self.event_handlers = EventHandlers(
            bot=self, config=self.config, logger=self.logger
        )
        self.event_handlers.setup_events()

    @staticmethod
    def get_discord_intents() -> discord.Intents:
        """Guild and voice state caches are all the selector needs."""
        intents = discord.Intents.none()
        intents.guilds = True
        intents.voice_states = True
        return intents

    @property
    def is_stopping(self) -> bool:
        return self._stopped

    async def start(self) -> None:
        """Log in and run until the client is closed."""
        self.logger.info(f"[{self.config.guild_id}] Starting bot ...")
        await self.client.start(self.config.token)

    async def stop(self) -> None:
        """Stop scheduling, let a running cycle finish, then close the session."""
        if self._stopped:
            return
        self._stopped = True

        self.logger.info(f"[{self.config.guild_id}] Stopping bot...")
        self.scheduler.stop()
        await self.scheduler.wait_stopped()

        if not self.client.is_closed():
            await self.client.close()
        self.logger.info(f"[{self.config.guild_id}] Bot stopped")

    def install_signal_handlers(self) -> None:
        """Stop the bot on SIGINT and SIGTERM."""
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._on_signal, signum)
            except NotImplementedError:
                # Windows event loops; KeyboardInterrupt still ends asyncio.run
                self.logger.debug(f"Signal handler for {signum!r} not supported")

    def _on_signal(self, signum: int) -> None:
        self.logger.info(f"Received signal {signal.Signals(signum).name}, shutting down...")
        if self._shutdown_task is None:
            self._shutdown_task = asyncio.get_running_loop().create_task(self.stop())


def prepare_library(config: DropperConfig) -> ClipInventory:
    """Encode the input folder and return the non-empty clip inventory."""
    library = SoundLibrary(
        config.audio_input_folder,
        config.audio_output_folder,
        FFmpegEncoder(config.ffmpeg_path),
    )
    return library.prepare().require_clips()


async def main(config: DropperConfig, inventory: ClipInventory) -> int:
    """Run the bot until shutdown. Returns the process exit code."""
    bot = AudioDropperBot(config, inventory)
    bot.install_signal_handlers()

    try:
        await bot.start()
    except discord.LoginFailure as e:
        bot.logger.critical(f"[{config.guild_id}] Login failed: {e}")
        return 1
    except (discord.HTTPException, discord.GatewayNotFound, discord.ConnectionClosed) as e:
        bot.logger.critical(f"[{config.guild_id}] Failed to open session: {e}")
        return 1
    finally:
        # A signal-triggered stop may still be closing the client
        if bot._shutdown_task is not None:
            await bot._shutdown_task
        await bot.stop()

    return 1 if bot.startup_error else 0


def run() -> None:
    """Console entry point."""
    logger = setup_logging(COMPONENT_NAME)
    try:
        config = ConfigManager().get_config()
        # .env may have set ENVIRONMENT and LOG_LEVEL
        logger = setup_logging(COMPONENT_NAME, log_level=config.log_level)
        inventory = prepare_library(config)
    except AudioDropperError as e:
        logger.critical(f"Startup failed: {e}")
        sys.exit(1)

    try:
        exit_code = asyncio.run(main(config, inventory))
    except KeyboardInterrupt:
        logger.info("Audio dropper interrupted")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
