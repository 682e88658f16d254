"""Event handlers for the Audio Dropper Bot."""

import logging
from typing import Any

import discord

from discord_audio_dropper.config import DropperConfig
from discord_audio_dropper.infrastructure.exceptions import ConfigurationError


class EventHandlers:
    """Handles Discord client events for the Audio Dropper Bot."""

    def __init__(
        self,
        bot: Any,
        config: DropperConfig,
        logger: logging.Logger,
    ):
        """Initialize event handlers."""
        self.bot_instance = bot
        self.client: discord.Client = bot.client
        self.config = config
        self.logger = logger
        self._initialized = False

    def setup_events(self) -> None:
        """Register the event handlers on the client."""
        self.client.event(self.on_ready)
        self.client.event(self.on_resumed)

    async def on_ready(self) -> None:
        if self._initialized:
            # Gateway reconnects fire on_ready again; the schedule keeps running
            self.logger.info(f"[{self.config.guild_id}] Session ready again")
            return
        self._initialized = True

        try:
            guild = self.validate_targets()
        except ConfigurationError as e:
            self.logger.critical(f"[{self.config.guild_id}] {e}")
            self.bot_instance.startup_error = e
            await self.client.close()
            return

        self.logger.info(
            f"[{guild.name}] Bot ready as {self.client.user}, "
            f"dropping {len(self.bot_instance.inventory)} clips "
            f"every {self.config.interval_seconds:g}s"
        )
        await self.client.change_presence(
            activity=discord.Game(name=self.config.bot_status)
        )
        if self.bot_instance.is_stopping:
            self.logger.info(f"[{self.config.guild_id}] Shutting down, not scheduling drops")
            return
        await self.bot_instance.scheduler.start(
            self.config.interval_seconds, self.bot_instance.playback.run_cycle
        )

    async def on_resumed(self) -> None:
        self.logger.info(f"[{self.config.guild_id}] Session resumed")

    def validate_targets(self) -> discord.Guild:
        """
        Check that the configured guild and category exist.

        Raises:
            ConfigurationError: If either cannot be found
        """
        guild = self.client.get_guild(self.config.guild_id)
        if guild is None:
            raise ConfigurationError(
                f"Guild {self.config.guild_id} not found or bot is not a member"
            )

        category = guild.get_channel(self.config.category_id)
        if category is None or category.type != discord.ChannelType.category:
            raise ConfigurationError(
                f"Category {self.config.category_id} not found in guild {guild.name}"
            )
        return guild
