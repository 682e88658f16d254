"""
Active voice channel selection.

The target of each drop is the voice channel of the configured category
with the most members connected to it. The occupancy snapshot is rebuilt
from the guild's voice states every time and never cached.
"""

import logging
from collections import Counter
from typing import Iterable, Optional

import discord

from discord_audio_dropper.infrastructure.exceptions import NoActiveChannelError

logger = logging.getLogger(__name__)


def build_occupancy(voice_states: Iterable[discord.VoiceState]) -> Counter:
    """Count one member per voice state against the state's channel id."""
    occupancy: Counter = Counter()
    for state in voice_states:
        if state.channel is not None:
            occupancy[state.channel.id] += 1
    return occupancy


def guild_voice_states(guild: discord.Guild) -> Iterable[discord.VoiceState]:
    """Yield the voice state of every member connected to a voice channel of ``guild``."""
    for channel in guild.channels:
        if channel.type in (discord.ChannelType.voice, discord.ChannelType.stage_voice):
            yield from channel.voice_states.values()


def category_voice_channels(
    channels: Iterable[discord.abc.GuildChannel], category_id: int
) -> list:
    """Voice channels whose parent category is ``category_id``, in guild order."""
    return [
        channel
        for channel in channels
        if channel.type == discord.ChannelType.voice
        and channel.category_id == category_id
    ]


def pick_busiest(channels: Iterable, occupancy: Counter, category_id: int):
    """
    Return the channel with the highest occupancy.

    Ties go to the first channel reaching the maximum.

    Raises:
        NoActiveChannelError: If no channel has anyone connected
    """
    best = None
    best_count = 0
    for channel in channels:
        count = occupancy.get(channel.id, 0)
        if count > best_count:
            best, best_count = channel, count

    if best is None:
        raise NoActiveChannelError(category_id)
    return best


class ActiveChannelSelector:
    """Selects the busiest voice channel of one category in one guild."""

    def __init__(self, category_id: int):
        self.category_id = category_id

    def select(self, guild: Optional[discord.Guild]) -> discord.VoiceChannel:
        """
        Select the drop target in ``guild``.

        Raises:
            NoActiveChannelError: If the guild is unavailable or the category
                has no occupied voice channel
        """
        if guild is None:
            raise NoActiveChannelError(self.category_id)

        occupancy = build_occupancy(guild_voice_states(guild))
        candidates = category_voice_channels(guild.channels, self.category_id)
        channel = pick_busiest(candidates, occupancy, self.category_id)

        logger.debug(
            f"[{guild.name}] Selected {channel.name} with "
            f"{occupancy[channel.id]} members out of {len(candidates)} channels"
        )
        return channel
