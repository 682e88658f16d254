"""
Core components for the Discord Audio Dropper system.

This package contains the logic of a drop: choosing the channel, running
the join/play/leave cycle and scheduling cycles over time.
"""

from .channel_selector import ActiveChannelSelector, build_occupancy, pick_busiest
from .playback import PlaybackController, PlaybackSession, PlaybackState
from .scheduler import DropScheduler, ScheduleState

__all__ = [
    "ActiveChannelSelector",
    "build_occupancy",
    "pick_busiest",
    "PlaybackController",
    "PlaybackSession",
    "PlaybackState",
    "DropScheduler",
    "ScheduleState",
]
