"""Audio Dropper Bot Handlers Module."""

from .event_handlers import EventHandlers

__all__ = ["EventHandlers"]
