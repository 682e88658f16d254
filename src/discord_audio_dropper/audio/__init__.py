"""
Audio components for the Discord Audio Dropper system.

This package contains all audio-related functionality including:
- Transcoding source clips to raw DCA frames
- The cached sound library and its clip inventory
- The Opus audio source used for playback
"""

from .sources import DCAAudioSource, iter_dca_frames, read_dca_frame, write_dca_frame
from .encoding import FFmpegEncoder
from .library import ClipInventory, SoundLibrary, encoded_path_for, prepare

__all__ = [
    "DCAAudioSource",
    "iter_dca_frames",
    "read_dca_frame",
    "write_dca_frame",
    "FFmpegEncoder",
    "ClipInventory",
    "SoundLibrary",
    "encoded_path_for",
    "prepare",
]
