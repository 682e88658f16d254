"""
Audio source implementations for the Discord Audio Dropper system.

Encoded clips are stored as raw DCA: a sequence of Opus frames, each
prefixed with its length as a little-endian signed 16-bit integer. There is
no file header.
"""

import logging
import struct
from pathlib import Path
from typing import BinaryIO, Iterator, Union

import discord

from discord_audio_dropper.infrastructure.exceptions import PlaybackError

logger = logging.getLogger(__name__)

DCA_FRAME_HEADER = struct.Struct("<h")


def write_dca_frame(stream: BinaryIO, packet: bytes) -> None:
    """Append one length-prefixed Opus packet to ``stream``."""
    stream.write(DCA_FRAME_HEADER.pack(len(packet)))
    stream.write(packet)


def read_dca_frame(stream: BinaryIO) -> bytes:
    """
    Read the next Opus packet from a raw DCA stream.

    Returns:
        bytes: The packet, or ``b""`` at a clean end of stream

    Raises:
        PlaybackError: If the stream is truncated or a frame length is invalid
    """
    header = stream.read(DCA_FRAME_HEADER.size)
    if not header:
        return b""
    if len(header) < DCA_FRAME_HEADER.size:
        raise PlaybackError("Truncated DCA frame header")

    (length,) = DCA_FRAME_HEADER.unpack(header)
    if length <= 0:
        raise PlaybackError(f"Invalid DCA frame length {length}")

    packet = stream.read(length)
    if len(packet) < length:
        raise PlaybackError(
            f"Truncated DCA frame: expected {length} bytes, got {len(packet)}"
        )
    return packet


def iter_dca_frames(stream: BinaryIO) -> Iterator[bytes]:
    """Yield every Opus packet of a raw DCA stream."""
    while True:
        packet = read_dca_frame(stream)
        if not packet:
            return
        yield packet


class DCAAudioSource(discord.AudioSource):
    """
    Streams the Opus frames of an encoded clip to a voice connection.

    discord.py calls :meth:`read` every 20ms from the player thread. An empty
    return value ends playback normally; an exception raised here is handed to
    the player's ``after`` callback.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Open an encoded clip for streaming.

        Args:
            path: Path to a ``.dca`` file

        Raises:
            PlaybackError: If the file cannot be opened
        """
        self.path = Path(path)
        try:
            self._file = open(self.path, "rb")
        except OSError as e:
            raise PlaybackError(f"Cannot open clip {self.path}: {e}") from e
        self.frame_count = 0

    def is_opus(self) -> bool:
        """Return True to indicate we provide Opus-encoded audio."""
        return True

    def read(self) -> bytes:
        packet = read_dca_frame(self._file)
        if packet:
            self.frame_count += 1
        return packet

    def cleanup(self) -> None:
        if not self._file.closed:
            self._file.close()
            logger.debug(f"Closed {self.path.name} after {self.frame_count} frames")
