"""
Clip transcoding for the Discord Audio Dropper system.

Source files are transcoded with ffmpeg into an Ogg/Opus stream, which is
then unpacked into raw DCA frames ready to be sent to a voice connection
without any runtime encoding.
"""

import io
import logging
import struct
import subprocess
from pathlib import Path
from typing import BinaryIO, List, Union

from discord.oggparse import OggError, OggStream

from discord_audio_dropper.audio.sources import write_dca_frame
from discord_audio_dropper.core.types import (
    DEFAULT_FFMPEG_PATH,
    ENCODE_BITRATE_KBPS,
    ENCODE_CHANNELS,
    ENCODE_FRAME_DURATION_MS,
    ENCODE_SAMPLE_RATE,
)
from discord_audio_dropper.infrastructure.exceptions import TranscodeError

logger = logging.getLogger(__name__)

# Ogg/Opus stream headers, not audio
OPUS_HEADER_PACKETS = (b"OpusHead", b"OpusTags")


class FFmpegEncoder:
    """Encodes audio files into raw DCA frames using an ffmpeg subprocess."""

    def __init__(
        self,
        ffmpeg_path: str = DEFAULT_FFMPEG_PATH,
        bitrate_kbps: int = ENCODE_BITRATE_KBPS,
    ):
        self.ffmpeg_path = ffmpeg_path
        self.bitrate_kbps = bitrate_kbps

    def build_command(self, source: Union[str, Path]) -> List[str]:
        """Build the ffmpeg command line that writes Ogg/Opus to stdout."""
        return [
            self.ffmpeg_path,
            "-hide_banner",
            "-loglevel", "error",
            "-i", str(source),
            "-map", "0:a:0",
            "-c:a", "libopus",
            "-b:a", f"{self.bitrate_kbps}k",
            "-vbr", "on",
            "-compression_level", "10",
            "-application", "audio",
            "-frame_duration", str(ENCODE_FRAME_DURATION_MS),
            "-ar", str(ENCODE_SAMPLE_RATE),
            "-ac", str(ENCODE_CHANNELS),
            "-f", "ogg",
            "pipe:1",
        ]

    def encode(self, source: Union[str, Path], destination: BinaryIO) -> int:
        """
        Transcode ``source`` and write its DCA frames to ``destination``.

        Args:
            source: Path of the audio file to transcode
            destination: Binary stream receiving the DCA frames

        Returns:
            int: Number of frames written

        Raises:
            TranscodeError: If ffmpeg cannot run, fails, or produces no audio
        """
        command = self.build_command(source)
        logger.debug(f"Running {' '.join(command)}")

        try:
            result = subprocess.run(command, capture_output=True, check=False)
        except OSError as e:
            raise TranscodeError(f"Cannot run {self.ffmpeg_path}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise TranscodeError(
                f"ffmpeg exited with code {result.returncode} for {source}: {stderr}"
            )

        frames = 0
        try:
            for packet in OggStream(io.BytesIO(result.stdout)).iter_packets():
                if packet.startswith(OPUS_HEADER_PACKETS):
                    continue
                write_dca_frame(destination, packet)
                frames += 1
        except (OggError, struct.error) as e:
            raise TranscodeError(f"Invalid Ogg stream from ffmpeg for {source}: {e}") from e

        if frames == 0:
            raise TranscodeError(f"No audio frames produced for {source}")
        return frames
