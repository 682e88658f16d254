"""
Unit tests for the DCA frame format and audio source.
"""

import io

import pytest

from discord_audio_dropper.audio.sources import (
    DCAAudioSource,
    iter_dca_frames,
    read_dca_frame,
    write_dca_frame,
)
from discord_audio_dropper.infrastructure.exceptions import PlaybackError


class TestDCAFrames:
    """Test cases for raw DCA framing."""

    @pytest.mark.unit
    def test_frame_is_little_endian_length_prefixed(self):
        stream = io.BytesIO()
        write_dca_frame(stream, b"abc")

        assert stream.getvalue() == b"\x03\x00abc"

    @pytest.mark.unit
    def test_iter_frames_stops_at_end_of_stream(self):
        stream = io.BytesIO(b"\x02\x00ab\x01\x00c")

        assert list(iter_dca_frames(stream)) == [b"ab", b"c"]

    @pytest.mark.unit
    def test_empty_stream_is_clean_end(self):
        assert read_dca_frame(io.BytesIO(b"")) == b""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "data",
        [b"\x05", b"\x05\x00ab", b"\x00\x00", b"\xff\xffab"],
        ids=["short-header", "short-body", "zero-length", "negative-length"],
    )
    def test_corrupt_frames_raise(self, data):
        with pytest.raises(PlaybackError):
            read_dca_frame(io.BytesIO(data))


class TestDCAAudioSource:
    """Test cases for DCAAudioSource."""

    @pytest.mark.unit
    def test_source_is_opus(self, encoded_clip):
        source = DCAAudioSource(encoded_clip)
        try:
            assert source.is_opus() is True
        finally:
            source.cleanup()

    @pytest.mark.unit
    def test_reads_every_frame_then_empty(self, encoded_clip):
        source = DCAAudioSource(encoded_clip)

        frames = []
        while True:
            packet = source.read()
            if not packet:
                break
            frames.append(packet)
        source.cleanup()

        assert frames == [b"\x01\x02", b"\x03\x04\x05", b"\x06"]
        assert source.frame_count == 3

    @pytest.mark.unit
    def test_cleanup_is_idempotent(self, encoded_clip):
        source = DCAAudioSource(encoded_clip)
        source.cleanup()
        source.cleanup()

    @pytest.mark.unit
    def test_missing_file_raises_playback_error(self, tmp_path):
        with pytest.raises(PlaybackError, match="Cannot open clip"):
            DCAAudioSource(tmp_path / "missing.dca")
