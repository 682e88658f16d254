"""
Unit tests for sound library preparation.
"""

import logging
import random

import pytest

from discord_audio_dropper.audio.library import (
    ClipInventory,
    SoundLibrary,
    encoded_path_for,
    prepare,
)
from discord_audio_dropper.infrastructure.exceptions import (
    EmptyInventoryError,
    PreparationError,
    TranscodeError,
)
from tests.conftest import FakeEncoder


class TestSoundLibrary:
    """Test cases for SoundLibrary.prepare."""

    @pytest.mark.unit
    def test_encodes_new_clip(self, clip_dirs, fake_encoder):
        input_dir, output_dir = clip_dirs
        (input_dir / "a.wav").write_bytes(b"RIFF")

        inventory = prepare(input_dir, output_dir, fake_encoder)

        assert (output_dir / "a.wav.dca").exists()
        assert list(inventory) == [output_dir / "a.wav.dca"]
        assert fake_encoder.calls == [input_dir / "a.wav"]

    @pytest.mark.unit
    def test_existing_output_is_skipped(self, clip_dirs, fake_encoder, caplog):
        input_dir, output_dir = clip_dirs
        (input_dir / "a.wav").write_bytes(b"RIFF")
        (output_dir / "a.wav.dca").write_bytes(b"\x01\x00x")

        with caplog.at_level(logging.INFO):
            inventory = prepare(input_dir, output_dir, fake_encoder)

        assert fake_encoder.calls == []
        assert "skipped [a.wav]" in caplog.text
        assert output_dir / "a.wav.dca" in inventory

    @pytest.mark.unit
    def test_second_run_is_idempotent(self, clip_dirs, fake_encoder):
        input_dir, output_dir = clip_dirs
        for name in ("b.mp3", "a.wav"):
            (input_dir / name).write_bytes(b"data")

        first = prepare(input_dir, output_dir, fake_encoder)
        second = prepare(input_dir, output_dir, fake_encoder)

        assert first == second
        assert len(fake_encoder.calls) == 2

    @pytest.mark.unit
    def test_inventory_includes_manually_encoded_clips(self, clip_dirs, fake_encoder):
        input_dir, output_dir = clip_dirs
        (output_dir / "manual.dca").write_bytes(b"\x01\x00x")

        inventory = prepare(input_dir, output_dir, fake_encoder)

        assert list(inventory) == [output_dir / "manual.dca"]

    @pytest.mark.unit
    def test_directories_are_ignored(self, clip_dirs, fake_encoder):
        input_dir, output_dir = clip_dirs
        (input_dir / "nested").mkdir()
        (output_dir / "nested").mkdir()

        inventory = prepare(input_dir, output_dir, fake_encoder)

        assert fake_encoder.calls == []
        assert len(inventory) == 0

    @pytest.mark.unit
    def test_inventory_is_sorted(self, clip_dirs, fake_encoder):
        input_dir, output_dir = clip_dirs
        for name in ("c.wav", "a.wav", "b.wav"):
            (input_dir / name).write_bytes(b"data")

        inventory = prepare(input_dir, output_dir, fake_encoder)

        assert [path.name for path in inventory] == [
            "a.wav.dca",
            "b.wav.dca",
            "c.wav.dca",
        ]

    @pytest.mark.unit
    def test_output_dir_is_created(self, tmp_path, fake_encoder):
        input_dir = tmp_path / "audio"
        input_dir.mkdir()
        (input_dir / "a.wav").write_bytes(b"data")

        inventory = prepare(input_dir, tmp_path / "new" / "encoded", fake_encoder)

        assert len(inventory) == 1

    @pytest.mark.unit
    def test_missing_input_dir_is_fatal(self, tmp_path, fake_encoder):
        with pytest.raises(PreparationError, match="Cannot read clip folders"):
            prepare(tmp_path / "missing", tmp_path / "encoded", fake_encoder)

    @pytest.mark.unit
    def test_transcode_failure_aborts_and_leaves_no_partial_file(self, clip_dirs):
        input_dir, output_dir = clip_dirs
        for name in ("a.wav", "b.wav"):
            (input_dir / name).write_bytes(b"data")
        encoder = FakeEncoder(fail_on="a.wav")

        with pytest.raises(TranscodeError):
            SoundLibrary(input_dir, output_dir, encoder).prepare()

        assert list(output_dir.iterdir()) == []
        assert encoder.calls == [input_dir / "a.wav"]

    @pytest.mark.unit
    def test_encoded_path_appends_extension(self, tmp_path):
        assert encoded_path_for(tmp_path / "in" / "x.ogg", tmp_path) == tmp_path / "x.ogg.dca"


class TestClipInventory:
    """Test cases for ClipInventory."""

    @pytest.mark.unit
    def test_empty_inventory_cannot_be_used(self):
        with pytest.raises(EmptyInventoryError):
            ClipInventory().require_clips()

        with pytest.raises(EmptyInventoryError):
            ClipInventory().choose(random.Random(1))

    @pytest.mark.unit
    def test_choose_is_deterministic_for_a_seed(self, tmp_path):
        inventory = ClipInventory(tuple(tmp_path / f"{i}.dca" for i in range(10)))

        first = [inventory.choose(random.Random(3)) for _ in range(3)]
        rng_a, rng_b = random.Random(99), random.Random(99)

        assert len(set(first)) == 1
        assert [inventory.choose(rng_a) for _ in range(5)] == [
            inventory.choose(rng_b) for _ in range(5)
        ]
        assert all(clip in inventory for clip in first)
