"""
Sound library preparation for the Discord Audio Dropper system.

At startup every file of the input folder is transcoded into the output
folder unless an encoded counterpart already exists there. The resulting
inventory is every file found in the output folder afterwards, so clips
encoded by hand are picked up as well.
"""

import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Protocol, Tuple, Union

from discord_audio_dropper.audio.encoding import FFmpegEncoder
from discord_audio_dropper.core.types import ENCODED_EXTENSION, PARTIAL_EXTENSION
from discord_audio_dropper.infrastructure.exceptions import (
    EmptyInventoryError,
    PreparationError,
)

logger = logging.getLogger(__name__)


class ClipEncoder(Protocol):
    def encode(self, source: Path, destination: BinaryIO) -> int: ...


@dataclass(frozen=True)
class ClipInventory:
    """Ordered, immutable set of playable clip paths."""

    clips: Tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.clips)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.clips)

    def __contains__(self, path: object) -> bool:
        return path in self.clips

    def require_clips(self) -> "ClipInventory":
        """Return self, or raise if there is nothing to play."""
        if not self.clips:
            raise EmptyInventoryError("No encoded clips available to play")
        return self

    def choose(self, rng: random.Random) -> Path:
        """Pick one clip, advancing ``rng`` once."""
        return self.require_clips().clips[rng.randrange(len(self.clips))]


def encoded_path_for(source: Path, output_dir: Path) -> Path:
    """Return the cache path of ``source``: ``output_dir/<name>.dca``."""
    return output_dir / f"{source.name}{ENCODED_EXTENSION}"


class SoundLibrary:
    """Transcodes source clips into a cached folder of encoded clips."""

    def __init__(
        self,
        input_dir: Union[str, Path],
        output_dir: Union[str, Path],
        encoder: Optional[ClipEncoder] = None,
    ):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.encoder = encoder or FFmpegEncoder()

    def prepare(self) -> ClipInventory:
        """
        Encode missing clips and list every encoded clip.

        Returns:
            ClipInventory: Every file in the output folder, sorted by name

        Raises:
            PreparationError: On any I/O or transcoding failure. Nothing
                prepared so far is usable in that case.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            sources = self._list_files(self.input_dir)
        except OSError as e:
            raise PreparationError(f"Cannot read clip folders: {e}") from e

        for source in sources:
            destination = encoded_path_for(source, self.output_dir)
            if destination.exists():
                logger.info(f"skipped [{source.name}]")
                continue

            self._encode(source, destination)
            logger.info(f"encoded [{source.name}]")

        try:
            clips = tuple(
                path
                for path in self._list_files(self.output_dir)
                if not path.name.endswith(PARTIAL_EXTENSION)
            )
        except OSError as e:
            raise PreparationError(f"Cannot list {self.output_dir}: {e}") from e

        logger.info(f"Prepared {len(clips)} clips in {self.output_dir}")
        return ClipInventory(clips)

    def _encode(self, source: Path, destination: Path) -> None:
        partial = destination.with_name(destination.name + PARTIAL_EXTENSION)
        try:
            with open(partial, "wb") as output:
                frames = self.encoder.encode(source, output)
            os.replace(partial, destination)
        except PreparationError:
            self._discard(partial)
            raise
        except OSError as e:
            self._discard(partial)
            raise PreparationError(f"Failed to write {destination}: {e}") from e

        logger.debug(f"Wrote {frames} frames to {destination}")

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial file {path}: {e}")

    @staticmethod
    def _list_files(directory: Path) -> Tuple[Path, ...]:
        return tuple(
            sorted(
                (entry for entry in directory.iterdir() if not entry.is_dir()),
                key=lambda entry: entry.name,
            )
        )


def prepare(
    input_dir: Union[str, Path],
    output_dir: Union[str, Path],
    encoder: Optional[ClipEncoder] = None,
) -> ClipInventory:
    """Prepare the sound library in ``output_dir`` (convenience function)."""
    return SoundLibrary(input_dir, output_dir, encoder).prepare()
