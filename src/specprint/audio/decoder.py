"""Decoder backends producing interleaved 16-bit PCM blocks.

Each backend exposes :meth:`Decoder.open`, a context manager yielding a
:class:`DecoderSession`. Backend resources (libsndfile handles, ffmpeg
processes) are released on every exit path, including decode failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess
import tempfile
from typing import Any, Iterator

import numpy as np
import soundfile as sf

from ..errors import DecodeError
from ..registry import Registry
from .buffer import PCM_DTYPE, AudioBuffer

LOGGER = logging.getLogger(__name__)

DEFAULT_BLOCK_FRAMES = 4096
DEFAULT_FFMPEG_SAMPLE_RATE = 48000
DEFAULT_FFMPEG_CHANNELS = 2


class DecoderSession(ABC):
    """Open decoding stream over one file."""

    sample_rate: int
    channels: int

    @abstractmethod
    def blocks(self) -> Iterator[np.ndarray]:
        """Yield flat interleaved ``int16`` sample blocks."""


class Decoder(ABC):
    """Factory for decoder sessions."""

    name: str = "decoder"

    @abstractmethod
    def open(self, path: str | Path) -> Any:
        """Return a context manager yielding a :class:`DecoderSession`."""


def _require_file(path: str | Path) -> Path:
    resolved = Path(path)
    if not resolved.is_file():
        raise DecodeError(f"Unable to open file: {resolved} does not exist")
    return resolved


@dataclass
class SoundFileSession(DecoderSession):
    """Session backed by an open :class:`soundfile.SoundFile`."""

    handle: sf.SoundFile
    block_frames: int = DEFAULT_BLOCK_FRAMES

    def __post_init__(self) -> None:
        self.sample_rate = int(self.handle.samplerate)
        self.channels = int(self.handle.channels)

    def blocks(self) -> Iterator[np.ndarray]:
        try:
            for block in self.handle.blocks(
                blocksize=self.block_frames, dtype="int16", always_2d=True
            ):
                yield block.reshape(-1)
        except (sf.SoundFileError, RuntimeError) as exc:
            raise DecodeError(f"Decoder I/O error in {self.handle.name}: {exc}") from exc


class SoundFileDecoder(Decoder):
    """Decode through libsndfile (MP3, WAV, FLAC, OGG, ...)."""

    name = "soundfile"

    def __init__(self, *, block_frames: int = DEFAULT_BLOCK_FRAMES) -> None:
        self.block_frames = int(block_frames)

    @contextmanager
    def open(self, path: str | Path) -> Iterator[SoundFileSession]:
        resolved = _require_file(path)
        try:
            handle = sf.SoundFile(resolved)
        except (sf.SoundFileError, RuntimeError) as exc:
            raise DecodeError(f"Unable to open file: {resolved}: {exc}") from exc
        LOGGER.info(
            "Opened %s (%s, %d Hz, %d channels)",
            resolved,
            handle.format,
            handle.samplerate,
            handle.channels,
        )
        with handle:
            yield SoundFileSession(handle, block_frames=self.block_frames)


@dataclass
class FFmpegSession(DecoderSession):
    """Session reading raw ``s16le`` PCM from an ffmpeg process."""

    process: subprocess.Popen[bytes]
    sample_rate: int
    channels: int
    block_frames: int = DEFAULT_BLOCK_FRAMES

    def blocks(self) -> Iterator[np.ndarray]:
        stream = self.process.stdout
        assert stream is not None  # opened with stdout=PIPE
        block_bytes = self.block_frames * self.channels * 2
        pending = b""
        while True:
            chunk = stream.read(block_bytes)
            if not chunk:
                break
            data = pending + chunk
            usable = len(data) - len(data) % 2
            pending = data[usable:]
            if usable:
                yield np.frombuffer(data[:usable], dtype="<i2").astype(PCM_DTYPE)


class FFmpegDecoder(Decoder):
    """Decode by piping the file through an ``ffmpeg`` subprocess.

    ffmpeg resamples to ``sample_rate`` and remixes to ``channels`` so the
    stream layout is known up front.
    """

    name = "ffmpeg"

    def __init__(
        self,
        *,
        binary: str = "ffmpeg",
        sample_rate: int = DEFAULT_FFMPEG_SAMPLE_RATE,
        channels: int = DEFAULT_FFMPEG_CHANNELS,
        block_frames: int = DEFAULT_BLOCK_FRAMES,
    ) -> None:
        self.binary = binary
        self.sample_rate = int(sample_rate)
        self.channels = int(channels)
        self.block_frames = int(block_frames)

    def command(self, path: Path) -> list[str]:
        return [
            self.binary,
            "-nostdin",
            "-v",
            "error",
            "-i",
            str(path),
            "-f",
            "s16le",
            "-acodec",
            "pcm_s16le",
            "-ar",
            str(self.sample_rate),
            "-ac",
            str(self.channels),
            "-",
        ]

    @contextmanager
    def open(self, path: str | Path) -> Iterator[FFmpegSession]:
        resolved = _require_file(path)
        # Diagnostics are spooled to a file; a full stderr pipe would stall
        # ffmpeg while stdout is still being drained.
        with tempfile.TemporaryFile() as stderr_file:
            try:
                process = subprocess.Popen(
                    self.command(resolved),
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                )
            except OSError as exc:
                raise DecodeError(f"Unable to start {self.binary}: {exc}") from exc
            LOGGER.info(
                "Started %s for %s (%d Hz, %d channels)",
                self.binary,
                resolved,
                self.sample_rate,
                self.channels,
            )
            completed = False
            try:
                yield FFmpegSession(
                    process,
                    sample_rate=self.sample_rate,
                    channels=self.channels,
                    block_frames=self.block_frames,
                )
                completed = True
            finally:
                if not completed and process.poll() is None:
                    process.kill()
                assert process.stdout is not None
                process.stdout.close()
                returncode = process.wait()
            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", errors="replace").strip()
        if returncode != 0:
            raise DecodeError(
                f"{self.binary} exited with code {returncode} for {resolved}: "
                f"{stderr[-2000:]}"
            )


decoder_registry: Registry[Decoder] = Registry(kind="decoder")
decoder_registry.register(SoundFileDecoder.name, SoundFileDecoder)
decoder_registry.register(FFmpegDecoder.name, FFmpegDecoder)


def create_decoder(name: str, **params: Any) -> Decoder:
    """Create a registered decoder backend by name."""
    return decoder_registry.create(name, **params)


def decode_file(path: str | Path, decoder: Decoder | None = None) -> AudioBuffer:
    """Decode ``path`` fully into an :class:`AudioBuffer`."""
    backend = decoder if decoder is not None else SoundFileDecoder()
    with backend.open(path) as session:
        buffer = AudioBuffer(session.sample_rate, session.channels)
        for block in session.blocks():
            buffer.append(block)
    LOGGER.info(
        "Decoded %d samples (%.2f s) from %s", buffer.count, buffer.duration, path
    )
    return buffer
