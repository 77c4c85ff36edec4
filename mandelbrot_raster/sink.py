"""Destinations for streamed RGB rows."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

import numpy as np
import PIL.Image

logger = logging.getLogger(__name__)


class SinkError(OSError):
    """Raised when rows cannot be delivered to an image destination."""


class ImageSink(Protocol):
    """Receives a frame as ``begin`` -> ``write_row`` * height -> ``end``.

    Each row is ``width`` packed RGB triples. ``abort`` discards a partially
    written frame.
    """

    def begin(self, width: int, height: int) -> None: ...

    def write_row(self, row: bytes) -> None: ...

    def end(self) -> None: ...

    def abort(self) -> None: ...


class _RowBuffer:
    """Shared bookkeeping for sinks that accumulate rows into an array."""

    def __init__(self) -> None:
        self.width = 0
        self.height = 0
        self.rows_written = 0
        self._pixels: Optional[np.ndarray] = None

    def _allocate(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise SinkError(f"Image dimensions must be positive, got {width}x{height}.")
        self.width = width
        self.height = height
        self.rows_written = 0
        self._pixels = np.zeros((height, width, 3), dtype=np.uint8)

    def _store(self, row: bytes) -> None:
        if self._pixels is None:
            raise SinkError("write_row called before begin.")
        if self.rows_written >= self.height:
            raise SinkError(f"Too many rows: image has {self.height}.")
        expected = self.width * 3
        if len(row) != expected:
            raise SinkError(f"Row {self.rows_written} has {len(row)} bytes, expected {expected}.")
        self._pixels[self.rows_written] = np.frombuffer(row, dtype=np.uint8).reshape(self.width, 3)
        self.rows_written += 1

    def _check_complete(self) -> np.ndarray:
        if self._pixels is None:
            raise SinkError("end called before begin.")
        if self.rows_written != self.height:
            raise SinkError(f"Image incomplete: {self.rows_written} of {self.height} rows written.")
        return self._pixels


class MemorySink(_RowBuffer):
    """Collects a frame in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.rows: list[bytes] = []
        self.completed = False

    def begin(self, width: int, height: int) -> None:
        self._allocate(width, height)
        self.rows = []
        self.completed = False

    def write_row(self, row: bytes) -> None:
        self._store(row)
        self.rows.append(bytes(row))

    def end(self) -> None:
        self._check_complete()
        self.completed = True

    def abort(self) -> None:
        self.completed = False

    def to_array(self) -> np.ndarray:
        return self._check_complete().copy()

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.to_array())


class PngFileSink(_RowBuffer):
    """Writes a frame to ``path`` as PNG.

    Rows go to a temporary file beside ``path`` which only replaces it once
    the frame is complete. Pillow encodes the PNG in one pass, so the whole
    frame is held in memory as a (height, width, 3) array until ``end``.
    """

    def __init__(self, path: os.PathLike | str) -> None:
        super().__init__()
        self.path = Path(path).expanduser()
        self._tmp_path: Optional[Path] = None

    def begin(self, width: int, height: int) -> None:
        if self.path.exists() and self.path.is_dir():
            raise SinkError(f"could not open file {self.path}: is a directory")
        self._allocate(width, height)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".part", dir=str(self.path.parent)
            )
        except OSError as exc:
            raise SinkError(f"could not open file {self.path}: {exc.strerror or exc}") from exc
        os.close(fd)
        self._tmp_path = Path(tmp_name)

    def write_row(self, row: bytes) -> None:
        self._store(row)

    def end(self) -> None:
        pixels = self._check_complete()
        if self._tmp_path is None:
            raise SinkError("end called before begin.")
        try:
            PIL.Image.fromarray(pixels).save(str(self._tmp_path), format="PNG")
            os.replace(self._tmp_path, self.path)
        except OSError as exc:
            self.abort()
            raise SinkError(f"could not write file {self.path}: {exc}") from exc
        self._tmp_path = None
        logger.debug("Wrote %dx%d PNG to %s", self.width, self.height, self.path)

    def abort(self) -> None:
        if self._tmp_path is not None:
            self._tmp_path.unlink(missing_ok=True)
            self._tmp_path = None
