"""Compression of block data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import lz4.frame

from .errors import DeserializeError


@dataclass(frozen=True)
class Compression:
    """A data compression method; ``level`` is None for no compression.

    With LZ4 the level runs from 1 (fastest) to 9 (highest ratio).
    """

    level: int | None = None

    @classmethod
    def none(cls) -> Compression:
        """Return the method which leaves data uncompressed."""
        return cls(None)

    @classmethod
    def lz4(cls, level: int) -> Compression:
        """Return LZ4 compression at the given ``level``."""
        return cls(level)

    @property
    def is_lz4(self) -> bool:
        return self.level is not None

    def compress(self, data: bytes) -> bytes:
        """Compress ``data`` and return it."""
        if self.level is None:
            return bytes(data)
        try:
            return lz4.frame.compress(bytes(data), compression_level=self.level)
        except (RuntimeError, ValueError) as exc:
            raise OSError(str(exc)) from exc

    def decompress(self, data: bytes) -> bytes:
        """Decompress ``data`` and return it."""
        if self.level is None:
            return bytes(data)
        try:
            return lz4.frame.decompress(bytes(data))
        except (RuntimeError, ValueError) as exc:
            raise OSError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable representation of the method."""
        if self.level is None:
            return {"method": "none"}
        return {"method": "lz4", "level": self.level}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Compression:
        """Build a method from the output of ``to_dict``."""
        try:
            method = data["method"]
            if method == "none":
                return cls.none()
            if method == "lz4":
                return cls.lz4(int(data["level"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise DeserializeError() from exc
        raise DeserializeError(f"Unknown compression method: {method!r}")