"""Splitting of data into chunks for deduplication."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol

from .errors import DeserializeError


class Chunker(Protocol):
    """Something that finds chunk boundaries in a stream of bytes."""

    def find_boundary(self, data: bytes) -> int | None: ...

    def reset(self) -> None: ...


class FixedChunker:
    """A chunker which cuts data into chunks of a fixed size."""

    def __init__(self, chunk_size: int) -> None:
        if chunk_size < 1:
            raise ValueError("The chunk size must be at least one byte.")
        self.chunk_size = chunk_size
        self._bytes_read = 0

    def find_boundary(self, data: bytes) -> int | None:
        """Return the index in ``data`` where the current chunk ends, if any."""
        if self._bytes_read + len(data) < self.chunk_size:
            result = None
        else:
            result = self.chunk_size - self._bytes_read
        self._bytes_read += len(data)
        return result

    def reset(self) -> None:
        """Start a new chunk."""
        self._bytes_read = 0


class ZpaqChunker:
    """The ZPAQ content-defined chunker, with an average chunk of 2**bits bytes."""

    def __init__(self, bits: int) -> None:
        if not 0 <= bits <= 32:
            raise ValueError("The number of bits must be between 0 and 32.")
        self.bits = bits
        self._threshold = 1 << (32 - bits)
        self.reset()

    def _update(self, byte: int) -> bool:
        multiplier = 314159265 if byte == self._order1[self._last] else 271828182
        self._hash = ((self._hash + byte + 1) * multiplier) & 0xFFFFFFFF
        self._order1[self._last] = byte
        self._last = byte
        return self._hash < self._threshold

    def find_boundary(self, data: bytes) -> int | None:
        """Return the index in ``data`` where the current chunk ends, if any."""
        for position, byte in enumerate(data, start=1):
            if self._update(byte):
                return position
        return None

    def reset(self) -> None:
        """Start a new chunk."""
        self._last = 0
        self._order1 = bytearray(256)
        self._hash = 0


class ChunkingMethod(Enum):
    FIXED = "fixed"
    ZPAQ = "zpaq"


@dataclass(frozen=True)
class Chunking:
    """A method for chunking data.

    For ``FIXED`` the parameter is the chunk size in bytes; for ``ZPAQ`` it is
    the number of bits giving an average chunk size of 2**bits bytes.
    """

    method: ChunkingMethod
    parameter: int

    FIXED: ClassVar[Chunking]
    ZPAQ: ClassVar[Chunking]

    @classmethod
    def fixed(cls, size: int) -> Chunking:
        """Return fixed-size chunking with chunks of ``size`` bytes."""
        return cls(ChunkingMethod.FIXED, size)

    @classmethod
    def zpaq(cls, bits: int) -> Chunking:
        """Return ZPAQ content-defined chunking."""
        return cls(ChunkingMethod.ZPAQ, bits)

    def to_chunker(self) -> Chunker:
        """Return a new chunker for this method."""
        if self.method is ChunkingMethod.FIXED:
            return FixedChunker(self.parameter)
        return ZpaqChunker(self.parameter)

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable representation of the method."""
        if self.method is ChunkingMethod.FIXED:
            return {"method": "fixed", "size": self.parameter}
        return {"method": "zpaq", "bits": self.parameter}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chunking:
        """Build a method from the output of ``to_dict``."""
        try:
            method = data["method"]
            if method == "fixed":
                return cls.fixed(int(data["size"]))
            if method == "zpaq":
                return cls.zpaq(int(data["bits"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise DeserializeError() from exc
        raise DeserializeError(f"Unknown chunking method: {method!r}")


Chunking.FIXED = Chunking.fixed(1024 * 1024)
Chunking.ZPAQ = Chunking.zpaq(18)


class IncrementalChunker:
    """Collects written data and splits it into chunks."""

    def __init__(self, chunker: Chunker) -> None:
        self._chunker = chunker
        self._buffer = bytearray()
        self._chunks: list[bytes] = []

    def __repr__(self) -> str:
        return (
            f"IncrementalChunker(buffered={len(self._buffer)}, "
            f"chunks={len(self._chunks)})"
        )

    def write(self, data: bytes) -> int:
        """Add ``data`` to the chunker and return the number of bytes taken."""
        remaining = memoryview(bytes(data))
        total = len(remaining)
        while True:
            boundary = self._chunker.find_boundary(remaining)
            if boundary is None:
                self._buffer += remaining
                return total
            self._buffer += remaining[:boundary]
            self._chunks.append(bytes(self._buffer))
            self._buffer.clear()
            remaining = remaining[boundary:]
            self._chunker.reset()

    def flush(self) -> None:
        """Turn any buffered data into a final chunk."""
        if self._buffer:
            self._chunks.append(bytes(self._buffer))
            self._buffer.clear()
        self._chunker.reset()

    def chunks(self) -> list[bytes]:
        """Return and clear the chunks completed so far."""
        completed, self._chunks = self._chunks, []
        return completed