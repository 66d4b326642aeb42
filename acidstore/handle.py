"""Object handles, chunks, extents and the identities derived from them."""

from __future__ import annotations

import hashlib
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import BinaryIO, Union

HASH_SIZE = 32
"""The size in bytes of a chunk checksum."""

HOLE_BUFFER = 4096
"""The most bytes read at once when comparing contents against a hole."""


def chunk_hash(data: bytes) -> bytes:
    """Return the checksum which identifies a chunk holding ``data``."""
    return hashlib.blake2b(bytes(data), digest_size=HASH_SIZE).digest()


@dataclass(frozen=True)
class Chunk:
    """A chunk of data produced by the chunking algorithm."""

    size: int
    hash: bytes


@dataclass(frozen=True)
class Hole:
    """A region of empty space in a sparse object."""

    size: int


Extent = Union[Chunk, Hole]


@dataclass
class ObjectHandle:
    """The address of an object's data: its ID and the extents making it up."""

    id: int
    extents: list[Extent] = field(default_factory=list)

    def size(self) -> int:
        """Return the apparent size of the object in bytes."""
        return sum(extent.size for extent in self.extents)

    def chunks(self) -> Iterator[Chunk]:
        """Yield the chunks of the object in order, skipping holes."""
        return (extent for extent in self.extents if isinstance(extent, Chunk))


@dataclass(frozen=True)
class ObjectId:
    """The identity of an object within a repository."""

    repo_id: uuid.UUID
    handle_id: int


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    parts = []
    remaining = size
    while remaining > 0:
        block = stream.read(remaining)
        if not block:
            break
        parts.append(block)
        remaining -= len(block)
    return b"".join(parts)


@dataclass(frozen=True)
class ContentId:
    """An identifier of an object's contents at one point in time.

    Content IDs from different repositories never compare equal, and a sparse
    hole is distinct from a run of null bytes.
    """

    repo_id: uuid.UUID
    extents: tuple[Extent, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "extents", tuple(self.extents))

    def size(self) -> int:
        """Return the size of the contents in bytes."""
        return sum(extent.size for extent in self.extents)

    def compare_contents(self, other: BinaryIO) -> bool:
        """Return whether the binary stream ``other`` holds these contents.

        Holes match runs of null bytes. The stream may be read only partly
        when a difference is found early.
        """
        for extent in self.extents:
            if isinstance(extent, Chunk):
                data = _read_exact(other, extent.size)
                if len(data) < extent.size or chunk_hash(data) != extent.hash:
                    return False
            else:
                remaining = extent.size
                while remaining > 0:
                    block = other.read(min(remaining, HOLE_BUFFER))
                    if not block or any(block):
                        return False
                    remaining -= len(block)
        return not other.read(HOLE_BUFFER)


@dataclass(frozen=True)
class ObjectStats:
    """Statistics about an object.

    ``apparent_size`` counts sparse holes, ``actual_size`` does not, and
    ``holes`` gives the byte ranges of the holes.
    """

    apparent_size: int
    actual_size: int
    holes: tuple[range, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "holes", tuple(self.holes))