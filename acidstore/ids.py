"""Allocation of integer IDs and keys for blocks in a data store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import DeserializeError


@dataclass
class IdTable:
    """A table for allocating integer IDs, reusing recycled ones."""

    highest: int = 0
    unused: set[int] = field(default_factory=set)

    def next(self) -> int:
        """Return the next unused ID from the table."""
        if self.unused:
            return self.unused.pop()
        self.highest += 1
        return self.highest

    def contains(self, id: int) -> bool:
        """Return whether ``id`` is currently allocated."""
        return id <= self.highest and id not in self.unused

    def recycle(self, id: int) -> bool:
        """Return ``id`` to the table; return False if it was not allocated."""
        if not self.contains(id):
            return False
        self.unused.add(id)
        return True

    def __contains__(self, id: object) -> bool:
        return isinstance(id, int) and self.contains(id)

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable representation of the table."""
        return {"highest": self.highest, "unused": sorted(self.unused)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IdTable:
        """Build a table from the output of ``to_dict``."""
        try:
            return cls(
                highest=int(data["highest"]),
                unused={int(value) for value in data["unused"]},
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DeserializeError() from exc


class BlockType(Enum):
    """The kinds of block kept in a data store."""

    DATA = "data"
    LOCK = "lock"
    SUPER = "super"


@dataclass(frozen=True)
class BlockKey:
    """The address of a block in a data store."""

    type: BlockType
    id: uuid.UUID | None = None

    @classmethod
    def data(cls, id: uuid.UUID) -> BlockKey:
        """Return the key of the data block with the given ``id``."""
        return cls(BlockType.DATA, id)

    @classmethod
    def lock(cls, id: uuid.UUID) -> BlockKey:
        """Return the key of the lock block with the given ``id``."""
        return cls(BlockType.LOCK, id)

    @classmethod
    def superblock(cls) -> BlockKey:
        """Return the key of the block holding repository metadata."""
        return cls(BlockType.SUPER)