"""Repository configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .chunking import Chunking
from .compression import Compression
from .encryption import Encryption, ResourceLimit
from .errors import DeserializeError, RepoError


@dataclass(frozen=True)
class Packing:
    """A method for packing chunks into blocks of a fixed size.

    ``pack_size`` is None when chunks are stored directly without packing.
    """

    pack_size: int | None = None

    def __post_init__(self) -> None:
        if self.pack_size is not None and self.pack_size < 1:
            raise ValueError("The pack size must be at least one byte.")

    @classmethod
    def none(cls) -> Packing:
        """Return the method which stores each chunk in its own block."""
        return cls(None)

    @classmethod
    def fixed(cls, pack_size: int) -> Packing:
        """Return packing into blocks of ``pack_size`` bytes."""
        return cls(pack_size)

    @property
    def is_fixed(self) -> bool:
        return self.pack_size is not None


def _packing_to_dict(packing: Packing) -> dict[str, Any]:
    if packing.pack_size is None:
        return {"method": "none"}
    return {"method": "fixed", "size": packing.pack_size}


def _packing_from_dict(data: dict[str, Any]) -> Packing:
    method = data["method"]
    if method == "none":
        return Packing.none()
    if method == "fixed":
        return Packing.fixed(int(data["size"]))
    raise DeserializeError(f"Unknown packing method: {method!r}")


@dataclass
class RepoConfig:
    """The configuration chosen for a repository when it is created."""

    chunking: Chunking = Chunking.FIXED
    packing: Packing = field(default_factory=Packing.none)
    compression: Compression = field(default_factory=Compression.none)
    encryption: Encryption = Encryption.NONE
    memory_limit: ResourceLimit = ResourceLimit.INTERACTIVE
    operations_limit: ResourceLimit = ResourceLimit.INTERACTIVE

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable representation of the configuration."""
        return {
            "chunking": self.chunking.to_dict(),
            "packing": _packing_to_dict(self.packing),
            "compression": self.compression.to_dict(),
            "encryption": self.encryption.value,
            "memory_limit": self.memory_limit.value,
            "operations_limit": self.operations_limit.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepoConfig:
        """Build a configuration from the output of ``to_dict``."""
        try:
            return cls(
                chunking=Chunking.from_dict(data["chunking"]),
                packing=_packing_from_dict(data["packing"]),
                compression=Compression.from_dict(data["compression"]),
                encryption=Encryption(data["encryption"]),
                memory_limit=ResourceLimit(data["memory_limit"]),
                operations_limit=ResourceLimit(data["operations_limit"]),
            )
        except RepoError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise DeserializeError() from exc