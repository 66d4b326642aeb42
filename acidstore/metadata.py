"""Repository metadata and information read from a data store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

import msgpack

from .config import RepoConfig
from .encryption import EncryptionKey, KeySalt
from .errors import (
    Corrupt,
    DeserializeError,
    InvalidData,
    NotFound,
    PasswordError,
    RepoError,
    SerializeError,
    StoreError,
)
from .ids import BlockKey
from .lock import DataStore


def _bytes_field(raw: Any, name: str) -> bytes:
    value = raw[name]
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"Field {name!r} is not binary data.")
    return bytes(value)


@dataclass(frozen=True)
class RepoInfo:
    """Information about a repository: its unique ID and its configuration."""

    id: uuid.UUID
    config: RepoConfig


@dataclass(frozen=True)
class RepoStats:
    """Statistics about a repository.

    ``apparent_size`` counts sparse holes in the objects of the current
    instance, ``actual_size`` counts the bytes actually stored for them, and
    ``repo_size`` counts the bytes stored across all instances.
    """

    apparent_size: int
    actual_size: int
    repo_size: int


@dataclass
class RepoMetadata:
    """The metadata stored in the superblock of a repository."""

    id: uuid.UUID
    config: RepoConfig
    master_key: bytes
    salt: KeySalt
    header_id: uuid.UUID

    def decrypt_master_key(self, password: bytes | str) -> EncryptionKey:
        """Decrypt and return the master key, raising PasswordError if it fails."""
        if isinstance(password, str):
            password = password.encode()
        encryption = self.config.encryption
        user_key = EncryptionKey.derive(
            password,
            self.salt,
            encryption.key_size(),
            self.config.memory_limit,
            self.config.operations_limit,
        )
        try:
            return EncryptionKey(encryption.decrypt(self.master_key, user_key))
        except InvalidData as exc:
            raise PasswordError() from exc

    def to_info(self) -> RepoInfo:
        """Return the public information held in this metadata."""
        return RepoInfo(id=self.id, config=self.config)

    def to_bytes(self) -> bytes:
        """Serialize the metadata to a compact binary form."""
        document = {
            "id": self.id.bytes,
            "config": self.config.to_dict(),
            "master_key": bytes(self.master_key),
            "salt": bytes(self.salt.value),
            "header_id": self.header_id.bytes,
        }
        try:
            return msgpack.packb(document, use_bin_type=True)
        except (TypeError, ValueError) as exc:
            raise SerializeError() from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> RepoMetadata:
        """Build metadata from the output of ``to_bytes``."""
        try:
            raw = msgpack.unpackb(bytes(data), raw=False)
            if not isinstance(raw, dict):
                raise TypeError("Metadata is not a map.")
            return cls(
                id=uuid.UUID(bytes=_bytes_field(raw, "id")),
                config=RepoConfig.from_dict(raw["config"]),
                master_key=_bytes_field(raw, "master_key"),
                salt=KeySalt(_bytes_field(raw, "salt")),
                header_id=uuid.UUID(bytes=_bytes_field(raw, "header_id")),
            )
        except DeserializeError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise DeserializeError() from exc


def peek_info_store(store: DataStore) -> RepoInfo:
    """Return information about the repository in ``store`` without opening it.

    Raises NotFound if the store holds no repository and Corrupt if its
    metadata cannot be read.
    """
    try:
        serialized = store.read_block(BlockKey.superblock())
    except RepoError:
        raise
    except Exception as exc:
        raise StoreError(exc) from exc
    if serialized is None:
        raise NotFound()
    try:
        metadata = RepoMetadata.from_bytes(serialized)
    except DeserializeError as exc:
        raise Corrupt() from exc
    return metadata.to_info()