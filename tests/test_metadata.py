import dataclasses
import uuid

import msgpack
import pytest

from acidstore.chunking import Chunking
from acidstore.compression import Compression
from acidstore.config import Packing, RepoConfig
from acidstore.encryption import Encryption, EncryptionKey, KeySalt, ResourceLimit
from acidstore.errors import (
    Corrupt,
    DeserializeError,
    NotFound,
    PasswordError,
    StoreError,
)
from acidstore.ids import BlockKey
from acidstore.metadata import RepoInfo, RepoMetadata, RepoStats, peek_info_store


class MemoryStore:
    def __init__(self):
        self.blocks = {}

    def read_block(self, key):
        return self.blocks.get(key)

    def write_block(self, key, data):
        self.blocks[key] = bytes(data)

    def remove_block(self, key):
        self.blocks.pop(key, None)

    def list_blocks(self, block_type):
        return [key.id for key in self.blocks if key.type is block_type]


class BrokenStore(MemoryStore):
    def read_block(self, key):
        raise RuntimeError("connection lost")


def make_metadata(config=None, master_key=b"", salt=None):
    return RepoMetadata(
        id=uuid.uuid4(),
        config=config or RepoConfig(),
        master_key=master_key,
        salt=salt or KeySalt.empty(),
        header_id=uuid.uuid4(),
    )


def test_bytes_round_trip_default_config():
    metadata = make_metadata()
    assert RepoMetadata.from_bytes(metadata.to_bytes()) == metadata


def test_bytes_round_trip_custom_config():
    config = RepoConfig(
        chunking=Chunking.fixed(1024 * 16),
        packing=Packing.fixed(4096),
        compression=Compression.lz4(2),
        encryption=Encryption.XCHACHA20_POLY1305,
        memory_limit=ResourceLimit.MODERATE,
        operations_limit=ResourceLimit.MODERATE,
    )
    metadata = make_metadata(config=config, master_key=b"\x01\x02", salt=KeySalt(b"s" * 16))
    restored = RepoMetadata.from_bytes(metadata.to_bytes())
    assert restored == metadata
    assert restored.config == config


def test_from_bytes_rejects_garbage():
    with pytest.raises(DeserializeError):
        RepoMetadata.from_bytes(b"not msgpack")


def test_from_bytes_rejects_non_map():
    with pytest.raises(DeserializeError):
        RepoMetadata.from_bytes(msgpack.packb([1, 2, 3]))


def test_from_bytes_rejects_missing_fields():
    with pytest.raises(DeserializeError):
        RepoMetadata.from_bytes(msgpack.packb({"id": uuid.uuid4().bytes}))


def test_to_info_copies_id_and_config():
    metadata = make_metadata()
    info = metadata.to_info()
    assert info == RepoInfo(id=metadata.id, config=metadata.config)


def test_decrypt_master_key_without_encryption():
    metadata = make_metadata(master_key=b"")
    assert metadata.decrypt_master_key(b"") == EncryptionKey(b"")


def test_decrypt_master_key_with_encryption():
    password = b"password"
    wrong_password = b"secret"
    salt = KeySalt.generate()
    config = RepoConfig(encryption=Encryption.XCHACHA20_POLY1305)
    user_key = EncryptionKey.derive(
        password,
        salt,
        Encryption.XCHACHA20_POLY1305.key_size(),
        ResourceLimit.INTERACTIVE,
        ResourceLimit.INTERACTIVE,
    )
    master = EncryptionKey.generate(Encryption.XCHACHA20_POLY1305.key_size())
    encrypted_master = Encryption.XCHACHA20_POLY1305.encrypt(master.secret, user_key)
    metadata = make_metadata(config=config, master_key=encrypted_master, salt=salt)

    assert metadata.decrypt_master_key(password) == master
    with pytest.raises(PasswordError):
        metadata.decrypt_master_key(wrong_password)


def test_peek_info_store_reads_superblock():
    store = MemoryStore()
    metadata = make_metadata()
    store.write_block(BlockKey.superblock(), metadata.to_bytes())
    info = peek_info_store(store)
    assert info.id == metadata.id
    assert info.config == metadata.config


def test_peek_info_store_empty_store_is_not_found():
    with pytest.raises(NotFound):
        peek_info_store(MemoryStore())


def test_peek_info_store_corrupt_superblock():
    store = MemoryStore()
    store.write_block(BlockKey.superblock(), b"not msgpack")
    with pytest.raises(Corrupt):
        peek_info_store(store)


def test_peek_info_store_wraps_store_errors():
    with pytest.raises(StoreError) as excinfo:
        peek_info_store(BrokenStore())
    assert isinstance(excinfo.value.error, RuntimeError)


def test_repo_stats_is_immutable():
    stats = RepoStats(apparent_size=10, actual_size=5, repo_size=5)
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.repo_size = 0
    assert stats.apparent_size >= stats.actual_size