"""Reading and writing chunks and blocks of data in a data store."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field

from .config import RepoConfig
from .encryption import EncryptionKey
from .errors import InvalidData, RepoError, StoreError
from .handle import Chunk, chunk_hash
from .ids import BlockKey
from .lock import DataStore, LockTable
from .metadata import RepoMetadata

_MAX_CHUNK_SIZE = 2**32 - 1


@dataclass(frozen=True)
class PackIndex:
    """Where part of a block lives inside a pack."""

    id: uuid.UUID
    offset: int
    size: int


@dataclass
class Pack:
    """A fixed-size block which holds data from several blocks."""

    id: uuid.UUID
    buffer: bytearray = field(default_factory=bytearray)

    @classmethod
    def new(cls, pack_size: int) -> Pack:
        """Return a new empty pack with a random ID."""
        if pack_size < 1:
            raise ValueError("The pack size must be at least one byte.")
        return cls(uuid.uuid4(), bytearray())

    def padded(self, pack_size: int) -> bytes:
        """Return the contents of the pack padded with null bytes to ``pack_size``."""
        return bytes(self.buffer).ljust(pack_size, b"\0")


@dataclass
class ChunkInfo:
    """The block holding a chunk and the handles which refer to it."""

    block_id: uuid.UUID
    references: set[int] = field(default_factory=set)


@dataclass(eq=False)
class RepoState:
    """The in-memory state of an open repository."""

    store: DataStore
    metadata: RepoMetadata
    master_key: EncryptionKey
    chunks: dict[Chunk, ChunkInfo] = field(default_factory=dict)
    packs: dict[uuid.UUID, list[PackIndex]] = field(default_factory=dict)
    transactions: LockTable[int] = field(default_factory=LockTable)
    store_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def config(self) -> RepoConfig:
        return self.metadata.config

    def encode_data(self, data: bytes) -> bytes:
        """Compress and encrypt ``data``."""
        compressed = self.config.compression.compress(data)
        return self.config.encryption.encrypt(compressed, self.master_key)

    def decode_data(self, data: bytes) -> bytes:
        """Decrypt and decompress ``data``."""
        decrypted = self.config.encryption.decrypt(data, self.master_key)
        return self.config.compression.decompress(decrypted)

    def _read_store(self, key: BlockKey) -> bytes | None:
        try:
            with self.store_lock:
                return self.store.read_block(key)
        except RepoError:
            raise
        except Exception as exc:
            raise StoreError(exc) from exc

    def _write_store(self, key: BlockKey, data: bytes) -> None:
        try:
            with self.store_lock:
                self.store.write_block(key, data)
        except RepoError:
            raise
        except Exception as exc:
            raise StoreError(exc) from exc


@dataclass
class StoreState:
    """The most recently read pack and the pack currently being filled."""

    read_buffer: Pack | None = None
    write_buffer: Pack | None = None


def _read_direct(repo_state: RepoState, id: uuid.UUID) -> bytes:
    encoded = repo_state._read_store(BlockKey.data(id))
    if encoded is None:
        raise InvalidData()
    return repo_state.decode_data(encoded)


def _write_direct(repo_state: RepoState, id: uuid.UUID, data: bytes) -> None:
    repo_state._write_store(BlockKey.data(id), repo_state.encode_data(data))


def _read_packed(repo_state: RepoState, store_state: StoreState, id: uuid.UUID) -> bytes:
    index_list = repo_state.packs.get(id)
    if index_list is None:
        raise InvalidData()

    block = bytearray()
    # A block can be spread across several packs; gather its pieces in order.
    for pack_index in index_list:
        pack = store_state.read_buffer
        if pack is None or pack.id != pack_index.id:
            encoded = repo_state._read_store(BlockKey.data(pack_index.id))
            if encoded is None:
                raise InvalidData()
            decrypted = repo_state.config.encryption.decrypt(
                encoded, repo_state.master_key
            )
            pack = Pack(pack_index.id, bytearray(decrypted))
            store_state.read_buffer = pack
        start = pack_index.offset
        block += pack.buffer[start : start + pack_index.size]

    return repo_state.config.compression.decompress(bytes(block))


def _write_pack(repo_state: RepoState, pack_id: uuid.UUID, contents: bytes) -> None:
    # Whole packs are encrypted so the sizes of the chunks inside them stay hidden.
    encrypted = repo_state.config.encryption.encrypt(contents, repo_state.master_key)
    repo_state._write_store(BlockKey.data(pack_id), encrypted)


def _write_packed(
    repo_state: RepoState,
    store_state: StoreState,
    pack_size: int,
    id: uuid.UUID,
    data: bytes,
) -> None:
    if store_state.write_buffer is None:
        store_state.write_buffer = Pack.new(pack_size)
    current = store_state.write_buffer

    # Compress before packing so that packs keep a fixed size.
    compressed = repo_state.config.compression.compress(data)

    current_offset = len(current.buffer)
    current_size = 0
    bytes_written = 0
    new_indices: list[PackIndex] = []

    while True:
        remaining_space = pack_size - len(current.buffer)
        piece = compressed[bytes_written : bytes_written + remaining_space]
        current.buffer += piece
        bytes_written += len(piece)
        current_size += len(piece)

        new_indices.append(PackIndex(current.id, current_offset, current_size))

        if len(current.buffer) == pack_size:
            _write_pack(repo_state, current.id, bytes(current.buffer))
            current_offset = 0
            current_size = 0
            current = Pack.new(pack_size)
            store_state.write_buffer = current

        if bytes_written == len(compressed):
            # The partly filled pack is written padded but kept buffered so that
            # later blocks can fill it and overwrite it in the store.
            _write_pack(repo_state, current.id, current.padded(pack_size))
            repo_state.packs[id] = new_indices
            return


class StoreReader:
    """Reads blocks and chunks from the data store of a repository."""

    def __init__(self, repo_state: RepoState, store_state: StoreState) -> None:
        self.repo_state = repo_state
        self.store_state = store_state

    def read_block(self, id: uuid.UUID) -> bytes:
        """Return the decoded contents of the block with the given ``id``."""
        if self.repo_state.config.packing.is_fixed:
            return _read_packed(self.repo_state, self.store_state, id)
        return _read_direct(self.repo_state, id)

    def read_chunk(self, chunk: Chunk) -> bytes:
        """Return the contents of ``chunk``."""
        info = self.repo_state.chunks.get(chunk)
        if info is None:
            raise InvalidData()
        return self.read_block(info.block_id)


class StoreWriter(StoreReader):
    """Reads and writes blocks and chunks in the data store of a repository."""

    def read_block(self, id: uuid.UUID) -> bytes:
        """Return the decoded contents of the block with the given ``id``."""
        return super().read_block(id)

    def read_chunk(self, chunk: Chunk) -> bytes:
        """Return the contents of ``chunk``."""
        return super().read_chunk(chunk)

    def write_block(self, id: uuid.UUID, data: bytes) -> None:
        """Encode ``data`` and store it as the block ``id``, replacing any old one."""
        pack_size = self.repo_state.config.packing.pack_size
        if pack_size is None:
            _write_direct(self.repo_state, id, bytes(data))
        else:
            _write_packed(self.repo_state, self.store_state, pack_size, id, bytes(data))

    def write_chunk(self, data: bytes, id: int) -> Chunk:
        """Store ``data`` as a chunk referenced by handle ``id`` and return it.

        A chunk with the same contents is reused rather than written again.
        """
        data = bytes(data)
        if len(data) > _MAX_CHUNK_SIZE:
            raise ValueError("Given data exceeds maximum chunk size.")

        chunk = Chunk(size=len(data), hash=chunk_hash(data))
        info = self.repo_state.chunks.get(chunk)
        if info is not None:
            info.references.add(id)
            return chunk

        block_id = uuid.uuid4()
        self.write_block(block_id, data)
        self.repo_state.chunks[chunk] = ChunkInfo(block_id=block_id, references={id})
        return chunk