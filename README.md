# acidstore

acidstore holds the building blocks of a secure, deduplicated data
repository. Data is split into chunks, identified by a BLAKE2b checksum so
that equal chunks are stored once, optionally compressed with LZ4, optionally
encrypted with XChaCha20-Poly1305, and optionally packed into fixed-size
blocks before it reaches a data store that you supply.

## Installation

```
pip install acidstore
```

To run the test suite:

```
pip install acidstore[test]
pytest
```

## Modules

- `acidstore.errors` - `RepoError` and its subclasses, such as `NotFound`,
  `AlreadyExists`, `Locked`, `PasswordError`, `Corrupt`, `InvalidData`,
  `InvalidObject`, `TransactionInProgress`, `SerializeError` and
  `DeserializeError`. Exceptions raised by a data store are wrapped in
  `StoreError`, which keeps the original in its `error` attribute.
- `acidstore.ids` - `IdTable`, which hands out integer IDs and reuses recycled
  ones; `BlockType` and `BlockKey`, the addresses of blocks in a data store
  (`BlockKey.data(id)`, `BlockKey.lock(id)`, `BlockKey.superblock()`).
- `acidstore.chunking` - `Chunking.fixed(size)` cuts data into chunks of a
  fixed size; `Chunking.zpaq(bits)` uses content-defined chunking with an
  average chunk of 2**bits bytes. `Chunking.FIXED` (1 MiB) and
  `Chunking.ZPAQ` (18 bits) are ready-made defaults. `IncrementalChunker`
  takes data through `write`, returns finished chunks from `chunks()`, and
  `flush()` turns any buffered data into a last chunk.
- `acidstore.compression` - `Compression.none()` and `Compression.lz4(level)`.
- `acidstore.encryption` - `Encryption.NONE` and
  `Encryption.XCHACHA20_POLY1305`; `EncryptionKey.generate(size)` and
  `EncryptionKey.derive(...)` (Argon2id); `KeySalt`; `ResourceLimit`
  (`INTERACTIVE`, `MODERATE`, `SENSITIVE`).
- `acidstore.config` - `RepoConfig`, grouping chunking, `Packing`
  (`Packing.none()` or `Packing.fixed(pack_size)`), compression, encryption
  and the key-derivation limits, with `to_dict` / `from_dict`.
- `acidstore.handle` - `chunk_hash`, `Chunk`, `Hole`, `ObjectHandle`,
  `ObjectId`, `ContentId` (whose `compare_contents` checks a binary stream
  against stored contents without reading the store) and `ObjectStats`.
- `acidstore.lock` - the `DataStore` protocol; `lock_store` and
  `unlock_store`, a two-phase lock kept as a block in the data store;
  `LockTable` and `Lock` for locks between threads of one process.
- `acidstore.metadata` - `RepoMetadata` (binary form through `to_bytes` /
  `from_bytes`, `decrypt_master_key`), `RepoInfo`, `RepoStats` and
  `peek_info_store`.
- `acidstore.chunk_store` - `RepoState`, `StoreState`, `StoreReader` and
  `StoreWriter`, which read and write blocks and chunks with compression,
  encryption and packing applied.

## A data store

Any object with these four methods satisfies `acidstore.lock.DataStore`:

```python
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
```

## Example: chunking data

```python
from acidstore.chunking import Chunking, IncrementalChunker

chunker = IncrementalChunker(Chunking.fixed(4).to_chunker())
chunker.write(b"abcdefghij")
chunker.flush()
assert chunker.chunks() == [b"abcd", b"efgh", b"ij"]
```

## Example: encrypting data

```python
from acidstore.encryption import Encryption, EncryptionKey

encryption = Encryption.XCHACHA20_POLY1305
key = EncryptionKey.generate(encryption.key_size())
ciphertext = encryption.encrypt(b"data", key)
assert encryption.decrypt(ciphertext, key) == b"data"
```

A wrong key or altered ciphertext raises `InvalidData`.

## Example: storing chunks

```python
import uuid

from acidstore.chunk_store import RepoState, StoreState, StoreWriter
from acidstore.config import Packing, RepoConfig
from acidstore.encryption import EncryptionKey, KeySalt
from acidstore.metadata import RepoMetadata

metadata = RepoMetadata(
    id=uuid.uuid4(),
    config=RepoConfig(packing=Packing.fixed(64)),
    master_key=bytes(),
    salt=KeySalt.empty(),
    header_id=uuid.uuid4(),
)
state = RepoState(store=MemoryStore(), metadata=metadata, master_key=EncryptionKey(bytes()))
writer = StoreWriter(state, StoreState())

chunk = writer.write_chunk(b"hello", 1)
assert writer.write_chunk(b"hello", 2) == chunk  # deduplicated
assert writer.read_chunk(chunk) == b"hello"
assert state.chunks[chunk].references == {1, 2}
```

## Example: locking and peeking at a store

```python
from acidstore.encryption import Encryption, EncryptionKey
from acidstore.errors import Locked
from acidstore.ids import BlockKey
from acidstore.lock import lock_store, unlock_store
from acidstore.metadata import peek_info_store

store = MemoryStore()
no_key = EncryptionKey(bytes())

lock_id = lock_store(store, Encryption.NONE, no_key, b"context", lambda existing: False)
try:
    lock_store(store, Encryption.NONE, no_key, b"other", lambda existing: False)
except Locked:
    pass
unlock_store(store, lock_id)

store.write_block(BlockKey.superblock(), metadata.to_bytes())
assert peek_info_store(store) == metadata.to_info()
```

`peek_info_store` raises `NotFound` when the store has no superblock and
`Corrupt` when the metadata cannot be read.

## What this package does not do

- It has no repository type: nothing here creates, opens, commits, rolls back
  or cleans a repository, or keeps a map of keys to objects.
- It has no file-like object views with read, write, seek and transactions.
  `ObjectHandle`, `ContentId` and `ObjectStats` describe stored objects, but
  reading and writing them is left to the caller through `StoreReader` and
  `StoreWriter`.
- It ships no data store. `DataStore` is a protocol; storage on disk, in a
  database or on a remote server must be supplied by the caller.
- It has no command-line program.