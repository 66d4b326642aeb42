"""Locking of resources within a process and of repositories in a data store."""

from __future__ import annotations

import uuid
import weakref
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from typing import Generic, Protocol, TypeVar, runtime_checkable

from .encryption import Encryption, EncryptionKey
from .errors import Locked, RepoError, StoreError
from .ids import BlockKey, BlockType

T = TypeVar("T", bound=Hashable)


@runtime_checkable
class DataStore(Protocol):
    """A store of binary blocks addressed by ``BlockKey``."""

    def read_block(self, key: BlockKey) -> bytes | None: ...

    def write_block(self, key: BlockKey, data: bytes) -> None: ...

    def remove_block(self, key: BlockKey) -> None: ...

    def list_blocks(self, block_type: BlockType) -> list[uuid.UUID]: ...


class Lock(Generic[T]):
    """A lock held on a resource, released when it is dropped or its block exits."""

    def __init__(self, id: T, table: LockTable[T]) -> None:
        self.id = id
        self._table = weakref.ref(table)

    def __repr__(self) -> str:
        return f"Lock({self.id!r})"

    def __enter__(self) -> Lock[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        table = self._table()
        if table is not None:
            table._discard(self)


class LockTable(Generic[T]):
    """Tracks locks on resources identified by hashable IDs."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[T, Lock[T]] = (
            weakref.WeakValueDictionary()
        )

    def __contains__(self, id: object) -> bool:
        return id in self._locks

    def __len__(self) -> int:
        return len(self._locks)

    def acquire_lock(self, id: T) -> Lock[T] | None:
        """Return a new lock on ``id``, or None if it is already locked."""
        if id in self._locks:
            return None
        lock = Lock(id, self)
        self._locks[id] = lock
        return lock

    def _discard(self, lock: Lock[T]) -> None:
        if self._locks.get(lock.id) is lock:
            del self._locks[lock.id]


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except RepoError:
        raise
    except Exception as exc:
        raise StoreError(exc) from exc


def lock_store(
    store: DataStore,
    encryption: Encryption,
    key: EncryptionKey,
    context: bytes,
    handler: Callable[[bytes], bool],
) -> uuid.UUID:
    """Acquire a lock on ``store`` and return the ID of the lock block.

    An existing lock is removed only if ``handler``, given its context,
    returns True. A two-phase check guards against competing clients; when
    it fails neither client gets the lock and ``Locked`` is raised.
    """
    current_lock_id = uuid.uuid4()

    with _store_errors():
        existing_locks = list(store.list_blocks(BlockType.LOCK))

    if len(existing_locks) > 1:
        raise Locked()
    if existing_locks:
        existing_lock_id = existing_locks[0]
        with _store_errors():
            encrypted_context = store.read_block(BlockKey.lock(existing_lock_id))
        if encrypted_context is None:
            raise Locked()
        existing_context = encryption.decrypt(encrypted_context, key)
        if not handler(existing_context):
            raise Locked()
        with _store_errors():
            store.remove_block(BlockKey.lock(existing_lock_id))

    encrypted_current_context = encryption.encrypt(context, key)
    with _store_errors():
        store.write_block(BlockKey.lock(current_lock_id), encrypted_current_context)
        existing_locks = list(store.list_blocks(BlockType.LOCK))

    if existing_locks == [current_lock_id]:
        return current_lock_id

    with _store_errors():
        store.remove_block(BlockKey.lock(current_lock_id))
    raise Locked()


def unlock_store(store: DataStore, id: uuid.UUID) -> None:
    """Release the lock with the given ``id`` on ``store``."""
    with _store_errors():
        store.remove_block(BlockKey.lock(id))