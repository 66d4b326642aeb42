"""Exceptions raised by repository operations."""

from __future__ import annotations


class RepoError(Exception):
    """Base class for every error raised by a repository operation."""

    default_message = "A repository error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)


class AlreadyExists(RepoError):
    """A resource already exists."""

    default_message = "A resource already exists."


class NotFound(RepoError):
    """A resource was not found."""

    default_message = "A resource was not found."


class PasswordError(RepoError):
    """The provided password was invalid."""

    default_message = "The provided password was invalid."


class Locked(RepoError):
    """A resource is locked."""

    default_message = "A resource is locked."


class NotLocked(RepoError):
    """A resource is not locked."""

    default_message = "A resource is not locked."


class Corrupt(RepoError):
    """The repository is corrupt."""

    default_message = "The repository is corrupt."


class UnsupportedStore(RepoError):
    """The data store is an unsupported format."""

    default_message = "This data store is an unsupported format."


class UnsupportedRepo(RepoError):
    """The repository is an unsupported format."""

    default_message = "This repository is an unsupported format."


class InvalidSavepoint(RepoError):
    """The given savepoint is invalid."""

    default_message = "The given savepoint is invalid."


class InvalidObject(RepoError):
    """The object is no longer valid."""

    default_message = "This object is no longer valid."


class TransactionInProgress(RepoError):
    """A transaction is currently in progress for the object."""

    default_message = "A transaction is currently in progress for this object."


class FileTypeError(RepoError):
    """The file type is not supported."""

    default_message = "This file type is not supported."


class InvalidPath(RepoError):
    """The provided file path is invalid."""

    default_message = "The provided file path is invalid."


class NotEmpty(RepoError):
    """The directory is not empty."""

    default_message = "The directory is not empty."


class NotDirectory(RepoError):
    """The file is not a directory."""

    default_message = "The file is not a directory."


class NotFile(RepoError):
    """The file is not a regular file."""

    default_message = "The file is not a regular file."


class SerializeError(RepoError):
    """A value could not be serialized."""

    default_message = "A value could not be serialized."


class DeserializeError(RepoError):
    """A value could not be deserialized."""

    default_message = "A value could not be deserialized."


class InvalidData(RepoError):
    """Ciphertext verification failed or data is otherwise invalid."""

    default_message = "Ciphertext verification failed or data is otherwise invalid."


class StoreError(RepoError):
    """An error reported by the data store, which is kept in ``error``."""

    def __init__(self, error: BaseException | str) -> None:
        self.error = error
        super().__init__(str(error))