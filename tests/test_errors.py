import pytest

from acidstore import errors


@pytest.mark.parametrize(
    ("cls", "message"),
    [
        (errors.AlreadyExists, "A resource already exists."),
        (errors.NotFound, "A resource was not found."),
        (errors.PasswordError, "The provided password was invalid."),
        (errors.Locked, "A resource is locked."),
        (errors.NotLocked, "A resource is not locked."),
        (errors.Corrupt, "The repository is corrupt."),
        (errors.UnsupportedStore, "This data store is an unsupported format."),
        (errors.UnsupportedRepo, "This repository is an unsupported format."),
        (errors.InvalidSavepoint, "The given savepoint is invalid."),
        (errors.InvalidObject, "This object is no longer valid."),
        (
            errors.TransactionInProgress,
            "A transaction is currently in progress for this object.",
        ),
        (errors.FileTypeError, "This file type is not supported."),
        (errors.InvalidPath, "The provided file path is invalid."),
        (errors.NotEmpty, "The directory is not empty."),
        (errors.NotDirectory, "The file is not a directory."),
        (errors.NotFile, "The file is not a regular file."),
        (errors.SerializeError, "A value could not be serialized."),
        (errors.DeserializeError, "A value could not be deserialized."),
        (
            errors.InvalidData,
            "Ciphertext verification failed or data is otherwise invalid.",
        ),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (errors.NotFound(), "A resource was not found."),
        (errors.Locked(), "A resource is locked."),
        (
            errors.InvalidData(),
            "Ciphertext verification failed or data is otherwise invalid.",
        ),
        (errors.StoreError(ValueError("missing block")), "missing block"),
    ],
)
def test_all_errors_share_base(error, message):
    with pytest.raises(errors.RepoError) as info:
        raise error
    assert info.value is error
    assert str(info.value) == message


def test_custom_message_overrides_default():
    assert str(errors.Corrupt("bad header")) == "bad header"


def test_store_error_wraps_inner_error():
    inner = KeyError("missing block")
    error = errors.StoreError(inner)
    assert error.error is inner
    assert str(error) == str(inner)


def test_raised_error_is_catchable_by_base():
    error = errors.Locked("lock held elsewhere")
    assert str(error) == "lock held elsewhere"
    with pytest.raises(errors.RepoError, match="lock held elsewhere") as info:
        raise error
    assert info.value is error