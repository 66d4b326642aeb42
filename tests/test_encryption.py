import nacl.bindings
import pytest
from nacl.pwhash import argon2id

from acidstore.encryption import Encryption, EncryptionKey, KeySalt, ResourceLimit
from acidstore.errors import InvalidData

MESSAGE = b"some data to protect"


@pytest.fixture
def key():
    return EncryptionKey.generate(Encryption.XCHACHA20_POLY1305.key_size())


def test_round_trip(key):
    method = Encryption.XCHACHA20_POLY1305
    assert method.decrypt(method.encrypt(MESSAGE, key), key) == MESSAGE


def test_ciphertext_layout(key):
    ciphertext = Encryption.XCHACHA20_POLY1305.encrypt(MESSAGE, key)
    expected = (
        len(MESSAGE)
        + nacl.bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES
        + nacl.bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES
    )
    assert len(ciphertext) == expected


def test_nonces_differ(key):
    method = Encryption.XCHACHA20_POLY1305
    first = method.encrypt(MESSAGE, key)
    second = method.encrypt(MESSAGE, key)
    assert first != second
    assert len(first) == len(second)
    assert method.decrypt(first, key) == MESSAGE
    assert method.decrypt(second, key) == MESSAGE


def test_tampered_ciphertext_is_rejected(key):
    method = Encryption.XCHACHA20_POLY1305
    ciphertext = bytearray(method.encrypt(MESSAGE, key))
    ciphertext[-1] ^= 0xFF
    with pytest.raises(InvalidData):
        method.decrypt(bytes(ciphertext), key)


def test_wrong_key_is_rejected(key):
    method = Encryption.XCHACHA20_POLY1305
    other = EncryptionKey.generate(method.key_size())
    with pytest.raises(InvalidData):
        method.decrypt(method.encrypt(MESSAGE, key), other)


def test_short_ciphertext_is_rejected(key):
    with pytest.raises(InvalidData):
        Encryption.XCHACHA20_POLY1305.decrypt(b"short", key)


def test_none_is_passthrough():
    empty = EncryptionKey(b"")
    assert Encryption.NONE.encrypt(MESSAGE, empty) == MESSAGE
    assert Encryption.NONE.decrypt(MESSAGE, empty) == MESSAGE


def test_key_sizes():
    assert Encryption.NONE.key_size() == 0
    assert (
        Encryption.XCHACHA20_POLY1305.key_size()
        == nacl.bindings.crypto_aead_xchacha20poly1305_ietf_KEYBYTES
    )


def test_salts():
    first, second = KeySalt.generate(), KeySalt.generate()
    assert len(first.value) == argon2id.SALTBYTES
    assert first != second
    assert KeySalt.empty().value == b""


def test_derive_is_deterministic():
    password = b"password"
    salt = KeySalt.generate()
    limit = ResourceLimit.INTERACTIVE
    first = EncryptionKey.derive(password, salt, 32, limit, limit)
    second = EncryptionKey.derive(password, salt, 32, limit, limit)
    assert first == second
    assert len(first) == 32


def test_derive_depends_on_password():
    salt = KeySalt.generate()
    limit = ResourceLimit.INTERACTIVE
    password = b"password"
    first = EncryptionKey.derive(password, salt, 32, limit, limit)
    password = b"secret"
    second = EncryptionKey.derive(password, salt, 32, limit, limit)
    assert first != second


def test_derive_zero_size_gives_empty_key():
    password = b"password"
    limit = ResourceLimit.INTERACTIVE
    derived = EncryptionKey.derive(password, KeySalt.empty(), 0, limit, limit)
    assert derived.secret == b""


def test_derived_key_decrypts():
    password = b"password"
    salt = KeySalt.generate()
    limit = ResourceLimit.INTERACTIVE
    method = Encryption.XCHACHA20_POLY1305
    sealing = EncryptionKey.derive(password, salt, method.key_size(), limit, limit)
    opening = EncryptionKey.derive(password, salt, method.key_size(), limit, limit)
    assert method.decrypt(method.encrypt(MESSAGE, sealing), opening) == MESSAGE


def test_repr_hides_secret(key):
    assert key.secret.hex() not in repr(key)
    assert "REDACTED" in repr(key)


def test_generated_key_length():
    assert len(EncryptionKey.generate(16)) == 16


@pytest.mark.parametrize(
    ("limit", "mem", "ops"),
    [
        (
            ResourceLimit.INTERACTIVE,
            argon2id.MEMLIMIT_INTERACTIVE,
            argon2id.OPSLIMIT_INTERACTIVE,
        ),
        (ResourceLimit.MODERATE, argon2id.MEMLIMIT_MODERATE, argon2id.OPSLIMIT_MODERATE),
        (
            ResourceLimit.SENSITIVE,
            argon2id.MEMLIMIT_SENSITIVE,
            argon2id.OPSLIMIT_SENSITIVE,
        ),
    ],
)
def test_resource_limits(limit, mem, ops):
    assert limit.mem_limit() == mem
    assert limit.ops_limit() == ops