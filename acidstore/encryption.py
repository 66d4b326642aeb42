"""Encryption of data and derivation of keys."""

from __future__ import annotations

import hmac
import os
from dataclasses import dataclass
from enum import Enum

import nacl.bindings
import nacl.exceptions
import nacl.utils
from nacl.pwhash import argon2id

from .errors import InvalidData

_NONCE_SIZE = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES
_KEY_SIZE = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_KEYBYTES


class ResourceLimit(Enum):
    """A limit on the resources used by key derivation."""

    INTERACTIVE = "Interactive"
    MODERATE = "Moderate"
    SENSITIVE = "Sensitive"

    def mem_limit(self) -> int:
        """Return the memory limit in bytes for this level."""
        return {
            ResourceLimit.INTERACTIVE: argon2id.MEMLIMIT_INTERACTIVE,
            ResourceLimit.MODERATE: argon2id.MEMLIMIT_MODERATE,
            ResourceLimit.SENSITIVE: argon2id.MEMLIMIT_SENSITIVE,
        }[self]

    def ops_limit(self) -> int:
        """Return the operations limit for this level."""
        return {
            ResourceLimit.INTERACTIVE: argon2id.OPSLIMIT_INTERACTIVE,
            ResourceLimit.MODERATE: argon2id.OPSLIMIT_MODERATE,
            ResourceLimit.SENSITIVE: argon2id.OPSLIMIT_SENSITIVE,
        }[self]


class EncryptionKey:
    """A secret encryption key whose bytes are kept out of its repr."""

    __slots__ = ("_secret",)

    def __init__(self, secret: bytes) -> None:
        self._secret = bytes(secret)

    @property
    def secret(self) -> bytes:
        """The raw bytes of the key."""
        return self._secret

    def __len__(self) -> int:
        return len(self._secret)

    def __repr__(self) -> str:
        return "EncryptionKey([REDACTED])"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EncryptionKey):
            return NotImplemented
        return hmac.compare_digest(self._secret, other._secret)

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def generate(cls, size: int) -> EncryptionKey:
        """Return a random key of ``size`` bytes from the OS random source."""
        return cls(os.urandom(size))

    @classmethod
    def derive(
        cls,
        password: bytes,
        salt: KeySalt,
        size: int,
        memory: ResourceLimit,
        operations: ResourceLimit,
    ) -> EncryptionKey:
        """Derive a key of ``size`` bytes from ``password`` with Argon2id.

        A ``size`` of zero, as used when encryption is disabled, yields an empty key.
        """
        if size == 0:
            return cls(b"")
        return cls(
            argon2id.kdf(
                size,
                bytes(password),
                salt.value,
                opslimit=operations.ops_limit(),
                memlimit=memory.mem_limit(),
            )
        )


@dataclass(frozen=True)
class KeySalt:
    """Salt for deriving an encryption key."""

    value: bytes = b""

    @classmethod
    def empty(cls) -> KeySalt:
        """Return an empty salt."""
        return cls(b"")

    @classmethod
    def generate(cls) -> KeySalt:
        """Return a new random salt of the size Argon2id expects."""
        return cls(nacl.utils.random(argon2id.SALTBYTES))


class Encryption(Enum):
    """A data encryption method."""

    NONE = "None"
    XCHACHA20_POLY1305 = "XChaCha20Poly1305"

    def encrypt(self, cleartext: bytes, key: EncryptionKey) -> bytes:
        """Encrypt ``cleartext`` with ``key``; the nonce is prepended."""
        if self is Encryption.NONE:
            return bytes(cleartext)
        nonce = nacl.utils.random(_NONCE_SIZE)
        ciphertext = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
            bytes(cleartext), None, nonce, key.secret
        )
        return nonce + ciphertext

    def decrypt(self, ciphertext: bytes, key: EncryptionKey) -> bytes:
        """Decrypt ``ciphertext`` with ``key``, raising InvalidData on failure."""
        if self is Encryption.NONE:
            return bytes(ciphertext)
        ciphertext = bytes(ciphertext)
        if len(ciphertext) < _NONCE_SIZE:
            raise InvalidData()
        nonce, body = ciphertext[:_NONCE_SIZE], ciphertext[_NONCE_SIZE:]
        try:
            return nacl.bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
                body, None, nonce, key.secret
            )
        except nacl.exceptions.CryptoError as exc:
            raise InvalidData() from exc

    def key_size(self) -> int:
        """Return the key size in bytes for this method."""
        return 0 if self is Encryption.NONE else _KEY_SIZE