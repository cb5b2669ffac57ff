"""
pwclip - Cryptography Module

This file contains the two cryptographic stages of password derivation:

    1. Passphrase → scrypt → Derived Key (32 bytes)
    2. Derived Key + site context → HMAC-DRBG (SHA-512) → byte stream

The byte stream is then mapped onto a charset by charset.py.

Why this is safe to run on every device without syncing anything:
    - scrypt with fixed parameters and a fixed salt is a pure function
    - HMAC-DRBG is deterministic for a given seed and mixing order
    - Without the key, the stream is indistinguishable from random
"""

import hmac
import hashlib
import logging
import time
from functools import reduce
from typing import Iterable, NamedTuple, Union

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from . import config
from .errors import StreamExhausted
from .memory import SecretBuffer

logger = logging.getLogger("pwclip")

KeyMaterial = Union[bytes, bytearray, memoryview]


# =============================================================================
# Key Derivation
# =============================================================================

def derive_key(passphrase: bytes) -> SecretBuffer:
    """
    Derive the master key from a passphrase using scrypt.

    Why scrypt?
    - Memory-hard: 64 MiB per guess, expensive for attackers with GPUs
    - The salt is the fixed domain tag, so the same passphrase gives the
      same key everywhere

    Never fails: any byte string, including b"", gives a 32-byte key.
    scrypt keys HMAC-SHA256 with the passphrase, and HMAC zero-pads short
    keys, so trailing zero bytes do not change the result
    (b"" and b"\\x00" derive the same key).

    The passphrase is not wiped here; it belongs to the caller.

    Args:
        passphrase: Master passphrase bytes

    Returns:
        SecretBuffer holding the 32-byte key
    """
    kdf = Scrypt(
        salt=config.DOMAIN_TAG,
        length=config.KEY_SIZE,
        n=config.SCRYPT_N,
        r=config.SCRYPT_R,
        p=config.SCRYPT_P,
    )
    logger.debug(
        "Deriving key (scrypt N=%d r=%d p=%d)",
        config.SCRYPT_N, config.SCRYPT_R, config.SCRYPT_P,
    )
    started = time.perf_counter()
    key = SecretBuffer(kdf.derive(passphrase))
    logger.debug("Derived key in %.3fs", time.perf_counter() - started)
    return key


# =============================================================================
# Deterministic Byte Stream (HMAC-DRBG, SHA-512)
# =============================================================================

class DrbgState(NamedTuple):
    """HMAC-DRBG working state. Immutable: mixing returns a new state."""
    key: bytes
    value: bytes


def _hmac(key: bytes, *parts: KeyMaterial) -> bytes:
    mac = hmac.new(key, digestmod=hashlib.sha512)
    for part in parts:
        mac.update(part)
    return mac.digest()


def _update(state: DrbgState, data: KeyMaterial) -> DrbgState:
    """
    HMAC-DRBG update function (NIST SP 800-90A, 10.1.2.2).

    Both rounds always run, even when ``data`` is empty, so an empty
    context field still moves the state forward.
    """
    k = _hmac(state.key, state.value, b"\x00", data)
    v = _hmac(k, state.value)
    k = _hmac(k, v, b"\x01", data)
    v = _hmac(k, v)
    return DrbgState(k, v)


def seed(key: KeyMaterial) -> DrbgState:
    """
    Instantiate the generator from key material alone.

    Nonce and personalization string are both empty.
    """
    initial = DrbgState(
        key=b"\x00" * config.DRBG_BLOCK_SIZE,
        value=b"\x01" * config.DRBG_BLOCK_SIZE,
    )
    return _update(initial, key)


def mix(state: DrbgState, context: KeyMaterial) -> DrbgState:
    """Fold one context string into the state (a reseed, not a reset)."""
    return _update(state, context)


def mix_all(state: DrbgState, contexts: Iterable[KeyMaterial]) -> DrbgState:
    """
    Fold an ordered sequence of context strings into the state.

    Order matters: mix_all(s, [a, b]) != mix_all(s, [b, a]).
    """
    return reduce(mix, contexts, state)


class ByteStream:
    """
    Reads bytes from a DRBG state, in batches of any size.

    Each output block is V = HMAC(K, V). Bytes left over from a block are
    kept for the next read, so read(10) + read(100) == read(110).
    The first 64 bytes are exactly one SHA-512 HMAC-DRBG generate call.

    Usage:
        with ByteStream(state) as stream:
            first = stream.read(64)
            more = stream.read(64)   # continues where first left off
    """

    def __init__(self, state: DrbgState, limit: int = config.MAX_STREAM_BYTES):
        self._key = state.key
        self._value = state.value
        self._pending = bytearray()
        self._produced = 0
        self._limit = limit

    @property
    def produced(self) -> int:
        """Total bytes handed out so far."""
        return self._produced

    def read(self, n: int) -> bytearray:
        """
        Return the next ``n`` bytes of the stream.

        The caller owns the returned bytearray and should wipe it after use.

        Raises:
            ValueError: If n is negative
            StreamExhausted: If the stream's output bound would be exceeded
        """
        if n < 0:
            raise ValueError(f"cannot read a negative number of bytes ({n})")
        if self._produced + n > self._limit:
            raise StreamExhausted(
                f"byte stream limit of {self._limit} bytes reached"
            )

        while len(self._pending) < n:
            self._value = _hmac(self._key, self._value)
            self._pending += self._value

        out = self._pending[:n]
        remaining = len(self._pending) - n
        # Shift leftovers down, then zero the tail before truncating
        self._pending[:remaining] = self._pending[n:]
        self._pending[remaining:] = bytes(len(self._pending) - remaining)
        del self._pending[remaining:]

        self._produced += n
        return out

    def close(self) -> None:
        """Wipe buffered bytes and drop the generator state."""
        self._pending[:] = bytes(len(self._pending))
        self._pending.clear()
        self._key = b""
        self._value = b""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<ByteStream produced={self._produced}>"


def open_stream(key: SecretBuffer, contexts: Iterable[KeyMaterial]) -> ByteStream:
    """
    Seed from ``key``, mix ``contexts`` in order, and return a ByteStream.

    Args:
        key: Key material (normally from derive_key)
        contexts: Ordered site context strings, already encoded

    Returns:
        A fresh ByteStream owned by the caller
    """
    state = mix_all(seed(key.expose()), contexts)
    return ByteStream(state)
