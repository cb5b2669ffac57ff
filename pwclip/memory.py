"""
pwclip - Secret Memory

SecretBuffer owns a mutable bytearray holding sensitive bytes (a derived key,
a generated password) and overwrites it with zeros before letting it go.

Usage:
    with derive_key(passphrase) as key:
        password = generate_password(key, profile)
    # key is zeroed here, even if generate_password raised

WARNING:
- Python's memory model doesn't guarantee secure erasure
- Immutable bytes/str copies made inside hmac, cryptography or by callers
  of Password.reveal() cannot be scrubbed from here
- This is best-effort: everything pwclip itself allocates for secret
  material lives in a bytearray that gets wiped
"""

import hmac
from typing import Union

from .errors import SecretWiped


class SecretBuffer:
    """
    Exclusively-owned sensitive bytes, zeroed on release.

    The buffer is wiped when:
    - the ``with`` block exits (normally or through an exception)
    - ``wipe()`` is called explicitly
    - the object is garbage collected (last resort)
    """

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: Union[bytes, bytearray, memoryview] = b""):
        self._buf = bytearray(data)
        self._wiped = False

    @classmethod
    def adopt(cls, buf: bytearray) -> "SecretBuffer":
        """Take ownership of ``buf`` without copying it."""
        if not isinstance(buf, bytearray):
            raise TypeError(f"adopt() needs a bytearray, got {type(buf).__name__}")
        secret = cls.__new__(cls)
        secret._buf = buf
        secret._wiped = False
        return secret

    def expose(self) -> bytearray:
        """
        Return the live buffer for immediate use.

        The returned object IS the secret storage, not a copy: do not keep
        references to it past the owner's lifetime.

        Raises:
            SecretWiped: If the buffer was already wiped
        """
        if self._wiped:
            raise SecretWiped("secret buffer has been wiped")
        return self._buf

    def wipe(self) -> None:
        """Overwrite the contents with zeros. Safe to call more than once."""
        buf = getattr(self, "_buf", None)
        if buf is not None and not getattr(self, "_wiped", False):
            buf[:] = bytes(len(buf))
        self._wiped = True

    @property
    def wiped(self) -> bool:
        return self._wiped

    def __len__(self) -> int:
        return len(self._buf)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __del__(self):
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBuffer):
            return NotImplemented
        # Constant-time comparison; wiped buffers never compare equal
        if self._wiped or other._wiped:
            return False
        return hmac.compare_digest(self._buf, other._buf)

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buf)} bytes"
        return f"<{type(self).__name__} {state}>"

    __str__ = __repr__

    def __reduce__(self):
        raise TypeError(f"{type(self).__name__} cannot be pickled")


class Password(SecretBuffer):
    """
    A generated password: UTF-8 bytes of exactly ``length`` grapheme clusters.

    The caller owns it. Delivery code (stdout, clipboard) takes a str copy
    with ``reveal()`` and is responsible for that copy.
    """

    __slots__ = ()

    def reveal(self, encoding: str = "utf-8") -> str:
        """Decode the password to a str."""
        return self.expose().decode(encoding)

    def cluster_count(self) -> int:
        """Number of user-perceived characters."""
        from .charset import graphemes
        return len(graphemes(self.reveal()))
