"""
pwclip - Errors

Every failure is reported to the immediate caller as one of these types.
Callers must treat any of them as "no password was generated".
"""


class PwclipError(Exception):
    """Base class for all pwclip failures."""


class InvalidCharset(PwclipError, ValueError):
    """Charset decomposes into zero grapheme clusters."""


class PrefixTooLong(PwclipError, ValueError):
    """Prefix has more grapheme clusters than the requested length."""

    def __init__(self, prefix_len: int, length: int):
        super().__init__(
            f"prefix is {prefix_len} characters but password length is {length}"
        )
        self.prefix_len = prefix_len
        self.length = length


class MissingField(PwclipError, ValueError):
    """A required profile field is absent in the profile source."""

    def __init__(self, profile: str, field: str):
        super().__init__(f"profile '{profile}' is missing required field '{field}'")
        self.profile = profile
        self.field = field


class ProfileError(PwclipError, ValueError):
    """Profile source is unreadable or holds an invalid value."""


class StreamExhausted(PwclipError):
    """Byte stream reached its output bound."""


class SecretWiped(PwclipError):
    """A secret buffer was used after it had been wiped."""
