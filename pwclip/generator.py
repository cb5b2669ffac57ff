"""
pwclip - Password Generation

Runs the whole pipeline for one site:

    key → seed → mix(url) → mix(username) → mix(extra?) → byte stream
        → charset mapping → prefix + characters → Password

Nothing is retried and nothing is returned on failure: an error means no
password was generated.
"""

import logging
from typing import Dict, Mapping

from .charset import graphemes, map_charset
from .crypto import open_stream
from .errors import PrefixTooLong
from .memory import Password, SecretBuffer
from .profiles import SiteProfile

logger = logging.getLogger("pwclip")


def generate_password(key: SecretBuffer, profile: SiteProfile) -> Password:
    """
    Generate the password for one site profile.

    ``key`` is only read. It stays owned by the caller, who wipes it when
    done with every profile it serves.

    Args:
        key: Derived key (or any key material held in a SecretBuffer)
        profile: Site profile

    Returns:
        Password of exactly profile.length characters, starting with
        profile.prefix

    Raises:
        InvalidCharset: If profile.charset has no characters
        PrefixTooLong: If profile.prefix is longer than profile.length
        StreamExhausted: If the byte stream bound is hit. The stream stops
            at config.MAX_STREAM_BYTES (65536) bytes, so lengths above
            roughly 60000 characters (default charset) are rejected
    """
    prefix_len = len(graphemes(profile.prefix))
    if prefix_len > profile.length:
        raise PrefixTooLong(prefix_len, profile.length)

    logger.debug(
        "Generating password for url=%r username=%r length=%d",
        profile.url, profile.username, profile.length,
    )

    with open_stream(key, profile.context()) as stream:
        chars = map_charset(stream, profile.charset, profile.length - prefix_len)

    buf = bytearray(profile.prefix.encode("utf-8"))
    buf += chars
    chars[:] = bytes(len(chars))
    return Password.adopt(buf)


def generate_passwords(
    key: SecretBuffer, profiles: Mapping[str, SiteProfile]
) -> Dict[str, Password]:
    """
    Generate passwords for several profiles from one key.

    All or nothing: if any profile fails, the passwords already generated
    are wiped and the error propagates.

    Returns:
        Mapping of profile name to Password, in the order given
    """
    passwords: Dict[str, Password] = {}
    try:
        for name, profile in profiles.items():
            passwords[name] = generate_password(key, profile)
    except BaseException:
        for password in passwords.values():
            password.wipe()
        raise
    return passwords
