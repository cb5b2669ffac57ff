"""
pwclip - Charset Mapping

Turns the raw byte stream into characters drawn from a charset, without
modulo bias.

A "character" here is a grapheme cluster (what a user sees as one symbol),
not a code point: "🇳🇴" or "é" written as e + U+0301 each count as one.

How bias is removed (rejection sampling):
    charset_len = 62, one byte = 0..255
    256 % 62 = 8, so bytes 248..255 would make the first 8 symbols more
    likely than the rest. Those bytes are discarded and replaced by the next
    ones from the stream.
"""

import logging
from typing import List, Tuple

import regex

from . import config
from .crypto import ByteStream
from .errors import InvalidCharset

logger = logging.getLogger("pwclip")

_GRAPHEME = regex.compile(r"\X")


def graphemes(text: str) -> List[str]:
    """Split text into extended grapheme clusters (Unicode UAX #29)."""
    return _GRAPHEME.findall(text)


def sample_width(charset_len: int) -> int:
    """Bytes per sample: the smallest w with 256**w >= charset_len."""
    width = 1
    while 256 ** width < charset_len:
        width += 1
    return width


def acceptance_threshold(charset_len: int) -> Tuple[int, int]:
    """
    Return (width, accept_max) for a charset of ``charset_len`` clusters.

    A sample s (``width`` big-endian bytes) is accepted iff s < accept_max.
    For charset_len <= 256 this is one byte and 256 - (256 % charset_len).

    Raises:
        InvalidCharset: If charset_len is zero
    """
    if charset_len <= 0:
        raise InvalidCharset("charset must contain at least one character")
    width = sample_width(charset_len)
    space = 256 ** width
    return width, space - (space % charset_len)


def map_charset(stream: ByteStream, charset: str, count: int) -> bytearray:
    """
    Draw ``count`` unbiased clusters from ``charset`` using ``stream``.

    Bytes are requested in batches until enough samples survive rejection;
    the result is never cut short.

    Args:
        stream: Seeded byte stream
        charset: Characters to choose from (grapheme clusters)
        count: Number of clusters to produce (may be 0)

    Returns:
        UTF-8 encoding of the chosen clusters, owned by the caller

    Raises:
        InvalidCharset: If charset has no clusters
        StreamExhausted: If the stream runs out first (only possible for
            absurd lengths)
    """
    clusters = [c.encode("utf-8") for c in graphemes(charset)]
    charset_len = len(clusters)
    width, accept_max = acceptance_threshold(charset_len)
    if width > 1:
        logger.warning(
            "Charset has %d characters; drawing %d bytes per character",
            charset_len, width,
        )

    out = bytearray()
    produced = 0
    try:
        while produced < count:
            batch = stream.read(config.BATCH_SIZE * width)
            try:
                for i in range(0, len(batch) - width + 1, width):
                    sample = int.from_bytes(batch[i:i + width], "big")
                    if sample >= accept_max:
                        continue
                    out += clusters[sample % charset_len]
                    produced += 1
                    if produced == count:
                        break
            finally:
                batch[:] = bytes(len(batch))
    except BaseException:
        out[:] = bytes(len(out))
        raise

    logger.debug(
        "Mapped %d characters from a %d-character charset (%d bytes drawn)",
        count, charset_len, stream.produced,
    )
    return out
