"""Base64 encoding/decoding for easysign.

The codec is implemented directly rather than on top of the ``base64``
module because it defines its own folding and whitespace rules: encoded
text may be folded at 76 columns for display, and the decoder accepts
whitespace anywhere, including inside a 4-character group.
"""

from __future__ import annotations

import re
from typing import Any, cast

from ..errors import Base64DecodeError
from ..types import ENC, Base64, ByteBuffer
from .constants import BASE64_ALPHABET, BASE64_PAD, FOLD_BREAK, FOLD_BYTES

# Alphabet characters with whitespace anywhere, then up to two pad characters.
# Padding needs at least one alphabet or whitespace character in front of it.
_WS = r"[ \t\r\n]*"
BASE64_PATTERN = re.compile(
    rf"(?:[A-Za-z0-9+/ \t\r\n]+(?:={_WS}){{0,2}})?"
)

_NON_ALPHABET = re.compile(r"[^A-Za-z0-9+/]")

_DECODE_TABLE = {char: index for index, char in enumerate(BASE64_ALPHABET)}


def is_base64(value: Any) -> bool:
    """Check whether a value looks like Base64 text.

    This is a structural check on the string contents; Base64 values carry no
    runtime type tag.

    Args:
        value: The value to check.

    Returns:
        True if value is a string of Base64 characters, optional trailing
        padding and whitespace.
    """
    return isinstance(value, str) and BASE64_PATTERN.fullmatch(value) is not None


def base64_encode(data: ByteBuffer[ENC] | bytes, fold: bool = False) -> Base64[ENC]:
    """Encode bytes to standard Base64 with padding.

    Args:
        data: The bytes to encode.
        fold: If True, insert a CRLF after every 76 output characters.

    Returns:
        The Base64 string.
    """
    data = bytes(data)
    out: list[str] = []
    length = len(data)

    for idx in range(0, length, 3):
        if fold and idx > 0 and idx % FOLD_BYTES == 0:
            out.append(FOLD_BREAK)

        group = data[idx : idx + 3]
        int24 = int.from_bytes(group.ljust(3, b"\0"), "big")
        chars = (
            BASE64_ALPHABET[(int24 >> 18) & 63]
            + BASE64_ALPHABET[(int24 >> 12) & 63]
            + BASE64_ALPHABET[(int24 >> 6) & 63]
            + BASE64_ALPHABET[int24 & 63]
        )
        # 1 leftover byte -> 2 chars + "==", 2 leftover bytes -> 3 chars + "="
        used = len(group) + 1
        out.append(chars[:used] + BASE64_PAD * (4 - used))

    return cast(Base64[ENC], "".join(out))


def base64_decode(text: Base64[ENC] | str) -> ByteBuffer[ENC]:
    """Decode standard Base64 text to bytes.

    Whitespace (space, tab, CR, LF) is ignored wherever it appears. A trailing
    group of a single character contributes no bytes.

    Args:
        text: The Base64 string to decode.

    Returns:
        The decoded bytes.

    Raises:
        Base64DecodeError: If the text contains characters outside the
            alphabet, or padding that is misplaced or too long.
    """
    if not is_base64(text):
        raise Base64DecodeError("Illegal character in base64 string.")

    # Drops padding and whitespace
    chars = _NON_ALPHABET.sub("", text)

    out = bytearray()
    for idx in range(0, len(chars), 4):
        group = chars[idx : idx + 4]
        int24 = 0
        for pos, char in enumerate(group):
            int24 |= _DECODE_TABLE[char] << (18 - 6 * pos)
        # 4 chars -> 3 bytes, 3 -> 2, 2 -> 1, 1 -> 0
        out += int24.to_bytes(3, "big")[: len(group) * 3 // 4]

    return cast(ByteBuffer[ENC], bytes(out))
