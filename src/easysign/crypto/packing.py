"""Packing of wrapped keys into Base64 and PEM text.

A packed key is a single buffer::

    IV (16 bytes) || Salt (16 bytes) || wrapped key (n bytes)

encoded as Base64, and optionally framed between
``-----BEGIN <TYPE> KEY-----`` and ``-----END <TYPE> KEY-----`` lines.
The layout uses fixed offsets; nothing is length-prefixed.
"""

from __future__ import annotations

import logging
import re
from typing import cast

from ..errors import KeyTypeMismatchError, TruncatedKeyError, UnsupportedKeyTypeError
from ..types import IV, Base64, KeyType, PackedKey, RawKey, Salt, WrappedKey
from .codec import base64_decode, base64_encode
from .constants import HEADER_SIZE, IV_SIZE, SALT_SIZE

logger = logging.getLogger("easysign")

PEM_BEGIN_PATTERN = re.compile(r"^-----BEGIN (\w+) KEY-----", re.IGNORECASE)
PEM_END_PATTERN = re.compile(r"-----END (\w+) KEY-----$", re.IGNORECASE)


def pack_buffer(iv: bytes, salt: bytes, key: bytes) -> bytes:
    """Concatenate IV, salt and wrapped key into one buffer.

    Args:
        iv: The 16-byte IV.
        salt: The 16-byte salt.
        key: The wrapped key bytes.

    Returns:
        The packed buffer, 32 + len(key) bytes long.

    Raises:
        ValueError: If the IV or salt has the wrong length.
    """
    if len(iv) != IV_SIZE:
        raise ValueError(f"Invalid IV length: {len(iv)}, expected {IV_SIZE}")
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Invalid salt length: {len(salt)}, expected {SALT_SIZE}")
    return bytes(iv) + bytes(salt) + bytes(key)


def split_buffer(buf: bytes) -> tuple[bytes, bytes, bytes]:
    """Split a packed buffer into IV, salt and wrapped key.

    Args:
        buf: The packed buffer.

    Returns:
        Tuple of (iv, salt, key).

    Raises:
        TruncatedKeyError: If the buffer is shorter than IV + salt.
    """
    if len(buf) < HEADER_SIZE:
        raise TruncatedKeyError(len(buf), HEADER_SIZE)
    return buf[:IV_SIZE], buf[IV_SIZE:HEADER_SIZE], buf[HEADER_SIZE:]


def frame_pem(encoded: str, key_type: KeyType) -> str:
    """Wrap Base64 text in BEGIN/END markers for the given key type."""
    label = KeyType(key_type).value
    return f"-----BEGIN {label} KEY-----\n{encoded}\n-----END {label} KEY-----\n"


def _parse_key_type(tag: str) -> KeyType:
    try:
        return KeyType(tag.upper())
    except ValueError:
        raise UnsupportedKeyTypeError(
            f"Unsupported key type: {tag.upper()}, expected PUBLIC or PRIVATE"
        ) from None


def pack_key(unpacked: WrappedKey | str, *, fold: bool = False) -> str:
    """Pack a wrapped key into transportable text.

    Text input is taken to be already packed and is returned trimmed.

    Args:
        unpacked: A WrappedKey, or already packed text.
        fold: If True, fold the Base64 body at 76 characters with CRLF.

    Returns:
        PEM text for a typed key; the bare Base64 body if the key type is
        unknown.

    Raises:
        ValueError: If the IV or salt do not decode to 16 bytes.
        Base64DecodeError: If a field is not valid Base64.
    """
    if isinstance(unpacked, str):
        return unpacked.strip()

    buf = pack_buffer(
        base64_decode(unpacked.iv),
        base64_decode(unpacked.salt),
        base64_decode(unpacked.key),
    )
    encoded = base64_encode(buf, fold)
    if unpacked.type is None:
        return encoded
    return frame_pem(encoded, unpacked.type)


def unpack_key(packed: Base64[PackedKey] | str | WrappedKey) -> WrappedKey:
    """Unpack PEM or Base64 text into a WrappedKey.

    Args:
        packed: PEM text, bare Base64 text, or a WrappedKey (returned as is).

    Returns:
        The WrappedKey. Its type is None when the text had no PEM markers.

    Raises:
        KeyTypeMismatchError: If the BEGIN and END markers disagree, or only
            one of them is present.
        UnsupportedKeyTypeError: If the markers name an unknown key type.
        Base64DecodeError: If the body is not valid Base64.
        TruncatedKeyError: If the decoded body is shorter than 32 bytes.
    """
    if isinstance(packed, WrappedKey):
        return packed

    text = packed.strip()
    begin = PEM_BEGIN_PATTERN.search(text)
    end = PEM_END_PATTERN.search(text)

    key_type: KeyType | None = None
    if begin or end:
        begin_tag = begin.group(1).upper() if begin else "NONE"
        end_tag = end.group(1).upper() if end else "NONE"
        if begin_tag != end_tag:
            raise KeyTypeMismatchError(begin_tag, end_tag)
        key_type = _parse_key_type(begin_tag)

    body_start = begin.end() if begin else 0
    body_end = end.start() if end else len(text)
    body = text[body_start:body_end].strip()

    iv, salt, key = split_buffer(base64_decode(body))
    logger.debug(
        "Unpacked %s key (%d wrapped bytes)",
        key_type.value if key_type else "untyped",
        len(key),
    )
    return WrappedKey(
        type=key_type,
        iv=cast(Base64[IV], base64_encode(iv)),
        salt=cast(Base64[Salt], base64_encode(salt)),
        key=cast(Base64[RawKey], base64_encode(key)),
    )
