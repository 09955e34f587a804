"""Error hierarchy for easysign."""

from __future__ import annotations


class EasySignError(Exception):
    """Base exception for all easysign errors."""

    pass


class Base64DecodeError(EasySignError):
    """Input contains characters outside the Base64 alphabet or misplaced padding."""

    pass


class KeyTypeMismatchError(EasySignError):
    """PEM BEGIN and END markers carry different key types.

    Attributes:
        begin_type: The type tag on the BEGIN marker.
        end_type: The type tag on the END marker.
    """

    def __init__(self, begin_type: str, end_type: str) -> None:
        self.begin_type = begin_type
        self.end_type = end_type
        super().__init__(f"Mismatched key types: {begin_type} vs {end_type}")


class UnsupportedKeyTypeError(EasySignError):
    """PEM marker names a key type other than PUBLIC or PRIVATE."""

    pass


class TruncatedKeyError(EasySignError):
    """Packed key buffer is too short to hold the IV and salt.

    Attributes:
        length: The decoded buffer length in bytes.
    """

    def __init__(self, length: int, expected: int) -> None:
        self.length = length
        super().__init__(
            f"Packed key is truncated: {length} bytes, expected at least {expected}"
        )


class InvalidUsageError(EasySignError):
    """Unwrap usage is not 'sign' or 'verify', or does not fit the key type.

    Attributes:
        usage: The rejected usage value.
    """

    def __init__(self, usage: object, message: str | None = None) -> None:
        self.usage = usage
        super().__init__(
            message
            or f"Usage argument must be either 'sign' or 'verify', but we got {usage!r}."
        )


class SignatureVerificationError(EasySignError):
    """ECDSA signature verification failure."""

    pass
