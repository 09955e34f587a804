"""Type definitions for easysign."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar, Union

from .constants import (
    DEFAULT_PBKDF2_HASH,
    DEFAULT_PBKDF2_ITERATIONS,
    DEFAULT_WRAPPING_KEY_LENGTH,
)

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric import ec

ENC = TypeVar("ENC")


class Base64(str, Generic[ENC]):
    """A Base64 string tagged with the kind of payload it encodes.

    The tag exists only for type checkers. Encoded values are created with
    ``typing.cast`` and are plain ``str`` at runtime, so ``isinstance`` checks
    against this class are meaningless; use ``is_base64`` for a structural
    check instead.
    """


class ByteBuffer(bytes, Generic[ENC]):
    """Raw bytes tagged with the kind of data they hold. Static only, like Base64."""


class IV:
    """Payload tag: 16-byte AES-CBC initialization vector."""


class Salt:
    """Payload tag: 16-byte PBKDF2 salt."""


class RawKey:
    """Payload tag: wrapped key ciphertext."""


class PackedKey:
    """Payload tag: IV || salt || wrapped key."""


class KeyType(str, Enum):
    """Key pair halves."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


@dataclass(frozen=True)
class WrappedKey:
    """A password-wrapped key, with everything needed to unwrap it.

    Each field is encoded separately; the combined form is produced by
    ``pack_key``.

    Attributes:
        type: PUBLIC or PRIVATE, or None when unpacked from unframed text.
        iv: Base64-encoded 16-byte IV.
        salt: Base64-encoded 16-byte salt.
        key: Base64-encoded wrapped key ciphertext.
    """

    type: KeyType | None
    iv: Base64[IV]
    salt: Base64[Salt]
    key: Base64[RawKey]


@dataclass(frozen=True)
class SigningKeyPair:
    """A freshly generated signing key pair, each half wrapped independently.

    Attributes:
        public: The wrapped public (verification) key.
        private: The wrapped private (signing) key.
    """

    public: WrappedKey
    private: WrappedKey


@dataclass(frozen=True)
class DebugKeyPair:
    """Unwrapped key objects, handed only to an explicit debug sink."""

    public: ec.EllipticCurvePublicKey
    private: ec.EllipticCurvePrivateKey


@dataclass(frozen=True)
class KeyDerivationConfig:
    """PBKDF2 settings for deriving the AES wrapping key from a password.

    The packed format does not record these, so wrap and unwrap must agree.

    Attributes:
        iterations: PBKDF2 iteration count.
        hash_algorithm: One of "SHA-256", "SHA-384", "SHA-512".
        key_length: Derived AES key length in bytes (16, 24 or 32).
    """

    iterations: int = DEFAULT_PBKDF2_ITERATIONS
    hash_algorithm: str = DEFAULT_PBKDF2_HASH
    key_length: int = DEFAULT_WRAPPING_KEY_LENGTH


# Unwrapped key objects returned by unwrap
SigningKey = Union["ec.EllipticCurvePrivateKey", "ec.EllipticCurvePublicKey"]
