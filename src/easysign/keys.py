"""Signing key generation and password-protected unwrapping."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, cast

from .crypto.codec import base64_decode, base64_encode
from .crypto.constants import IV_SIZE, SALT_SIZE, USAGE_SIGN, USAGE_VERIFY
from .crypto.packing import unpack_key
from .crypto.primitives import (
    derive_key,
    generate_key_pair,
    random_bytes,
    unwrap_key,
    wrap_key,
)
from .errors import InvalidUsageError
from .types import (
    IV,
    Base64,
    DebugKeyPair,
    KeyDerivationConfig,
    KeyType,
    RawKey,
    Salt,
    SigningKey,
    SigningKeyPair,
    WrappedKey,
)

logger = logging.getLogger("easysign")

# Callback receiving raw key objects for debugging, sync or async
DebugSink = Callable[[DebugKeyPair], Any]

_USAGE_KEY_TYPES = {
    USAGE_SIGN: KeyType.PRIVATE,
    USAGE_VERIFY: KeyType.PUBLIC,
}


def _expected_key_type(usage: str) -> KeyType:
    try:
        return _USAGE_KEY_TYPES[usage]
    except KeyError:
        raise InvalidUsageError(usage) from None


async def _wrap(
    key_type: KeyType,
    key: SigningKey,
    password: str,
    config: KeyDerivationConfig,
) -> WrappedKey:
    salt = random_bytes(SALT_SIZE)
    iv = random_bytes(IV_SIZE)
    wrapping_key = await derive_key(password, salt, config)
    wrapped = await wrap_key(key, wrapping_key, iv)
    return WrappedKey(
        type=key_type,
        iv=cast(Base64[IV], base64_encode(iv)),
        salt=cast(Base64[Salt], base64_encode(salt)),
        key=cast(Base64[RawKey], base64_encode(wrapped)),
    )


async def generate_signing_keys(
    private_password: str,
    public_password: str,
    *,
    config: KeyDerivationConfig | None = None,
    debug_sink: DebugSink | None = None,
) -> SigningKeyPair:
    """Generate a signing key pair, wrapping each half under its own password.

    Each half gets its own random salt and IV.

    Args:
        private_password: Password protecting the private (signing) key.
        public_password: Password protecting the public (verification) key.
        config: PBKDF2 settings. Defaults to KeyDerivationConfig().
        debug_sink: Optional callback that receives the unwrapped key objects.
            Only for debugging; the objects are not otherwise exposed.
            An async sink is awaited.

    Returns:
        The wrapped key pair.
    """
    config = config or KeyDerivationConfig()
    private_key, public_key = await generate_key_pair()
    logger.debug("Generated P-384 signing key pair")

    private = await _wrap(KeyType.PRIVATE, private_key, private_password, config)
    public = await _wrap(KeyType.PUBLIC, public_key, public_password, config)

    if debug_sink is not None:
        result = debug_sink(DebugKeyPair(public=public_key, private=private_key))
        if asyncio.iscoroutine(result):
            await result

    return SigningKeyPair(public=public, private=private)


@dataclass(frozen=True)
class UnwrapRequest:
    """A wrapped key and usage, waiting for the password that unwraps it.

    Created by ``unwrap_signing_key`` so the password can be asked for later.
    Constructing one directly applies the same usage checks.

    Attributes:
        key: The wrapped key, with its type resolved.
        usage: "sign" or "verify".
        config: PBKDF2 settings used when the key was wrapped.
    """

    key: WrappedKey
    usage: str
    config: KeyDerivationConfig = field(default_factory=KeyDerivationConfig)

    def __post_init__(self) -> None:
        expected = _expected_key_type(self.usage)
        if self.key.type is None:
            # Unframed text carries no type; the usage decides it
            object.__setattr__(
                self,
                "key",
                WrappedKey(type=expected, iv=self.key.iv, salt=self.key.salt, key=self.key.key),
            )
        elif self.key.type != expected:
            raise InvalidUsageError(
                self.usage,
                f"Usage {self.usage!r} requires a {expected.value} key, "
                f"but got a {self.key.type.value} key.",
            )

    async def unwrap(self, password: str) -> SigningKey:
        """Derive the wrapping key from the password and unwrap the key.

        Args:
            password: The password the key was wrapped with.

        Returns:
            An EC private key for "sign", an EC public key for "verify".

        Raises:
            ValueError: If the password is wrong or the key data is corrupt.
        """
        logger.debug("Unwrapping %s key for %s", _USAGE_KEY_TYPES[self.usage].value, self.usage)
        wrapping_key = await derive_key(password, base64_decode(self.key.salt), self.config)
        return await unwrap_key(
            base64_decode(self.key.key),
            wrapping_key,
            base64_decode(self.key.iv),
            _USAGE_KEY_TYPES[self.usage],
        )

    async def __call__(self, password: str) -> SigningKey:
        return await self.unwrap(password)


def unwrap_signing_key(
    wrapped: WrappedKey | str,
    usage: str,
    *,
    config: KeyDerivationConfig | None = None,
) -> UnwrapRequest:
    """Prepare to unwrap a signing key; the password is supplied afterwards.

    Example:
        ```python
        request = unwrap_signing_key(pem_text, "sign")
        private_key = await request.unwrap(password)
        ```

    Args:
        wrapped: A WrappedKey, or its packed PEM or Base64 text.
        usage: "sign" for a PRIVATE key, "verify" for a PUBLIC key.
        config: PBKDF2 settings used when the key was wrapped.

    Returns:
        An UnwrapRequest.

    Raises:
        InvalidUsageError: If usage is neither "sign" nor "verify", or does
            not fit the key type.
    """
    # Bad usage is reported before the input is parsed
    _expected_key_type(usage)
    return UnwrapRequest(key=unpack_key(wrapped), usage=usage, config=config or KeyDerivationConfig())
