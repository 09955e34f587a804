"""easysign - digital signatures for private use.

Generates an ECDSA P-384 signing key pair, protects each half with a
password, and packs the result into compact PEM-like text.

Example:
    ```python
    import asyncio
    from easysign import generate_signing_keys, pack_key, sign_message, unwrap_signing_key

    async def main():
        pair = await generate_signing_keys("private-pass", "public-pass")
        pem = pack_key(pair.private)
        print(pem)

        private_key = await unwrap_signing_key(pem, "sign").unwrap("private-pass")
        signature = sign_message(private_key, b"hello")

    asyncio.run(main())
    ```
"""

from .constants import (
    DEFAULT_PBKDF2_HASH,
    DEFAULT_PBKDF2_ITERATIONS,
    DEFAULT_SIGNATURE_HASH,
    DEFAULT_WRAPPING_KEY_LENGTH,
)
from .crypto import (
    base64_decode,
    base64_encode,
    is_base64,
    pack_key,
    sign_message,
    unpack_key,
    verify_signature,
    verify_signature_safe,
)
from .errors import (
    Base64DecodeError,
    EasySignError,
    InvalidUsageError,
    KeyTypeMismatchError,
    SignatureVerificationError,
    TruncatedKeyError,
    UnsupportedKeyTypeError,
)
from .keys import UnwrapRequest, generate_signing_keys, unwrap_signing_key
from .types import (
    Base64,
    ByteBuffer,
    DebugKeyPair,
    KeyDerivationConfig,
    KeyType,
    SigningKeyPair,
    WrappedKey,
)

__version__ = "0.1.0"

__all__ = [
    # Key management
    "generate_signing_keys",
    "unwrap_signing_key",
    "UnwrapRequest",
    # Codec and packing
    "base64_encode",
    "base64_decode",
    "is_base64",
    "pack_key",
    "unpack_key",
    # Signatures
    "sign_message",
    "verify_signature",
    "verify_signature_safe",
    # Constants
    "DEFAULT_PBKDF2_ITERATIONS",
    "DEFAULT_PBKDF2_HASH",
    "DEFAULT_WRAPPING_KEY_LENGTH",
    "DEFAULT_SIGNATURE_HASH",
    # Data types
    "Base64",
    "ByteBuffer",
    "DebugKeyPair",
    "KeyDerivationConfig",
    "KeyType",
    "SigningKeyPair",
    "WrappedKey",
    # Errors
    "EasySignError",
    "Base64DecodeError",
    "KeyTypeMismatchError",
    "UnsupportedKeyTypeError",
    "TruncatedKeyError",
    "InvalidUsageError",
    "SignatureVerificationError",
    # Version
    "__version__",
]
