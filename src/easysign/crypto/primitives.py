"""Cryptographic primitives behind easysign key wrapping.

PBKDF2 key derivation, AES-CBC key wrap/unwrap and ECDSA P-384 key-pair
generation, all backed by ``cryptography``. The coroutines run CPU-bound
work in a worker thread. Failures propagate unchanged.
"""

from __future__ import annotations

import asyncio
import os

from cryptography.hazmat.primitives import hashes, padding, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..types import KeyDerivationConfig, KeyType, SigningKey
from .constants import AES_BLOCK_BITS

_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
}


def random_bytes(size: int) -> bytes:
    """Return ``size`` cryptographically secure random bytes."""
    return os.urandom(size)


def resolve_hash(name: str) -> hashes.HashAlgorithm:
    """Map a hash name such as "SHA-512" to a ``cryptography`` hash instance.

    Raises:
        ValueError: If the hash is not supported.
    """
    try:
        return _HASHES[name.upper()]()
    except KeyError:
        raise ValueError(
            f"Unsupported hash algorithm: {name}, expected one of {', '.join(_HASHES)}"
        ) from None


def _derive_key_sync(password: str, salt: bytes, config: KeyDerivationConfig) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=resolve_hash(config.hash_algorithm),
        length=config.key_length,
        salt=salt,
        iterations=config.iterations,
    )
    return kdf.derive(password.encode("utf-8"))


async def derive_key(password: str, salt: bytes, config: KeyDerivationConfig) -> bytes:
    """Derive an AES wrapping key from a password with PBKDF2-HMAC.

    Args:
        password: The user's password.
        salt: The 16-byte salt.
        config: Iteration count, hash and key length.

    Returns:
        The derived key bytes.
    """
    return await asyncio.to_thread(_derive_key_sync, password, salt, config)


def _export_key(key: SigningKey) -> bytes:
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


async def wrap_key(key: SigningKey, wrapping_key: bytes, iv: bytes) -> bytes:
    """Encrypt a signing key under an AES key in CBC mode.

    The key is exported as DER (PKCS8 for private keys, SubjectPublicKeyInfo
    for public keys) and PKCS7-padded before encryption.

    Args:
        key: The EC key to wrap.
        wrapping_key: The AES key.
        iv: The 16-byte IV.

    Returns:
        The wrapped key ciphertext.
    """
    padder = padding.PKCS7(AES_BLOCK_BITS).padder()
    padded = padder.update(_export_key(key)) + padder.finalize()
    encryptor = Cipher(algorithms.AES(wrapping_key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


async def unwrap_key(
    wrapped: bytes, wrapping_key: bytes, iv: bytes, key_type: KeyType
) -> SigningKey:
    """Decrypt a wrapped key and load it as a P-384 key.

    Args:
        wrapped: The wrapped key ciphertext.
        wrapping_key: The AES key.
        iv: The 16-byte IV.
        key_type: Whether to load a private or a public key.

    Returns:
        The EC private or public key.

    Raises:
        ValueError: If decryption yields invalid padding or key data (for
            example after a wrong password), or the key is not P-384.
    """
    decryptor = Cipher(algorithms.AES(wrapping_key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(wrapped) + decryptor.finalize()
    unpadder = padding.PKCS7(AES_BLOCK_BITS).unpadder()
    der = unpadder.update(padded) + unpadder.finalize()

    key: SigningKey
    if key_type == KeyType.PRIVATE:
        private_key = serialization.load_der_private_key(der, password=None)
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise ValueError("Unwrapped private key is not an EC key")
        key = private_key
    else:
        public_key = serialization.load_der_public_key(der)
        if not isinstance(public_key, ec.EllipticCurvePublicKey):
            raise ValueError("Unwrapped public key is not an EC key")
        key = public_key

    if not isinstance(key.curve, ec.SECP384R1):
        raise ValueError(f"Unwrapped key uses curve {key.curve.name}, expected secp384r1")
    return key


async def generate_key_pair() -> tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]:
    """Generate an ECDSA P-384 key pair.

    Returns:
        Tuple of (private_key, public_key).
    """
    private_key = await asyncio.to_thread(ec.generate_private_key, ec.SECP384R1())
    return private_key, private_key.public_key()
