"""ECDSA P-384 signing and verification for easysign keys."""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec

from ..constants import DEFAULT_SIGNATURE_HASH
from ..errors import SignatureVerificationError
from .primitives import resolve_hash


def sign_message(private_key: ec.EllipticCurvePrivateKey, data: bytes) -> bytes:
    """Sign data with an unwrapped private key.

    Args:
        private_key: The key returned by unwrapping a PRIVATE key for "sign".
        data: The message to sign.

    Returns:
        The DER-encoded ECDSA signature.
    """
    return private_key.sign(data, ec.ECDSA(resolve_hash(DEFAULT_SIGNATURE_HASH)))


def verify_signature(
    public_key: ec.EllipticCurvePublicKey, data: bytes, signature: bytes
) -> None:
    """Verify an ECDSA signature.

    Args:
        public_key: The key returned by unwrapping a PUBLIC key for "verify".
        data: The signed message.
        signature: The DER-encoded signature.

    Raises:
        SignatureVerificationError: If the signature does not match.
    """
    try:
        public_key.verify(signature, data, ec.ECDSA(resolve_hash(DEFAULT_SIGNATURE_HASH)))
    except InvalidSignature as e:
        raise SignatureVerificationError("Signature verification failed") from e


def verify_signature_safe(
    public_key: ec.EllipticCurvePublicKey, data: bytes, signature: bytes
) -> bool:
    """Verify an ECDSA signature without raising exceptions.

    Returns:
        True if the signature is valid, False otherwise.
    """
    try:
        verify_signature(public_key, data, signature)
        return True
    except SignatureVerificationError:
        return False
