"""Cryptographic operations for easysign."""

from .codec import base64_decode, base64_encode, is_base64
from .constants import FOLD_WIDTH, HEADER_SIZE, IV_SIZE, SALT_SIZE
from .packing import frame_pem, pack_buffer, pack_key, split_buffer, unpack_key
from .primitives import derive_key, generate_key_pair, random_bytes, unwrap_key, wrap_key
from .signature import sign_message, verify_signature, verify_signature_safe

__all__ = [
    "FOLD_WIDTH",
    "HEADER_SIZE",
    "IV_SIZE",
    "SALT_SIZE",
    "base64_decode",
    "base64_encode",
    "derive_key",
    "frame_pem",
    "generate_key_pair",
    "is_base64",
    "pack_buffer",
    "pack_key",
    "random_bytes",
    "sign_message",
    "split_buffer",
    "unpack_key",
    "unwrap_key",
    "verify_signature",
    "verify_signature_safe",
    "wrap_key",
]
