"""Default configuration constants for easysign."""

# Password-based key derivation (PBKDF2-HMAC)
DEFAULT_PBKDF2_ITERATIONS = 500_000
DEFAULT_PBKDF2_HASH = "SHA-512"

# AES-256 wrapping key length in bytes
DEFAULT_WRAPPING_KEY_LENGTH = 32

# Signature hash used with ECDSA P-384
DEFAULT_SIGNATURE_HASH = "SHA-384"
