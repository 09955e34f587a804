"""Protocol constants for the easysign key format."""

# Standard Base64 alphabet
BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64_PAD = "="

# Folded output: 76 characters per line, i.e. 57 input bytes
FOLD_WIDTH = 76
FOLD_BYTES = FOLD_WIDTH // 4 * 3
FOLD_BREAK = "\r\n"

# Packed buffer layout: IV(16) || Salt(16) || wrapped key(n)
IV_SIZE = 16
SALT_SIZE = 16
HEADER_SIZE = IV_SIZE + SALT_SIZE

# AES-CBC block size in bits, for PKCS7 padding
AES_BLOCK_BITS = 128

# Signing key usages
USAGE_SIGN = "sign"
USAGE_VERIFY = "verify"
