"""
pwclip - Fixed Parameters

Every value here is part of the derivation function. Changing any of them
changes every password ever generated, so none of them are user-configurable.
The only environment input pwclip reads is the profile file location.
"""

import os


# =============================================================================
# Site Profile Defaults
# =============================================================================

CHARSET_ALPHANUMERIC = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

DEFAULT_CHARSET = CHARSET_ALPHANUMERIC
DEFAULT_LENGTH = 24


# =============================================================================
# Key Derivation (scrypt)
# =============================================================================

KEY_SIZE = 32            # 256-bit derived key

# Domain tag, used as the scrypt salt. Not secret.
DOMAIN_TAG = b"pwclip"

# N = CPU/memory cost (power of 2), r = block size, p = parallelization
# 128 * N * r = 64 MiB per derivation
SCRYPT_N = 2**16         # 65536
SCRYPT_R = 8
SCRYPT_P = 1


# =============================================================================
# Byte Stream (HMAC-DRBG over SHA-512)
# =============================================================================

DRBG_BLOCK_SIZE = 64     # SHA-512 digest size

# NIST SP 800-90A max_number_of_bits_per_request (2**19 bits)
MAX_STREAM_BYTES = 2**16

# Bytes requested from the stream per mapping round
BATCH_SIZE = 64


# =============================================================================
# Profiles
# =============================================================================

PROFILES_ENV = "PWCLIP_PROFILES"
DEFAULT_PROFILES_PATH = os.path.join(
    os.path.expanduser("~"), ".config", "pwclip", "profiles.toml"
)
