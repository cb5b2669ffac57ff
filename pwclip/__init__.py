"""
pwclip - Deterministic Site Password Derivation

Derives a password for every site from one master passphrase plus public
site details. Nothing is stored: the same inputs give the same password on
any machine.

Pipeline:
    passphrase → scrypt → key (32 bytes)
    key + url + username [+ extra] → HMAC-DRBG (SHA-512) → bytes
    bytes → rejection sampling over charset graphemes → password

Components:
- config.py: Fixed parameters (charset, length, scrypt cost, domain tag)
- memory.py: SecretBuffer / Password, wiped on release
- crypto.py: scrypt key derivation and the HMAC-DRBG byte stream
- charset.py: Unbiased, grapheme-aware charset mapping
- generator.py: generate_password() for one or many profiles
- profiles.py: SiteProfile model and TOML profile loader
- cli.py: Command-line interface (uses built-in argparse)

Usage:
    from pwclip import derive_key, generate_password, SiteProfile

    profile = SiteProfile(url="example.com", username="me@example.com")
    with derive_key(b"passphrase") as key:
        with generate_password(key, profile) as password:
            print(password.reveal())
"""

__version__ = "0.3.0"

from .crypto import derive_key
from .errors import (
    InvalidCharset,
    MissingField,
    PrefixTooLong,
    ProfileError,
    PwclipError,
    SecretWiped,
    StreamExhausted,
)
from .generator import generate_password, generate_passwords
from .memory import Password, SecretBuffer
from .profiles import SiteProfile, load_profiles, parse_profiles

__all__ = [
    "derive_key",
    "generate_password",
    "generate_passwords",
    "SiteProfile",
    "load_profiles",
    "parse_profiles",
    "SecretBuffer",
    "Password",
    "PwclipError",
    "InvalidCharset",
    "PrefixTooLong",
    "MissingField",
    "ProfileError",
    "StreamExhausted",
    "SecretWiped",
]
