"""
pwclip - Command Line

Usage:
    pwclip example                  # prompt passphrase, print password
    pwclip --clipboard example      # copy instead of printing
    pwclip --list                   # show configured profiles
    pwclip --profiles ./sites.toml example

Profiles come from --profiles, else $PWCLIP_PROFILES, else
~/.config/pwclip/profiles.toml.
"""

import sys
import getpass
import logging
import argparse
from typing import List, Optional

from . import __version__
from .crypto import derive_key
from .errors import PwclipError
from .generator import generate_password
from .profiles import default_profiles_path, load_profiles

logger = logging.getLogger("pwclip")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pwclip",
        description="Derive a site password from a master passphrase.",
    )
    parser.add_argument("profile", nargs="?", help="profile name")
    parser.add_argument(
        "--profiles", metavar="PATH", default=None,
        help="profile file (TOML)",
    )
    parser.add_argument(
        "-c", "--clipboard", action="store_true",
        help="copy the password to the clipboard instead of printing it",
    )
    parser.add_argument(
        "-l", "--list", action="store_true",
        help="list configured profiles",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def read_passphrase() -> bytearray:
    """Prompt for the master passphrase (not echoed)."""
    return bytearray(getpass.getpass("Master passphrase: "), "utf-8")


def deliver(secret: str, clipboard: bool) -> None:
    if not clipboard:
        print(secret)
        return
    try:
        import pyperclip
    except ImportError:
        raise PwclipError("clipboard unavailable (pip install pyperclip)") from None
    try:
        pyperclip.copy(secret)
    except pyperclip.PyperclipException as e:
        raise PwclipError(f"clipboard unavailable ({e})") from None
    print("Copied to clipboard.", file=sys.stderr)


def cmd_list(profiles) -> None:
    if not profiles:
        print("No profiles.")
        return
    print(f"{'Name':<20}  {'URL':<30}  {'Username'}")
    print("-" * 70)
    for name, p in profiles.items():
        print(f"{name:<20}  {p.url:<30}  {p.username}")


def cmd_generate(profiles, name: str, clipboard: bool) -> None:
    if name not in profiles:
        raise PwclipError(f"no profile named '{name}'")
    profile = profiles[name]

    passphrase = read_passphrase()
    try:
        key = derive_key(passphrase)
    finally:
        passphrase[:] = bytes(len(passphrase))

    with key, generate_password(key, profile) as password:
        deliver(password.reveal(), clipboard)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.list and not args.profile:
        parser.error("a profile name is required (or use --list)")

    try:
        profiles = load_profiles(args.profiles or default_profiles_path())
        if args.list:
            cmd_list(profiles)
        else:
            cmd_generate(profiles, args.profile, args.clipboard)
    except PwclipError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
