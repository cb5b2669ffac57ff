"""
pwclip - Site Profiles

A site profile is the public, non-secret half of a password: where it is
used and what it must look like. Profiles are read from a TOML file of
named tables:

    [example]
    url = "example.com"
    username = "example@example.com"

    [server]
    url = "server.com"
    username = "server@server.com"
    prefix = "quux"
    length = 32

Security Note:
    Profiles are safe to log, except ``extra``, which is extra derivation
    context chosen by the user. It is kept out of logs and reprs.
"""

import logging
import os
import tomllib
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from . import config
from .errors import MissingField, ProfileError

logger = logging.getLogger("pwclip")


class SiteProfile(BaseModel):
    """Validated site profile. url and username are required."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    url: str
    username: str
    extra: Optional[str] = Field(default=None, repr=False)
    prefix: str = ""
    charset: str = config.DEFAULT_CHARSET
    length: int = Field(default=config.DEFAULT_LENGTH, ge=1)

    def context(self) -> List[bytes]:
        """Derivation context in mixing order: url, username, extra."""
        fields = [self.url, self.username]
        if self.extra is not None:
            fields.append(self.extra)
        return [f.encode("utf-8") for f in fields]


def _validate(name: str, table: object) -> SiteProfile:
    if not isinstance(table, dict):
        raise ProfileError(f"profile '{name}' must be a table")
    try:
        return SiteProfile.model_validate(table)
    except ValidationError as err:
        for detail in err.errors():
            if detail["type"] == "missing":
                raise MissingField(name, str(detail["loc"][0])) from None
        first = err.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or name
        raise ProfileError(
            f"profile '{name}': {field}: {first['msg']}"
        ) from None


def parse_profiles(text: str) -> Dict[str, SiteProfile]:
    """
    Parse a TOML document of named site profiles.

    Args:
        text: TOML source

    Returns:
        Mapping of profile name to SiteProfile, in file order

    Raises:
        MissingField: If a profile lacks url or username
        ProfileError: If the TOML is malformed or a value is invalid
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise ProfileError(f"invalid profile file: {err}") from None

    profiles = {name: _validate(name, table) for name, table in document.items()}
    logger.debug("Parsed %d profile(s): %s", len(profiles), list(profiles))
    return profiles


def load_profiles(path: str) -> Dict[str, SiteProfile]:
    """
    Read and parse a TOML profile file.

    Raises:
        ProfileError: If the file cannot be read
        MissingField: As parse_profiles
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as err:
        raise ProfileError(f"cannot read profiles from {path}: {err.strerror}") from None
    return parse_profiles(text)


def default_profiles_path() -> str:
    """Profile file location: $PWCLIP_PROFILES, else ~/.config/pwclip/profiles.toml."""
    return os.environ.get(config.PROFILES_ENV) or config.DEFAULT_PROFILES_PATH
