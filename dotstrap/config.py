import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import SetupError

DEFAULT_REPO = "https://github.com/PintjesB/dotfiles.git"
DEFAULT_LOG_FILE = "setup.log"
DEFAULT_CRON_SCHEDULE = "0 12 * * *"

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def parse_bool(value: str, name: str = "value") -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise SetupError(f"Invalid boolean for {name}: {value!r} (expected true or false)")


@dataclass
class Config:
    REPO_HTTPS: str = DEFAULT_REPO
    LOG_SETUP: bool = True
    LOG_FILE: str = DEFAULT_LOG_FILE
    INSTALL_NERDFONT: bool = True
    SETUP_CRON: bool = False
    CRON_SCHEDULE: str = DEFAULT_CRON_SCHEDULE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a Config from environment variables, falling back to the defaults."""
        env = os.environ if environ is None else environ
        return cls(
            REPO_HTTPS=env.get("REPO_HTTPS", DEFAULT_REPO),
            LOG_SETUP=parse_bool(env.get("LOG_SETUP", "true"), "LOG_SETUP"),
            LOG_FILE=env.get("LOG_FILE", DEFAULT_LOG_FILE),
            INSTALL_NERDFONT=parse_bool(
                env.get("INSTALL_NERDFONT", "true"), "INSTALL_NERDFONT"
            ),
            SETUP_CRON=parse_bool(env.get("SETUP_CRON", "false"), "SETUP_CRON"),
            CRON_SCHEDULE=env.get("CRON_SCHEDULE", DEFAULT_CRON_SCHEDULE),
        )
