"""Configuration management for fourd."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

FOURD_HOME = Path(os.environ.get("FOURD_HOME", Path.home() / "fourd"))
CONFIG_FILE = FOURD_HOME / "config" / "fourd.conf"
TOKEN_FILE = FOURD_HOME / "config" / ".tokens.json"
DATA_DIR = FOURD_HOME / "data"


@dataclass
class Config:
    """fourd configuration."""

    store: str = "file"
    data_file: str = ""
    timezone: str = ""
    defer_days: int = 7
    ticktick_client_id: str = ""
    ticktick_client_secret: str = ""

    @property
    def data_path(self) -> Path:
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "tasks.json"


@dataclass
class Tokens:
    """OAuth tokens for TickTick."""

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0

    def save(self) -> None:
        """Save tokens to file."""
        TOKEN_FILE.parent.mkdir(parents=True, exist_ok=True)
        TOKEN_FILE.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "refresh_token": self.refresh_token,
                    "expires_at": self.expires_at,
                }
            )
        )
        TOKEN_FILE.chmod(0o600)

    @classmethod
    def load(cls) -> "Tokens":
        """Load tokens from file."""
        if not TOKEN_FILE.exists():
            return cls()
        try:
            data = json.loads(TOKEN_FILE.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                refresh_token=data.get("refresh_token", ""),
                expires_at=data.get("expires_at", 0),
            )
        except (json.JSONDecodeError, KeyError):
            return cls()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_config(text: str) -> Config:
    """Parse KEY=VALUE lines into a Config. Unknown keys are ignored."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "store":
                config.store = value.lower()
            case "data_file":
                config.data_file = value
            case "timezone":
                config.timezone = value
            case "defer_days":
                try:
                    config.defer_days = int(value)
                except ValueError:
                    logger.warning(f"Invalid DEFER_DAYS value: {value!r}, using {config.defer_days}")
            case "ticktick_client_id":
                config.ticktick_client_id = value
            case "ticktick_client_secret":
                config.ticktick_client_secret = value

    return config


def load_config() -> Config:
    """Load configuration from fourd.conf file."""
    if not CONFIG_FILE.exists():
        return Config()
    return parse_config(CONFIG_FILE.read_text())
