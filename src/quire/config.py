"""Configuration management for Quire."""

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

QUIRE_HOME = Path(os.environ.get("QUIRE_HOME", Path.home() / "quire"))
CONFIG_FILE = QUIRE_HOME / "config" / "quire.conf"
TOKEN_FILE = QUIRE_HOME / "config" / ".tokens.json"

DEFAULT_TIMEZONE = "Asia/Colombo"
DEFAULT_AUTOSAVE_DELAY = 2.0


@dataclass
class Config:
    """Quire configuration."""

    api_base_url: str = "http://localhost:8000/api"
    timezone: str = DEFAULT_TIMEZONE
    autosave_delay: float = DEFAULT_AUTOSAVE_DELAY
    request_timeout: float = 10.0
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)


@dataclass
class Tokens:
    """Bearer token issued by the diary service."""

    access_token: str = ""
    token_type: str = "Bearer"

    def save(self) -> None:
        """Save tokens to file."""
        TOKEN_FILE.parent.mkdir(parents=True, exist_ok=True)
        TOKEN_FILE.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "token_type": self.token_type,
                }
            )
        )
        TOKEN_FILE.chmod(0o600)

    def clear(self) -> None:
        """Forget the token and remove the token file."""
        self.access_token = ""
        if TOKEN_FILE.exists():
            TOKEN_FILE.unlink()

    @classmethod
    def load(cls) -> "Tokens":
        """Load tokens from file."""
        if not TOKEN_FILE.exists():
            return cls()
        try:
            data = json.loads(TOKEN_FILE.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                token_type=data.get("token_type", "Bearer") or "Bearer",
            )
        except (OSError, json.JSONDecodeError, KeyError, AttributeError):
            return cls()


def _parse_seconds(key: str, value: str, default: float) -> float:
    try:
        seconds = float(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, using {default}")
        return default
    if not math.isfinite(seconds) or seconds < 0:
        logger.warning(f"Out of range {key.upper()} value {value!r}, using {default}")
        return default
    return seconds


def load_config(path: Path | None = None) -> Config:
    """Load configuration from quire.conf file."""
    config = Config()
    config_file = path or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"'):
            end_quote = value.find('"', 1)
            if end_quote != -1:
                value = value[1:end_quote]
            else:
                value = value[1:]
        elif value.startswith("'"):
            end_quote = value.find("'", 1)
            if end_quote != -1:
                value = value[1:end_quote]
            else:
                value = value[1:]
        else:
            # Unquoted: strip inline comments
            if "#" in value:
                value = value.split("#")[0].strip()

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "timezone":
                config.timezone = value or DEFAULT_TIMEZONE
            case "autosave_delay":
                config.autosave_delay = _parse_seconds(key, value, DEFAULT_AUTOSAVE_DELAY)
            case "request_timeout":
                config.request_timeout = _parse_seconds(key, value, config.request_timeout)
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                try:
                    config.telegram_allowed_users = [
                        int(u.strip()) for u in value.split(",") if u.strip()
                    ]
                except ValueError as e:
                    logger.warning(f"Failed to parse TELEGRAM_ALLOWED_USERS: {e}")
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
