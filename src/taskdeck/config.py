"""Configuration management for Taskdeck."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.models import SortOption

logger = logging.getLogger(__name__)

TASKDECK_HOME = Path(os.environ.get("TASKDECK_HOME", Path.home() / ".taskdeck"))
CONFIG_FILE = TASKDECK_HOME / "config" / "taskdeck.conf"
SESSION_FILE = TASKDECK_HOME / "config" / ".session.json"
DATA_DIR = TASKDECK_HOME / "data"


@dataclass
class Config:
    """Taskdeck configuration."""

    api_url: str = ""
    api_key: str = ""
    default_sort: SortOption = SortOption.SMART
    ai_enabled: bool = True
    llm_command: str = "claude -p"
    llm_timeout: int = 120


@dataclass
class Session:
    """Current user identity for the task backend."""

    user_id: str = ""
    access_token: str = ""

    def save(self, path: Path | None = None) -> None:
        """Save session to file."""
        path = path or SESSION_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"user_id": self.user_id, "access_token": self.access_token}))
        path.chmod(0o600)

    @classmethod
    def load(cls, path: Path | None = None) -> "Session":
        """Load session from file."""
        path = path or SESSION_FILE
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            return cls(
                user_id=data.get("user_id", ""),
                access_token=data.get("access_token", ""),
            )
        except (json.JSONDecodeError, AttributeError):
            return cls()


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskdeck.conf file."""
    path = path or CONFIG_FILE
    config = Config()

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_url":
                config.api_url = value.rstrip("/")
            case "api_key":
                config.api_key = value
            case "default_sort":
                try:
                    config.default_sort = SortOption(value.lower())
                except ValueError:
                    logger.warning(f"Unknown DEFAULT_SORT '{value}', using smart")
            case "ai_enabled":
                config.ai_enabled = value.lower() not in ("0", "false", "no", "off")
            case "llm_command":
                config.llm_command = value
            case "llm_timeout":
                try:
                    config.llm_timeout = int(value)
                except ValueError:
                    logger.warning(f"Invalid LLM_TIMEOUT '{value}', keeping {config.llm_timeout}s")

    return config
