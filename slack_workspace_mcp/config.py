"""Configuration for the Slack workspace connection."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_TIMEOUT = 30
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(ValueError):
    """Raised when a required Slack setting is missing."""


@dataclass(frozen=True)
class WorkspaceConfig:
    """Credentials for a single Slack workspace."""
    bot_token: str
    team_id: str
    channel_ids: Optional[tuple[str, ...]] = None
    timeout: int = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    def __repr__(self) -> str:
        """Show the workspace settings without the bot token."""
        return (
            f"WorkspaceConfig(team_id={self.team_id!r}, "
            f"channel_ids={self.channel_ids!r}, timeout={self.timeout!r})"
        )


def parse_channel_ids(value) -> Optional[tuple[str, ...]]:
    """Parse a pinned channel list from a comma-separated string or a list.

    Returns None when no usable id remains, which selects open listing.
    """
    if not value:
        return None
    if isinstance(value, str):
        value = value.split(",")
    ids = tuple(str(item).strip() for item in value if str(item).strip())
    return ids or None


def default_config_path() -> Path:
    return Path.home() / ".mcp-auth" / "slack" / "config.json"


def load_config(config_path: Optional[Path] = None) -> WorkspaceConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest first):
    1. SLACK_BOT_TOKEN, SLACK_TEAM_ID, SLACK_CHANNEL_IDS environment variables
    2. Config file at ~/.mcp-auth/slack/config.json
    """
    data: dict = {}

    path = config_path or default_config_path()
    if path.exists():
        with open(path) as f:
            data = json.load(f)

    bot_token = os.environ.get("SLACK_BOT_TOKEN") or data.get("bot_token")
    team_id = os.environ.get("SLACK_TEAM_ID") or data.get("team_id")
    channel_ids = os.environ.get("SLACK_CHANNEL_IDS") or data.get("channel_ids")

    if not bot_token or not team_id:
        raise ConfigError(
            "SLACK_BOT_TOKEN and SLACK_TEAM_ID are required. Either:\n"
            f"1. Set them in {path}\n"
            "2. Set SLACK_BOT_TOKEN and SLACK_TEAM_ID environment variables"
        )

    timeout = os.environ.get("SLACK_MCP_TIMEOUT") or data.get("timeout") or DEFAULT_TIMEOUT
    try:
        timeout = int(timeout)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout: {timeout!r}")

    log_level = os.environ.get("SLACK_MCP_LOG_LEVEL") or data.get("log_level") or DEFAULT_LOG_LEVEL

    return WorkspaceConfig(
        bot_token=bot_token,
        team_id=team_id,
        channel_ids=parse_channel_ids(channel_ids),
        timeout=timeout,
        log_level=str(log_level).upper(),
    )


# Global config instance (lazy loaded)
_config: Optional[WorkspaceConfig] = None


def get_config() -> WorkspaceConfig:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
