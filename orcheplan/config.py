"""Workspace settings.

Settings are stored in ``~/.orcheplan/config.json`` and may be overridden
per process through ``ORCHEPLAN_*`` environment variables.
"""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError

from orcheplan.domain.task.models import CascadePolicy

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    "ORCHEPLAN_STATE_FILE": "state_file",
    "ORCHEPLAN_LOG_LEVEL": "log_level",
    "ORCHEPLAN_STORE_TIMEOUT": "store_timeout",
    "ORCHEPLAN_TASK_DELETE_POLICY": "task_delete_policy",
}


class Settings(BaseModel):
    """Runtime configuration for a workspace."""

    state_file: str = "~/.orcheplan/workspace.json"
    log_level: str = "WARNING"
    # Seconds to wait for the store before reporting a transient failure
    store_timeout: float = 5.0
    task_delete_policy: CascadePolicy = CascadePolicy.REJECT_IF_CHILDREN


def get_config_dir() -> Path:
    """Get the orcheplan config directory."""
    config_dir = Path(os.environ.get("ORCHEPLAN_HOME", Path.home() / ".orcheplan"))
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def _valid(data: dict[str, object], field_name: str, value: object) -> bool:
    try:
        Settings(**{**data, field_name: value})
    except ValidationError as e:
        logger.warning(f"Ignoring invalid setting {field_name}={value!r}: {e.errors()[0]['msg']}")
        return False
    return True


def load_settings() -> Settings:
    """Load settings from the config file, then apply environment overrides.

    An invalid value is dropped on its own, with a warning naming the key;
    the remaining settings still apply.
    """
    data: dict[str, object] = {}
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            stored = json.loads(config_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable config file {config_file}")
            stored = {}
        if isinstance(stored, dict):
            for field_name, value in stored.items():
                if field_name in Settings.model_fields and _valid(data, field_name, value):
                    data[field_name] = value

    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value and _valid(data, field_name, value):
            data[field_name] = value

    return Settings(**data)


def save_settings(settings: Settings) -> None:
    """Save settings to the config file."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )
