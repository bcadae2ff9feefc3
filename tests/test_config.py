import json
import logging

import pytest

from orcheplan.config import Settings, load_settings, save_settings
from orcheplan.domain.task.models import CascadePolicy


@pytest.fixture()
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("ORCHEPLAN_HOME", str(tmp_path))
    for name in (
        "ORCHEPLAN_STATE_FILE",
        "ORCHEPLAN_LOG_LEVEL",
        "ORCHEPLAN_STORE_TIMEOUT",
        "ORCHEPLAN_TASK_DELETE_POLICY",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_defaults_without_config(home) -> None:
    assert load_settings() == Settings()


def test_environment_overrides_the_config_file(home, monkeypatch) -> None:
    save_settings(Settings(store_timeout=2.5))
    monkeypatch.setenv("ORCHEPLAN_TASK_DELETE_POLICY", "cascade")

    settings = load_settings()
    assert settings.store_timeout == 2.5
    assert settings.task_delete_policy is CascadePolicy.CASCADE


def test_invalid_override_is_dropped_alone(home, monkeypatch, caplog) -> None:
    state_file = str(home / "mine.json")
    monkeypatch.setenv("ORCHEPLAN_STATE_FILE", state_file)
    monkeypatch.setenv("ORCHEPLAN_STORE_TIMEOUT", "soon")

    with caplog.at_level(logging.WARNING, logger="orcheplan.config"):
        settings = load_settings()

    assert settings.state_file == state_file
    assert settings.store_timeout == Settings().store_timeout
    assert "store_timeout" in caplog.text


def test_invalid_config_value_keeps_the_rest(home) -> None:
    (home / "config.json").write_text(
        json.dumps({"state_file": "/srv/ws.json", "task_delete_policy": "sometimes"}),
        encoding="utf-8",
    )

    settings = load_settings()
    assert settings.state_file == "/srv/ws.json"
    assert settings.task_delete_policy is CascadePolicy.REJECT_IF_CHILDREN
