import pytest
from typer.testing import CliRunner

from orcheplan import __version__
from orcheplan.interfaces.cli import app

runner = CliRunner()


@pytest.fixture()
def env(tmp_path) -> dict[str, str]:
    return {
        "ORCHEPLAN_HOME": str(tmp_path / "home"),
        "ORCHEPLAN_STATE_FILE": str(tmp_path / "workspace.json"),
        "ORCHEPLAN_USER": "",
    }


def _last_line(output: str) -> str:
    return output.strip().splitlines()[-1]


def _setup(env: dict[str, str]) -> str:
    for user in ("alice", "dave"):
        assert runner.invoke(app, ["user", "add", user], env=env).exit_code == 0
    created = runner.invoke(app, ["project", "create", "Launch", "-u", "alice"], env=env)
    assert created.exit_code == 0
    return _last_line(created.output)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_task_tree_round_trip(env: dict[str, str]) -> None:
    project_id = _setup(env)

    parent = runner.invoke(app, ["task", "add", project_id, "Write docs", "-u", "alice"], env=env)
    assert parent.exit_code == 0
    parent_id = _last_line(parent.output)
    child = runner.invoke(
        app,
        ["task", "add", project_id, "Proofread", "--parent", parent_id, "-u", "alice"],
        env=env,
    )
    assert child.exit_code == 0

    tree = runner.invoke(app, ["tree", project_id, "-u", "alice"], env=env)
    assert tree.exit_code == 0
    lines = tree.output.splitlines()
    assert lines[0].startswith("- Write docs [To-Do]")
    assert lines[1].startswith("  - Proofread [To-Do]")


def test_acting_user_from_environment(env: dict[str, str]) -> None:
    project_id = _setup(env)
    result = runner.invoke(app, ["task", "add", project_id, "From env"], env={**env, "ORCHEPLAN_USER": "alice"})
    assert result.exit_code == 0


def test_missing_user_is_a_usage_error(env: dict[str, str]) -> None:
    result = runner.invoke(app, ["project", "list"], env=env)
    assert result.exit_code == 2
    assert "No acting user" in result.output


def test_forbidden_exit_code(env: dict[str, str]) -> None:
    project_id = _setup(env)
    result = runner.invoke(app, ["task", "list", project_id, "-u", "dave"], env=env)
    assert result.exit_code == 3
    assert "forbidden" in result.output


def test_delete_with_children_is_refused(env: dict[str, str]) -> None:
    project_id = _setup(env)
    parent_id = _last_line(
        runner.invoke(app, ["task", "add", project_id, "Parent", "-u", "alice"], env=env).output
    )
    runner.invoke(app, ["task", "add", project_id, "Child", "--parent", parent_id, "-u", "alice"], env=env)

    refused = runner.invoke(app, ["task", "delete", parent_id, "-u", "alice"], env=env)
    assert refused.exit_code == 1
    assert "has-children" in refused.output

    cascaded = runner.invoke(app, ["task", "delete", parent_id, "--cascade", "-u", "alice"], env=env)
    assert cascaded.exit_code == 0
    assert "Deleted 2 task(s)" in cascaded.output


def test_status_commands(env: dict[str, str]) -> None:
    project_id = _setup(env)

    added = runner.invoke(
        app,
        ["status", "add", project_id, "Blocked", "--requires-comment", "-u", "alice"],
        env=env,
    )
    assert added.exit_code == 0
    assert "#9CA3AF" in added.output

    listed = runner.invoke(app, ["status", "list", project_id, "-u", "alice"], env=env)
    assert listed.exit_code == 0

    bad = runner.invoke(app, ["status", "reorder", project_id, "oops", "-u", "alice"], env=env)
    assert bad.exit_code == 1


def test_members(env: dict[str, str]) -> None:
    project_id = _setup(env)

    added = runner.invoke(app, ["member", "add", project_id, "dave", "--role", "editor", "-u", "alice"], env=env)
    assert added.exit_code == 0
    assert "dave as editor" in added.output

    duplicate = runner.invoke(app, ["member", "add", project_id, "dave", "-u", "alice"], env=env)
    assert duplicate.exit_code == 5

    invalid = runner.invoke(app, ["member", "role", project_id, "dave", "admin", "-u", "alice"], env=env)
    assert invalid.exit_code == 1


def test_config_set_persists(env: dict[str, str]) -> None:
    saved = runner.invoke(app, ["config", "set", "task_delete_policy", "cascade"], env=env)
    assert saved.exit_code == 0

    shown = runner.invoke(app, ["config", "show"], env=env)
    assert "task_delete_policy = cascade" in shown.output

    unknown = runner.invoke(app, ["config", "set", "colour", "red"], env=env)
    assert unknown.exit_code == 1
