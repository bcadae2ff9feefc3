"""Settings CLI commands."""

import typer
from pydantic import ValidationError

from orcheplan.config import Settings, get_config_dir, load_settings, save_settings
from orcheplan.interfaces.cli.common import print_error, print_success

app = typer.Typer(help="Workspace settings commands")


@app.command("show")
def show() -> None:
    """Show the effective settings."""
    settings = load_settings()
    typer.echo(f"Config dir:  {get_config_dir()}")
    for name, value in settings.model_dump(mode="json").items():
        typer.echo(f"{name} = {value}")


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Persist a setting to the config file.

    Example:
        orcheplan config set task_delete_policy cascade
    """
    if key not in Settings.model_fields:
        print_error(f"Unknown setting '{key}'")
        raise typer.Exit(1)

    data = load_settings().model_dump(mode="json")
    data[key] = value
    try:
        settings = Settings(**data)
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    save_settings(settings)
    print_success(f"Set {key} = {value}")
