from __future__ import annotations

import json
from pathlib import Path

import typer

app = typer.Typer(name="assertkit", help="Render and configure assertion reports")


def _read_record(path: Path) -> dict:
    import yaml

    text = path.read_text()
    if path.suffix in (".yaml", ".yml"):
        raw = yaml.safe_load(text)
    else:
        raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping")
    # A previously rendered JSON/YAML report is accepted as-is
    if isinstance(raw.get("assertData"), dict):
        return raw["assertData"]
    return raw


@app.command()
def render(
    record: str = typer.Argument(help="Path to a JSON or YAML failure record"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format"),
    stack: str | None = typer.Option(None, help="File whose contents are used as stack text"),
):
    """Render a failure record through one of the formatters."""
    from assertkit.formatters import get_formatter

    record_path = Path(record)
    if not record_path.exists():
        typer.echo(f"Error: record file not found: {record}", err=True)
        raise typer.Exit(1)

    try:
        formatter = get_formatter(output_format)
        data = _read_record(record_path)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    stack_text = Path(stack).read_text() if stack else ""
    typer.echo(formatter.format(data, stack_text))


@app.command()
def formats():
    """List the available formatters."""
    from assertkit.formatters import available_formatters

    for name in available_formatters():
        typer.echo(name)


@app.command()
def check(
    config: str = typer.Argument(help="Path to assertion settings YAML"),
):
    """Validate a settings file and print the resolved settings."""
    from assertkit.config import load_settings
    from assertkit.errors import ConfigError

    try:
        settings = load_settings(Path(config))
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


@app.command()
def schema():
    """Print the JSON Schema for the settings file."""
    from assertkit.config import AssertSettings

    typer.echo(json.dumps(AssertSettings.model_json_schema(), indent=2))


if __name__ == "__main__":
    app()
