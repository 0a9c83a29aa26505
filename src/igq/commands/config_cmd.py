"""Config commands: init, show."""

import os
from pathlib import Path
from typing import Annotated, Optional

import typer

from igq.api.client import DEFAULT_BASE_URL
from igq.config import load_config, save_config, get_config_dir
from igq.models.errors import handle_error, ExitCode
from igq.output import format_output, OutputFormat

app = typer.Typer(help="Configuration management.")


def _config_dir(override: Optional[str]) -> Optional[Path]:
    if override:
        return Path(override)
    from igq.cli import get_config_dir_override
    return get_config_dir_override()


@app.command()
def init(
    api_key: Annotated[Optional[str], typer.Option("--api-key", help="IGDB user key")] = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="API base URL")] = None,
    config_dir: Annotated[Optional[str], typer.Option(hidden=True)] = None,
    non_interactive: Annotated[
        bool, typer.Option("--non-interactive", help="Use flags and env vars only")
    ] = False,
    output: Annotated[OutputFormat, typer.Option("-o")] = OutputFormat.json,
):
    """Initialize IGDB configuration.

    In interactive mode, prompts for anything not given as a flag.
    In non-interactive mode, falls back to IGQ_API_KEY and IGQ_BASE_URL.
    """
    cfg_dir = _config_dir(config_dir)

    if non_interactive:
        api_key = api_key or os.environ.get("IGQ_API_KEY", "")
        base_url = base_url or os.environ.get("IGQ_BASE_URL", DEFAULT_BASE_URL)
    else:
        api_key = api_key or typer.prompt("IGDB API key", hide_input=True)
        base_url = base_url or typer.prompt("API base URL", default=DEFAULT_BASE_URL)

    if not api_key:
        handle_error(
            ExitCode.CONFIG_ERROR,
            "An API key is required.",
            hint="igq config init --api-key <key>",
        )

    path = save_config({"api_key": api_key, "base_url": base_url}, cfg_dir)
    format_output(
        {"status": "configured", "config_file": str(path), "base_url": base_url},
        output,
    )


@app.command()
def show(
    config_dir: Annotated[Optional[str], typer.Option(hidden=True)] = None,
    output: Annotated[OutputFormat, typer.Option("-o")] = OutputFormat.json,
):
    """Display current configuration (the API key is masked)."""
    cfg_dir = _config_dir(config_dir)
    config = load_config(cfg_dir)

    masked = dict(config)
    if masked.get("api_key"):
        key = masked["api_key"]
        masked["api_key"] = key[:4] + "..." + key[-4:] if len(key) > 12 else "***"

    masked["config_dir"] = str(get_config_dir(cfg_dir))
    format_output(masked, output)
