"""Root CLI application with Typer."""

from pathlib import Path
from typing import Annotated, Optional

import httpx
import typer

from igq import __version__
from igq.api.client import IGDBClient, IGDBApiError
from igq.config import load_config
from igq.models.errors import handle_error, exit_code_for_status, ExitCode
from igq.output import OutputFormat

app = typer.Typer(
    name="igq",
    help="IGDB query CLI: build and run IGDB queries from the terminal.",
    no_args_is_help=True,
    invoke_without_command=True,
    pretty_exceptions_enable=False,
)

# Global state set by the main callback
_config_dir: Optional[Path] = None
_output_format: OutputFormat = OutputFormat.json
_verbose: bool = False


def get_client(require_key: bool = True) -> IGDBClient:
    """Build an IGDBClient from the resolved configuration."""
    config = load_config(_config_dir)
    api_key = config.get("api_key", "")
    if require_key and not api_key:
        handle_error(
            ExitCode.CONFIG_ERROR,
            "IGDB not configured",
            detail="IGQ_API_KEY not set and no api_key in config.json.",
            hint="igq config init",
        )
    return IGDBClient(
        api_key=api_key,
        base_url=config["base_url"],
        verbose=_verbose,
    )


def get_output_format() -> OutputFormat:
    """Get the globally-configured output format."""
    return _output_format


def get_config_dir_override() -> Optional[Path]:
    return _config_dir


# Register commands (imported here to avoid circular imports)
from igq.commands import config_cmd
from igq.commands import query

app.add_typer(config_cmd.app, name="config")
app.command("query")(query.run)
app.command("body")(query.body)


@app.callback()
def main(
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Config directory override"),
    ] = None,
    output: Annotated[
        OutputFormat,
        typer.Option("-o", "--output", help="Output format"),
    ] = OutputFormat.json,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Verbose HTTP logging"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit", is_eager=True),
    ] = False,
):
    """IGDB query CLI: build and run IGDB queries from the terminal."""
    global _config_dir, _output_format, _verbose

    if version:
        typer.echo(f"igq v{__version__}")
        raise typer.Exit()

    _config_dir = config_dir
    _output_format = output
    _verbose = verbose


def main_entrypoint():
    """Entry point for the CLI (used by pyproject.toml scripts)."""
    try:
        app()
    except IGDBApiError as e:
        handle_error(exit_code_for_status(e.status_code), e.message, detail=e.detail)
    except httpx.InvalidURL as e:
        handle_error(ExitCode.CONFIG_ERROR, str(e), hint="igq config show")
