"""Structured error handling with semantic exit codes."""

import json
from enum import IntEnum
from typing import NoReturn

import typer


class ExitCode(IntEnum):
    SUCCESS = 0
    API_ERROR = 1
    CONFIG_ERROR = 2
    AUTH_ERROR = 3
    NOT_FOUND = 4
    VALIDATION_ERROR = 5


def handle_error(
    code: ExitCode,
    message: str,
    detail: str = "",
    hint: str = "",
) -> NoReturn:
    """Print structured error JSON to stderr and exit with semantic code."""
    error_obj: dict = {
        "error": True,
        "code": code.value,
        "message": message,
    }
    if detail:
        error_obj["detail"] = detail
    if hint:
        error_obj["hint"] = hint

    typer.echo(json.dumps(error_obj, indent=2), err=True)
    raise SystemExit(code.value)


def exit_code_for_status(status_code: int) -> ExitCode:
    """Map an HTTP error status to an exit code."""
    if status_code in (401, 403):
        return ExitCode.AUTH_ERROR
    if status_code == 404:
        return ExitCode.NOT_FOUND
    return ExitCode.API_ERROR
