"""Result and error rendering for machine (compact JSON) and human readers"""

import json
from typing import Any

import typer


def print_result(data: Any, human: bool = False) -> None:
    """Write data to stdout as JSON, indented when human is set."""
    if human:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        typer.echo(json.dumps(data, ensure_ascii=False, separators=(",", ":")))


def print_error(message: str, code: str = "", details: Any = None, human: bool = False) -> None:
    """Write an error to stderr: 'message (code)' for humans, else a JSON object."""
    if human:
        typer.echo(f"{message} ({code})" if code else message, err=True)
        return

    payload: dict[str, Any] = {"error": message}
    if code:
        payload["error_code"] = code
    if details is not None:
        payload["details"] = details
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)
