"""Shared CLI helpers."""

from __future__ import annotations

from typing import Any, cast

import typer

from deeplink_bridge.cli.daemon_client import format_json


def _parse_response_json(resp: Any) -> dict[str, Any]:
    try:
        return cast(dict[str, Any], resp.json())
    except Exception as exc:  # pragma: no cover - defensive
        typer.echo("Failed to parse response")
        raise typer.Exit(code=1) from exc


def _maybe_render_error(data: dict[str, Any]) -> None:
    if not (isinstance(data, dict) and data.get("error")):
        return
    error = data["error"]
    message = f"{error.get('code')}: {error.get('message')}"
    remediation = error.get("remediation")
    typer.echo(message)
    if remediation:
        typer.echo(f"Hint: {remediation}")
    raise typer.Exit(code=1)


def handle_response(resp: Any, json_output: bool = False) -> None:
    data = _parse_response_json(resp)
    if json_output:
        typer.echo(format_json(data))
        return

    _maybe_render_error(data)
    status = data.get("status")
    if status == "done":
        typer.echo("✓ Done")
        return
    if status == "ignored":
        typer.echo("Ignored: not a link-opening activation")
        return
    typer.echo(format_json(data))


def handle_call_response(
    resp: Any, json_output: bool = False, empty_message: str = "No pending link"
) -> None:
    data = _parse_response_json(resp)
    if json_output:
        typer.echo(format_json(data))
        return

    _maybe_render_error(data)
    result = data.get("result")
    if result is None:
        typer.echo(empty_message)
    elif isinstance(result, str):
        typer.echo(result)
    else:
        typer.echo(format_json(result))
