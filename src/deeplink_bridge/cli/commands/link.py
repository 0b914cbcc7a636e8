"""Deep link CLI commands."""

from __future__ import annotations

import typer

from deeplink_bridge.activation import ACTION_VIEW
from deeplink_bridge.channel import GET_INITIAL_LINK
from deeplink_bridge.cli.daemon_client import DaemonClient
from deeplink_bridge.cli.utils import handle_call_response, handle_response

app = typer.Typer(help="Deep link activation and channel commands")


@app.command("open")
def link_open(
    uri: str = typer.Argument(..., help="URI carried by the activation"),
    action: str = typer.Option(ACTION_VIEW, "--action", "-a", help="Activation action tag"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Deliver an activation as the platform would."""
    client = DaemonClient()
    resp = client.request("POST", "/activation", json_body={"action": action, "uri": uri})
    client.close()
    handle_response(resp, json_output=json_output)


@app.command("initial")
def link_initial(
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Fetch the link captured before the application was listening."""
    client = DaemonClient()
    resp = client.request(
        "POST", "/channel/invoke", json_body={"method": GET_INITIAL_LINK, "arguments": None}
    )
    client.close()
    handle_call_response(resp, json_output=json_output)


@app.command("call")
def link_call(
    method: str = typer.Argument(..., help="Channel method name"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Invoke an arbitrary channel method."""
    client = DaemonClient()
    resp = client.request(
        "POST", "/channel/invoke", json_body={"method": method, "arguments": None}
    )
    client.close()
    handle_call_response(resp, json_output=json_output, empty_message="null")
