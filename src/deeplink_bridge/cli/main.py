"""CLI entry point using Typer."""

from __future__ import annotations

import typer

from deeplink_bridge.cli.commands import daemon, link

app = typer.Typer(
    name="deeplink-bridge",
    help="Deep link capture and delivery bridge",
    no_args_is_help=True,
)


@app.command()
def version() -> None:
    """Show version information."""
    from deeplink_bridge import __version__

    typer.echo(f"deeplink-bridge v{__version__}")


app.add_typer(daemon.app, name="daemon")
app.add_typer(link.app, name="link")


if __name__ == "__main__":
    app()
