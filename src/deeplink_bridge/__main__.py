from deeplink_bridge.cli.main import app

app()
