"""Allow running as ``python -m mushafbot``."""

from mushafbot.cli.commands import app

app()
