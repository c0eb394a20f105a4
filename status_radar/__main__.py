"""Allow ``python -m status_radar``."""

from status_radar.cli.main import cli


cli()
