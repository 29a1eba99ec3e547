"""HTTP display surface for the module graph."""

from modgraph.web.app import create_app

__all__ = ["create_app"]
