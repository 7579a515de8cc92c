"""HTTP API for flow definitions."""

from .app import create_app

__all__ = ["create_app"]
