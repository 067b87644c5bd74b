"""HTTP API for starting runs and delivering chat events."""

from huddle.api.app import create_app

__all__ = ["create_app"]
