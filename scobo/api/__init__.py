"""HTTP surface of the score board."""

from .app import create_app

__all__ = ["create_app"]
