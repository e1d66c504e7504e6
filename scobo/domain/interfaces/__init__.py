"""Interfaces implemented by collaborators of the score board core."""

from .reply_sender import IReplySender

__all__ = ["IReplySender"]
