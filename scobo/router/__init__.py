"""Chat command routing for the score board."""

from .command_router import CommandRouter, InboundMessage, parse_command, render_board

__all__ = ["CommandRouter", "InboundMessage", "parse_command", "render_board"]
