"""API routes module for Scobo."""

from .chats import router as chats_router
from .health import router as health_router

__all__ = ["chats_router", "health_router"]
