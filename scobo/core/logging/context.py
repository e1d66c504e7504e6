"""
Chat context management using contextvars for automatic propagation.

The router and the HTTP layer set the chat and user once per inbound
message; every logger obtained through ``get_logger`` picks them up.
"""

from contextvars import ContextVar

_chat_context: ContextVar[str | None] = ContextVar("chat_id", default=None)
_user_context: ContextVar[str | None] = ContextVar("user_id", default=None)


def set_chat_context(
    chat_id: int | str | None = None,
    user_id: str | None = None,
) -> None:
    """
    Set the chat context for the current thread or async context.

    Args:
        chat_id: Chat whose score board is being touched
        user_id: Display name of the participant who sent the message
    """
    if chat_id is not None:
        _chat_context.set(str(chat_id))
    if user_id is not None:
        _user_context.set(user_id)


def get_current_chat_context() -> str | None:
    """Get the current chat ID from context variables."""
    return _chat_context.get()


def get_current_user_context() -> str | None:
    """Get the current user from context variables."""
    return _user_context.get()


def clear_chat_context() -> None:
    """
    Clear the chat and user context.

    Called before a new inbound message is handled and when the log writer
    thread starts, so neither logs under a previous message's prefix.
    """
    _chat_context.set(None)
    _user_context.set(None)
