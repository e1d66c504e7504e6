"""
Reply sending interface for platform-agnostic chat replies.

The score board never talks to a chat network itself; the command router
hands rendered replies to an implementation of this interface (a Telegram
client, a webhook response collector, a test double...).
"""

from abc import ABC, abstractmethod


class IReplySender(ABC):
    """Sends text replies back into a chat."""

    @abstractmethod
    def send_text(self, chat_id: int, text: str, *, markdown: bool = False) -> None:
        """
        Send a text reply.

        Args:
            chat_id: Chat to reply into
            text: Reply text
            markdown: Whether the text uses Markdown emphasis
        """
        pass

    def send_typing(self, chat_id: int) -> None:
        """
        Signal that a slower reply is on its way.

        Optional; the default implementation does nothing.
        """
        pass


class CollectingReplySender(IReplySender):
    """Keeps replies in memory, e.g. to return them in an HTTP response."""

    def __init__(self):
        self.replies: list[dict] = []

    def send_text(self, chat_id: int, text: str, *, markdown: bool = False) -> None:
        self.replies.append({"chat_id": chat_id, "text": text, "markdown": markdown})
