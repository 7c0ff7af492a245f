"""Message models exchanged over the pub/sub transport."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from ..errors import MessageError


class MessageType(Enum):
    """Content tag of a message payload."""
    TEXT = "text"
    AUDIO = "audio"


@dataclass
class Message:
    """A transport message.

    ``response_topics`` is a stack of reply destinations: the last entry is
    where the answer to this message goes.
    """
    text: str = ""
    message_type: MessageType = MessageType.TEXT
    response_topics: List[str] = field(default_factory=list)
    params: Dict[str, Any] = field(default_factory=dict)

    def reply(self, text: str, message_type: MessageType) -> Tuple[str, "Message"]:
        """Build the answer to this message.

        Returns:
            Tuple of (reply topic, reply message)

        Raises:
            MessageError: if the message has no reply destination
        """
        if not self.response_topics:
            raise MessageError("Message has no reply destination")
        topics = list(self.response_topics)
        topic = topics.pop()
        reply = Message(
            text=text,
            message_type=message_type,
            response_topics=topics,
            params=dict(self.params),
        )
        return topic, reply
