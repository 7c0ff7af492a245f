"""Event publisher for pub/sub notifications."""

import logging
from pubsub import pub
from ..models.events import Message

logger = logging.getLogger(__name__)


def _message_listener_spec(message: Message) -> None:
    """Prototype listener defining the arguments of every topic we send to."""


class EventPublisher:
    """Publishes module events and replies using pubsub.pub."""

    def __init__(self, module_name: str):
        """Initialize event publisher.

        Args:
            module_name: Name events are published under
        """
        self.module_name = module_name
        logger.info(f"EventPublisher initialized for module: {module_name}")

    def event_topic(self, event: str) -> str:
        return f"event.{self.module_name}.{event}"

    def send_event(self, event: str, message: Message) -> None:
        """Publish ``message`` as event ``event`` of this module."""
        self.send(self.event_topic(event), message)

    def send(self, topic: str, message: Message) -> None:
        """Send ``message`` to ``topic``."""
        # Topics nobody subscribed to yet get their message spec here
        pub.getDefaultTopicMgr().getOrCreateTopic(topic, _message_listener_spec)
        pub.sendMessage(topic, message=message)
        logger.debug(f"Sent message to {topic}")
