"""Mic module service: turns trigger messages into recordings."""

import logging
import queue
import threading
from typing import Optional

from pubsub import pub

from ..errors import MessageError, MicError
from ..models.events import Message, MessageType
from .publisher import EventPublisher
from .recorder import Recorder

logger = logging.getLogger(__name__)

MODULE_NAME = "mic"
INPUT_TOPIC = "mic"
USER_START_RECORDING_EVENT = "user_start_recording"
USER_RECORDED_EVENT = "user_recorded"


class MicService:
    """Records one utterance for every message received on the input topic.

    Triggers are queued by the pub/sub listener and handled one at a time by
    ``run()``, so two recordings never overlap.
    """

    def __init__(self, recorder: Recorder, topic: str = INPUT_TOPIC, poll_interval: float = 0.5):
        """Initialize mic service.

        Args:
            recorder: Recorder used for every trigger
            topic: Pub/sub topic carrying trigger messages
            poll_interval: Seconds between stop checks while idle
        """
        self.recorder = recorder
        self.topic = topic
        self.poll_interval = poll_interval
        self.publisher = EventPublisher(MODULE_NAME)

        self.triggers: "queue.Queue[Message]" = queue.Queue()
        self.stop_event = threading.Event()
        self.is_listening = False
        self.recordings_completed = 0
        self.recordings_failed = 0

    def start(self) -> None:
        """Subscribe to the trigger topic."""
        if self.is_listening:
            logger.warning("Already listening")
            return
        self.stop_event.clear()
        pub.subscribe(self._on_trigger, self.topic)
        self.is_listening = True
        logger.info(f"MicService listening on topic: {self.topic}")

    def stop(self) -> None:
        """Unsubscribe and make ``run()`` return after the current trigger."""
        self.stop_event.set()
        if self.is_listening:
            pub.unsubscribe(self._on_trigger, self.topic)
            self.is_listening = False
            logger.info("MicService stopped listening")

    def _on_trigger(self, message: Message) -> None:
        """Pub/sub listener, runs in the publisher's thread."""
        self.triggers.put(message)
        logger.debug(f"Trigger queued ({self.triggers.qsize()} pending)")

    def run(self, max_triggers: Optional[int] = None) -> int:
        """Handle triggers until stopped.

        Args:
            max_triggers: Return after this many triggers, None for no limit

        Returns:
            Number of triggers handled
        """
        handled = 0
        while not self.stop_event.is_set():
            if max_triggers is not None and handled >= max_triggers:
                break
            try:
                message = self.triggers.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            self.handle_trigger(message)
            handled += 1
        return handled

    def handle_trigger(self, message: Message) -> Optional[str]:
        """Record one utterance in answer to ``message``.

        Returns:
            Path of the recording, or None if the recording failed
        """
        self.publisher.send_event(USER_START_RECORDING_EVENT, Message())

        try:
            audio_file = self.recorder.record()
        except MicError as e:
            self.recordings_failed += 1
            logger.error(f"Recording failed: {e}", exc_info=True)
            return None

        self.recordings_completed += 1
        event_message = Message(text=audio_file, message_type=MessageType.AUDIO)
        self.publisher.send_event(USER_RECORDED_EVENT, event_message)

        try:
            topic, reply = message.reply(audio_file, MessageType.AUDIO)
        except MessageError as e:
            logger.warning(f"Not replying to trigger: {e}")
            return audio_file
        self.publisher.send(topic, reply)
        return audio_file
