"""Unit tests for transport messages."""

import pytest
from micvad.errors import MessageError
from micvad.models.events import Message, MessageType


@pytest.mark.unit
class TestMessage:

    def test_defaults(self):
        message = Message()

        assert message.text == ""
        assert message.message_type is MessageType.TEXT
        assert message.response_topics == []

    def test_reply_goes_to_last_response_topic(self):
        message = Message(text="record", response_topics=["ui", "stt"], params={"user": "x"})

        topic, reply = message.reply("/tmp/a.wav", MessageType.AUDIO)

        assert topic == "stt"
        assert reply.text == "/tmp/a.wav"
        assert reply.message_type is MessageType.AUDIO
        assert reply.response_topics == ["ui"]
        assert reply.params == {"user": "x"}

    def test_reply_leaves_original_untouched(self):
        message = Message(response_topics=["stt"])

        message.reply("path", MessageType.AUDIO)

        assert message.response_topics == ["stt"]

    def test_reply_without_destination(self):
        with pytest.raises(MessageError):
            Message().reply("path", MessageType.AUDIO)
