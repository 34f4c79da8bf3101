"""
Message classification for mushafbot.

Turns a raw inbound event into a ClassifiedMessage (text, scope, true
sender) and decides what kind of message it is.
"""

import re
from dataclasses import dataclass
from enum import Enum

from mushafbot.auto_reply.commands import Command, parse_command
from mushafbot.auto_reply.quiz import ANSWER_TOKENS
from mushafbot.bus.events import InboundEvent


GROUP_SUFFIX = "@g.us"
LID_SUFFIX = "@lid"

# Any character in the Arabic Unicode block
ARABIC_PATTERN = re.compile(r"[\u0600-\u06FF]")


class MessageKind(str, Enum):
    """What an inbound message is for."""
    QUIZ_ANSWER = "quiz_answer"
    COMMAND = "command"
    AMBIENT = "ambient"


@dataclass
class ClassifiedMessage:
    """An inbound event with its text and scope resolved."""
    event: InboundEvent
    text: str
    chat_id: str
    sender_id: str  # Participant in groups, the chat itself otherwise
    is_group: bool
    push_name: str

    @property
    def has_arabic(self) -> bool:
        return bool(ARABIC_PATTERN.search(self.text))


def extract_text(event: InboundEvent) -> str:
    """Get the text of a message from whichever field carries it."""
    return (
        event.conversation
        or event.extended_text
        or event.image_caption
        or event.video_caption
        or ""
    )


def is_group_chat(chat_id: str) -> bool:
    """Check if a chat id belongs to a group."""
    return chat_id.endswith(GROUP_SUFFIX)


def bare_user_id(jid: str) -> str:
    """Strip the server and device parts: '123:4@s.whatsapp.net' -> '123'."""
    return jid.split("@")[0].split(":")[0]


def is_owner(sender_id: str, owner: str, owner_lid: str) -> bool:
    """
    Check a sender against the configured owner.

    Linked-device ids (``...@lid``) are compared with ``owner_lid``, phone
    ids with ``owner``.
    """
    user = bare_user_id(sender_id)
    if not user:
        return False
    expected = owner_lid if sender_id.endswith(LID_SUFFIX) else owner
    return bool(expected) and user == expected.strip()


class MessageClassifier:
    """Classifies inbound events for the dispatcher."""

    def __init__(self, prefixes: list[str]):
        self.prefixes = prefixes

    def inspect(self, event: InboundEvent) -> ClassifiedMessage | None:
        """
        Resolve text and scope.

        Returns:
            None for self-originated events, which are ignored.
        """
        if event.from_me:
            return None

        is_group = is_group_chat(event.chat_id)
        sender_id = event.participant if is_group and event.participant else event.chat_id

        return ClassifiedMessage(
            event=event,
            text=extract_text(event),
            chat_id=event.chat_id,
            sender_id=sender_id,
            is_group=is_group,
            push_name=event.push_name or "Unknown",
        )

    def parse(self, message: ClassifiedMessage) -> Command | None:
        """Parse a prefixed command from the message text."""
        return parse_command(message.text, self.prefixes)

    def kind(self, message: ClassifiedMessage, has_quiz: bool) -> MessageKind:
        """
        Decide what a message is for.

        Args:
            message: The classified message.
            has_quiz: Whether the chat has an active quiz.
        """
        if has_quiz and message.text.strip() in ANSWER_TOKENS:
            return MessageKind.QUIZ_ANSWER
        if self.parse(message) is not None:
            return MessageKind.COMMAND
        return MessageKind.AMBIENT
