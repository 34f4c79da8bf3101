"""Shared state handed to command executors."""

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mushafbot.auto_reply.classifier import ClassifiedMessage
from mushafbot.auto_reply.commands import CommandDescriptor, CommandRegistry
from mushafbot.bus.events import InboundEvent, OutboundMessage
from mushafbot.channels.base import BaseChannel
from mushafbot.config.schema import Config
from mushafbot.storage.id_set import SeenUsers, TrackedChats

if TYPE_CHECKING:
    from mushafbot.auto_reply.quiz import QuizManager
    from mushafbot.content.quran import QuranClient


@dataclass
class BotServices:
    """Process-wide collaborators, built once at startup."""
    config: Config
    registry: CommandRegistry
    channel: BaseChannel
    tracked_chats: TrackedChats
    seen_users: SeenUsers
    quiz: "QuizManager"
    quran: "QuranClient"
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at


@dataclass
class CommandContext:
    """One command invocation."""
    message: ClassifiedMessage
    command: CommandDescriptor
    args: list[str]
    services: BotServices

    @property
    def chat_id(self) -> str:
        return self.message.chat_id

    @property
    def sender_id(self) -> str:
        return self.message.sender_id

    @property
    def push_name(self) -> str:
        return self.message.push_name

    @property
    def is_group(self) -> bool:
        return self.message.is_group

    @property
    def event(self) -> InboundEvent:
        return self.message.event

    @property
    def config(self) -> Config:
        return self.services.config

    async def send(self, message: OutboundMessage) -> None:
        """Send any message through the channel."""
        await self.services.channel.send(message)

    async def reply(self, text: str, quote: bool = False) -> None:
        """Send text to the invoking chat, optionally quoting the command."""
        await self.send(OutboundMessage.reply(
            self.chat_id,
            text,
            quoted=self.event if quote else None,
        ))
