"""
Reply dispatcher for mushafbot.

Routes inbound events to handlers. Per event, in order:
1. Drop self-originated events and gated scopes
2. Log, mark read, track the chat
3. Welcome first-contact direct users with the menu
4. Maybe send an ambient supplication
5. Consume quiz answers
6. Parse, rate-limit, permission-check and run commands
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from loguru import logger

from mushafbot.auto_reply.ambient import AmbientResponder
from mushafbot.auto_reply.classifier import (
    ClassifiedMessage,
    MessageClassifier,
    MessageKind,
    is_owner,
)
from mushafbot.auto_reply.commands import CommandDescriptor
from mushafbot.auto_reply.context import BotServices, CommandContext
from mushafbot.auto_reply.rate_limit import RateLimiter
from mushafbot.bus.events import InboundEvent, OutboundMessage
from mushafbot.bus.queue import MessageBus
from mushafbot.utils.helpers import truncate


@dataclass
class DispatchConfig:
    """Configuration for the dispatcher."""
    consume_timeout_seconds: float = 1.0  # Poll interval for clean shutdown
    welcome_command: str = "help"


class ReplyDispatcher:
    """
    Dispatches inbound events to command handlers.

    Events in a batch are handled one after another. A failure while
    handling one event is logged and never stops the next.
    """

    def __init__(
        self,
        services: BotServices,
        bus: MessageBus | None = None,
        rate_limiter: RateLimiter | None = None,
        ambient: AmbientResponder | None = None,
        config: DispatchConfig | None = None,
    ):
        self.services = services
        self.bus = bus
        self.config = config or DispatchConfig()
        self.classifier = MessageClassifier(services.config.bot.prefix)
        self.rate_limiter = rate_limiter or RateLimiter(services.config.anti_spam)
        self.ambient = ambient or AmbientResponder(services.config.auto_duaa)

        # Stats
        self._processed_count = 0
        self._command_count = 0
        self._error_count = 0
        self._running = False

    async def run(self) -> None:
        """Consume batches from the bus until stopped."""
        if self.bus is None:
            raise RuntimeError("ReplyDispatcher.run() needs a message bus")

        self._running = True
        logger.info("Reply dispatcher started")

        while self._running:
            try:
                try:
                    batch = await asyncio.wait_for(
                        self.bus.consume_inbound(),
                        timeout=self.config.consume_timeout_seconds,
                    )
                except asyncio.TimeoutError:
                    continue

                await self.process_batch(batch)

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Dispatcher error: {e}")
                self._error_count += 1

    def stop(self) -> None:
        """Stop the dispatch loop."""
        self._running = False
        logger.info("Reply dispatcher stopped")

    async def process_batch(self, batch: list[InboundEvent]) -> None:
        """Process a batch of events sequentially."""
        for event in batch:
            try:
                await self.process_event(event)
            except Exception as e:
                logger.error(f"Failed to process message {event.id} in {event.chat_id}: {e}")
                self._error_count += 1

    async def process_event(self, event: InboundEvent) -> MessageKind | None:
        """
        Run the pipeline for one event.

        Returns:
            How the message was classified, or None if it was ignored.
        """
        message = self.classifier.inspect(event)
        if message is None:
            return None

        config = self.services.config
        features = config.features
        if message.is_group and not features.respond_to_groups:
            return None
        if not message.is_group and not features.respond_to_private:
            return None

        self._processed_count += 1

        if features.log_messages:
            logger.info(f"📩 {message.push_name}: {truncate(message.text, 80) if message.text else '[Media]'}")

        if features.auto_read:
            try:
                await self.services.channel.mark_read(event)
            except Exception as e:
                logger.debug(f"Failed to mark message read: {e}")

        self.services.tracked_chats.add(message.chat_id)

        if not message.is_group and self.services.seen_users.mark_seen(message.sender_id):
            welcome = self.services.registry.resolve(self.config.welcome_command)
            if welcome is not None:
                logger.info(f"New user welcomed: {message.push_name}")
                await self._execute(welcome, message, [])

        duaa = self.ambient.pick(message)
        if duaa:
            try:
                await self.services.channel.send(OutboundMessage.reply(message.chat_id, duaa))
            except Exception as e:
                logger.error(f"Failed to send supplication: {e}")

        quiz = self.services.quiz
        kind = self.classifier.kind(message, has_quiz=quiz.store.has(message.chat_id))

        if kind is MessageKind.QUIZ_ANSWER:
            outcome = quiz.answer(message.chat_id, message.text)
            if outcome is not None:
                await self.services.channel.send(
                    OutboundMessage.reply(message.chat_id, outcome.text, quoted=event)
                )
                return kind

        command = self.classifier.parse(message)
        if command is None:
            return MessageKind.AMBIENT

        descriptor = self.services.registry.resolve(command.name)
        if descriptor is None:
            return MessageKind.AMBIENT

        if self.rate_limiter.check_and_record(message.sender_id):
            logger.warning(f"Blocked spam from {message.push_name}")
            return MessageKind.COMMAND

        denial = self.check_permissions(descriptor, message)
        if denial:
            await self.services.channel.send(OutboundMessage.reply(message.chat_id, denial))
            return MessageKind.COMMAND

        await self._execute(descriptor, message, command.arguments, show_typing=True)
        return MessageKind.COMMAND

    def check_permissions(self, descriptor: CommandDescriptor, message: ClassifiedMessage) -> str | None:
        """
        Check owner, group and private restrictions in that order.

        Returns:
            The denial notice for the first failed check, or None.
        """
        config = self.services.config
        if descriptor.owner_only and not is_owner(message.sender_id, config.bot.owner, config.bot.owner_lid):
            return config.messages.owner_only
        if descriptor.group_only and not message.is_group:
            return config.messages.group_only
        if descriptor.private_only and message.is_group:
            return config.messages.private_only
        return None

    async def _execute(
        self,
        descriptor: CommandDescriptor,
        message: ClassifiedMessage,
        args: list[str],
        show_typing: bool = False,
    ) -> bool:
        """Run a handler; report failures to the chat. Returns True on success."""
        channel = self.services.channel
        typing = show_typing and self.services.config.features.auto_typing
        context = CommandContext(
            message=message,
            command=descriptor,
            args=args,
            services=self.services,
        )

        if typing:
            await self._presence(message.chat_id, "composing")

        logger.info(f"⚡ {descriptor.name} by {message.push_name}")
        self._command_count += 1

        try:
            await descriptor.executor(context)
            return True
        except Exception as e:
            self._error_count += 1
            logger.error(f"Command error in '{descriptor.name}': {e}")
            try:
                await channel.send(OutboundMessage.reply(
                    message.chat_id,
                    self.services.config.messages.command_failed,
                ))
            except Exception as send_error:
                logger.error(f"Failed to report command error: {send_error}")
            return False
        finally:
            if typing:
                await self._presence(message.chat_id, "paused")

    async def _presence(self, chat_id: str, state: str) -> None:
        try:
            await self.services.channel.send_presence(chat_id, state)
        except Exception as e:
            logger.debug(f"Failed to update presence: {e}")

    def get_stats(self) -> dict[str, Any]:
        """Get dispatcher statistics."""
        return {
            "processed_count": self._processed_count,
            "command_count": self._command_count,
            "error_count": self._error_count,
            "running": self._running,
            "rate_limit": self.rate_limiter.get_stats(),
            "quiz": self.services.quiz.get_stats(),
        }
