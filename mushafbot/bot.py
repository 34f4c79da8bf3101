"""Process wiring: builds every component and runs them together."""

import asyncio

from loguru import logger

from mushafbot.auto_reply import CommandRegistry, QuizManager, ReplyDispatcher
from mushafbot.auto_reply.context import BotServices
from mushafbot.bus.queue import MessageBus
from mushafbot.channels.base import BridgeError
from mushafbot.channels.whatsapp import WhatsAppChannel
from mushafbot.config.loader import get_data_dir
from mushafbot.config.schema import Config
from mushafbot.content.quiz_pool import load_question_pool
from mushafbot.content.quran import QuranClient
from mushafbot.handlers import register_default_commands
from mushafbot.storage.id_set import SeenUsers, TrackedChats


class MushafBot:
    """
    The running bot.

    The channel reader and the dispatcher run as separate tasks so a
    handler awaiting a media download never blocks the frame that
    resolves it.
    """

    def __init__(self, config: Config):
        self.config = config
        data_dir = get_data_dir(config)

        self.bus = MessageBus()
        self.channel = WhatsAppChannel(config.bridge, self.bus)
        self.registry = register_default_commands(CommandRegistry())
        self.quran = QuranClient(
            timeout=config.content.http_timeout_seconds,
            hadith_api_key=config.content.hadith_api_key,
        )

        self.quiz = QuizManager(
            load_question_pool(config.quiz.questions_file),
            send=self.channel.send,
            timeout_seconds=config.quiz.timeout_seconds,
        )

        self.services = BotServices(
            config=config,
            registry=self.registry,
            channel=self.channel,
            tracked_chats=TrackedChats(data_dir),
            seen_users=SeenUsers(data_dir),
            quiz=self.quiz,
            quran=self.quran,
        )
        self.dispatcher = ReplyDispatcher(self.services, bus=self.bus)

    async def run(self) -> None:
        """
        Run until the bridge logs out or the task is cancelled.

        Raises:
            BridgeError: If the bridge cannot be reached at startup.
        """
        logger.info(
            f"Loaded {len(self.registry)} commands, "
            f"{len(self.quiz.questions)} quiz questions, "
            f"{len(self.services.tracked_chats)} tracked chats"
        )

        try:
            await self.channel.start()
        except BridgeError:
            await self.shutdown()
            raise

        dispatcher_task = asyncio.create_task(self.dispatcher.run())
        try:
            await self.channel.wait_closed()
        finally:
            self.dispatcher.stop()
            dispatcher_task.cancel()
            try:
                await dispatcher_task
            except asyncio.CancelledError:
                pass
            await self.shutdown()

    async def shutdown(self) -> None:
        """Release the channel, pending quiz timers and the HTTP client."""
        self.quiz.cancel_all()
        await self.channel.stop()
        await self.quran.close()
        logger.info("MushafBot stopped")
