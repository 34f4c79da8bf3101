"""
Pytest configuration and shared fixtures for mushafbot tests.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.auto_reply.context import BotServices
from mushafbot.auto_reply.quiz import QuizAnswer, QuizManager, QuizQuestion
from mushafbot.bus.events import InboundEvent
from mushafbot.config.schema import Config
from mushafbot.storage.id_set import SeenUsers, TrackedChats


OWNER = "966500000000"
OWNER_JID = f"{OWNER}@s.whatsapp.net"
USER_JID = "966511111111@s.whatsapp.net"
GROUP_JID = "120363000000000000@g.us"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_event(
    text: str = "",
    chat_id: str = USER_JID,
    participant: str | None = None,
    from_me: bool = False,
    push_name: str = "Tester",
    **kwargs,
) -> InboundEvent:
    """Build an inbound event the way the bridge would deliver it."""
    return InboundEvent(
        id=kwargs.pop("id", "MSG1"),
        chat_id=chat_id,
        from_me=from_me,
        participant=participant,
        push_name=push_name,
        conversation=text,
        raw={"key": {"remoteJid": chat_id, "id": "MSG1"}},
        **kwargs,
    )


def make_question(prompt: str = "كم عدد سور القرآن الكريم؟", correct: int = 2) -> QuizQuestion:
    """A three-option question with the correct answer at a 1-based position."""
    return QuizQuestion(
        prompt=prompt,
        answers=tuple(
            QuizAnswer(text=f"option {i}", is_correct=(i == correct))
            for i in (1, 2, 3)
        ),
    )


@pytest.fixture
def data_dir(tmp_path):
    """Create a temporary data directory."""
    data = tmp_path / "data"
    data.mkdir()
    return data


@pytest.fixture
def config_dir(tmp_path):
    """Create a temporary config directory."""
    config = tmp_path / "config"
    config.mkdir()
    return config


@pytest.fixture
def config(data_dir):
    """Config with a known owner, no ambient replies and no typing."""
    config = Config(data_dir=str(data_dir))
    config.bot.owner = OWNER
    config.auto_duaa.enabled = False
    return config


@pytest.fixture
def channel():
    """A channel whose network calls are all mocks."""
    channel = MagicMock()
    channel.send = AsyncMock()
    channel.mark_read = AsyncMock()
    channel.send_presence = AsyncMock()
    channel.download_media = AsyncMock(return_value=b"media-bytes")
    return channel


@pytest.fixture
def services(config, channel, data_dir):
    """Bot services wired to mocks and temporary storage."""
    quiz = QuizManager([make_question()], send=channel.send, timeout_seconds=30)
    quran = MagicMock()
    return BotServices(
        config=config,
        registry=CommandRegistry(),
        channel=channel,
        tracked_chats=TrackedChats(data_dir),
        seen_users=SeenUsers(data_dir),
        quiz=quiz,
        quran=quran,
    )
