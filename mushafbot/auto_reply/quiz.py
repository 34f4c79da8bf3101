"""
Quiz sessions for mushafbot.

One session per chat at most. A session is created by the quiz command
and consumed exactly once, either by a valid answer or by its expiry
timer. Both paths go through QuizSessionStore.take(), which removes the
session in the same step that reads it, so only one of them can act.

States: NONE -> ACTIVE -> (ANSWERED | EXPIRED) -> NONE
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger

from mushafbot.bus.events import OutboundMessage


ANSWER_TOKENS = ("1", "2", "3")
DIGIT_EMOJI = ("1️⃣", "2️⃣", "3️⃣")
SEPARATOR = "┄" * 22


@dataclass(frozen=True)
class QuizAnswer:
    """One answer option."""
    text: str
    is_correct: bool = False


@dataclass(frozen=True)
class QuizQuestion:
    """A multiple-choice question. Answers are shown in stored order."""
    prompt: str
    answers: tuple[QuizAnswer, ...]

    @property
    def correct_position(self) -> int | None:
        """1-based display position of the first correct answer."""
        for index, answer in enumerate(self.answers, start=1):
            if answer.is_correct:
                return index
        return None

    @property
    def correct_answer(self) -> QuizAnswer | None:
        """The first correct answer."""
        position = self.correct_position
        return self.answers[position - 1] if position else None

    def is_correct_choice(self, position: int) -> bool:
        """Check a 1-based choice against the correct marker."""
        if position < 1 or position > len(self.answers):
            return False
        return self.answers[position - 1].is_correct


@dataclass
class QuizSession:
    """An active quiz in one chat."""
    chat_id: str
    question: QuizQuestion
    timer: asyncio.Task | None = None


@dataclass
class QuizOutcome:
    """Result of the consuming transition."""
    chat_id: str
    question: QuizQuestion
    correct: bool
    chosen: int | None  # None when the session expired
    text: str


class QuizSessionStore:
    """
    Chat id -> active session.

    take() is the only way to end a session; it reads and deletes in one
    step with no suspension point in between.
    """

    def __init__(self):
        self._sessions: dict[str, QuizSession] = {}

    def has(self, chat_id: str) -> bool:
        return chat_id in self._sessions

    def get(self, chat_id: str) -> QuizSession | None:
        return self._sessions.get(chat_id)

    def put(self, session: QuizSession) -> bool:
        """Store a session. Returns False if the chat already has one."""
        if session.chat_id in self._sessions:
            return False
        self._sessions[session.chat_id] = session
        return True

    def take(self, chat_id: str, expected: QuizSession | None = None) -> QuizSession | None:
        """
        Remove and return the chat's session.

        Args:
            chat_id: Chat to take the session from.
            expected: Only take the session if it is this exact object.
        """
        session = self._sessions.get(chat_id)
        if session is None or (expected is not None and session is not expected):
            return None
        del self._sessions[chat_id]
        return session

    def chat_ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)


class QuizManager:
    """
    Runs the quiz state machine.

    Features:
    - Refuses a second quiz while one is pending in the same chat
    - Uniform random question draw
    - Expiry timer that reveals the answer
    """

    PENDING_TEXT = "⏳ يوجد سؤال قيد الانتظار! أجب عليه أولاً بـ *1* أو *2* أو *3*"
    NO_POOL_TEXT = "❌ لم يتم تحميل قاعدة بيانات الأسئلة."

    def __init__(
        self,
        questions: list[QuizQuestion],
        send: Callable[[OutboundMessage], Awaitable[None]],
        store: QuizSessionStore | None = None,
        timeout_seconds: float = 30.0,
        rng: random.Random | None = None,
    ):
        self.questions = questions
        self.store = store or QuizSessionStore()
        self.timeout_seconds = timeout_seconds
        self._send = send
        self._rng = rng or random.Random()

        self._started = 0
        self._answered = 0
        self._expired = 0

    def start(self, chat_id: str) -> str:
        """
        Start a quiz in a chat.

        Must be called from a running event loop. The session is stored and
        its timer armed before this returns, so no other message can observe
        the chat without a session after the question goes out.

        Returns:
            Text to send: the question, or a refusal notice.
        """
        if not self.questions:
            return self.NO_POOL_TEXT

        if self.store.has(chat_id):
            return self.PENDING_TEXT

        question = self._rng.choice(self.questions)
        session = QuizSession(chat_id=chat_id, question=question)
        self.store.put(session)
        session.timer = asyncio.create_task(self._expire_after(session))
        self._started += 1

        logger.info(f"Quiz started in {chat_id}")
        return self.format_question(question)

    def answer(self, chat_id: str, text: str) -> QuizOutcome | None:
        """
        Consume an answer.

        Returns:
            The outcome, or None if the text is not an answer token or the
            chat has no session (the message then falls through).
        """
        token = text.strip()
        if token not in ANSWER_TOKENS:
            return None

        session = self.store.take(chat_id)
        if session is None:
            return None

        if session.timer is not None and not session.timer.done():
            session.timer.cancel()

        chosen = int(token)
        question = session.question
        correct = question.is_correct_choice(chosen)
        self._answered += 1

        if correct:
            report = f"✅ *إجابة صحيحة!* أحسنت 🎉\n\n📌 الإجابة: {self._correct_text(question)}"
        else:
            report = (
                f"❌ *إجابة خاطئة*\n\n"
                f"📌 الإجابة الصحيحة هي رقم *{question.correct_position}*: {self._correct_text(question)}"
            )

        return QuizOutcome(chat_id=chat_id, question=question, correct=correct, chosen=chosen, text=report)

    async def expire(self, chat_id: str, session: QuizSession | None = None) -> QuizOutcome | None:
        """
        Expire a chat's session and announce the answer.

        A no-op returning None if the session was already consumed.
        """
        taken = self.store.take(chat_id, expected=session)
        if taken is None:
            return None

        question = taken.question
        self._expired += 1
        text = (
            f"⏰ *انتهى الوقت!*\n\n"
            f"📌 الإجابة الصحيحة كانت رقم *{question.correct_position}*: {self._correct_text(question)}"
        )
        outcome = QuizOutcome(chat_id=chat_id, question=question, correct=False, chosen=None, text=text)

        try:
            await self._send(OutboundMessage.reply(chat_id, text))
        except Exception as e:
            logger.error(f"Failed to send quiz timeout to {chat_id}: {e}")

        return outcome

    async def _expire_after(self, session: QuizSession) -> None:
        """Timer body: wait for the answer window, then expire."""
        await asyncio.sleep(self.timeout_seconds)
        await self.expire(session.chat_id, session)

    def format_question(self, question: QuizQuestion) -> str:
        """Render a question with numbered options."""
        lines = [
            "🕌 *سؤال إسلامي*",
            SEPARATOR,
            "",
            f"❓ *{question.prompt}*",
            "",
        ]
        for emoji, answer in zip(DIGIT_EMOJI, question.answers):
            lines.append(f"{emoji} {answer.text}")
        lines.extend([
            "",
            SEPARATOR,
            f"⏱️ لديك *{int(self.timeout_seconds)} ثانية* للإجابة",
            "💬 أرسل رقم الإجابة: *1* أو *2* أو *3*",
        ])
        return "\n".join(lines)

    @staticmethod
    def _correct_text(question: QuizQuestion) -> str:
        correct = question.correct_answer
        return correct.text if correct else ""

    def cancel_all(self) -> None:
        """Cancel every pending timer (shutdown)."""
        for chat_id in self.store.chat_ids():
            session = self.store.take(chat_id)
            if session and session.timer and not session.timer.done():
                session.timer.cancel()

    def get_stats(self) -> dict[str, Any]:
        """Get quiz statistics."""
        return {
            "questions": len(self.questions),
            "active_sessions": len(self.store),
            "started": self._started,
            "answered": self._answered,
            "expired": self._expired,
        }
