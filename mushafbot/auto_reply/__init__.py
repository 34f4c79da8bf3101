"""
Auto-reply system for mushafbot.

Provides message handling:
- Command registry and parsing
- Message classification
- Per-sender rate limiting
- Quiz sessions
- Dispatch with error recovery
"""

from mushafbot.auto_reply.commands import (
    Command,
    CommandDescriptor,
    CommandRegistry,
    parse_command,
)
from mushafbot.auto_reply.classifier import (
    ClassifiedMessage,
    MessageClassifier,
    MessageKind,
)
from mushafbot.auto_reply.rate_limit import RateLimiter, RateState
from mushafbot.auto_reply.quiz import (
    QuizAnswer,
    QuizManager,
    QuizQuestion,
    QuizSession,
    QuizSessionStore,
)
from mushafbot.auto_reply.context import BotServices, CommandContext
from mushafbot.auto_reply.dispatch import ReplyDispatcher, DispatchConfig

__all__ = [
    # Commands
    "Command",
    "CommandDescriptor",
    "CommandRegistry",
    "parse_command",
    # Classification
    "ClassifiedMessage",
    "MessageClassifier",
    "MessageKind",
    # Rate limiting
    "RateLimiter",
    "RateState",
    # Quiz
    "QuizAnswer",
    "QuizManager",
    "QuizQuestion",
    "QuizSession",
    "QuizSessionStore",
    # Dispatch
    "BotServices",
    "CommandContext",
    "ReplyDispatcher",
    "DispatchConfig",
]
