"""
Per-sender rate limiting for mushafbot.

A fixed-window counter with a hard block: bursts inside one window are
allowed up to the threshold, after which the sender is blocked for the
full block duration regardless of later idle time. State lives in memory
only.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable

from mushafbot.config.schema import AntiSpamConfig


@dataclass
class RateState:
    """Rate state for one sender."""
    count: int = 0
    window_start: float = 0.0
    blocked_until: float = 0.0
    blocked: bool = False


class RateLimiter:
    """Tracks command frequency per sender and blocks spammers."""

    def __init__(
        self,
        config: AntiSpamConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or AntiSpamConfig()
        self._clock = clock
        self._states: dict[str, RateState] = {}
        self._total_blocked = 0
        self._last_prune = clock()

    def check_and_record(self, sender_id: str) -> bool:
        """
        Record a command from a sender.

        Returns:
            True if the sender is blocked and the command must be dropped.
        """
        if not self.config.enabled:
            return False

        now = self._clock()
        if now - self._last_prune >= self.config.interval_seconds:
            self._prune(now)

        state = self._states.get(sender_id)
        if state is None:
            state = RateState(window_start=now)
            self._states[sender_id] = state

        if state.blocked:
            if now < state.blocked_until:
                self._total_blocked += 1
                return True
            state.blocked = False
            state.count = 0

        if now - state.window_start > self.config.interval_seconds:
            state.count = 0
            state.window_start = now

        state.count += 1

        if state.count > self.config.max_messages:
            state.blocked = True
            state.blocked_until = now + self.config.block_duration_seconds
            self._total_blocked += 1
            return True

        return False

    def _prune(self, now: float) -> None:
        """Drop senders whose window and block have both run out."""
        stale = [
            sender_id for sender_id, state in self._states.items()
            if now - state.window_start > self.config.interval_seconds
            and (not state.blocked or now >= state.blocked_until)
        ]
        for sender_id in stale:
            del self._states[sender_id]
        self._last_prune = now

    def is_blocked(self, sender_id: str) -> bool:
        """Check block state without recording a message."""
        state = self._states.get(sender_id)
        return bool(state and state.blocked and self._clock() < state.blocked_until)

    def get_state(self, sender_id: str) -> RateState | None:
        """Get the current state for a sender."""
        return self._states.get(sender_id)

    def clear_sender(self, sender_id: str) -> None:
        """Forget a sender's history."""
        self._states.pop(sender_id, None)

    def get_stats(self) -> dict[str, Any]:
        """Get limiter statistics."""
        return {
            "tracked_senders": len(self._states),
            "blocked_senders": sum(1 for s in self._states if self.is_blocked(s)),
            "total_blocked": self._total_blocked,
        }
