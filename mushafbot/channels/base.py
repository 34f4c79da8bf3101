"""Base channel interface for chat platforms."""

from abc import ABC, abstractmethod

from mushafbot.bus.events import InboundEvent, OutboundMessage
from mushafbot.bus.queue import MessageBus


class BridgeError(Exception):
    """The chat network session could not be established or was lost."""


class BaseChannel(ABC):
    """
    Abstract base class for chat channel implementations.

    A channel connects to the chat network, publishes inbound batches to the
    message bus and delivers outbound messages.
    """

    name: str = "base"

    def __init__(self, bus: MessageBus):
        self.bus = bus
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """Connect and start receiving messages."""

    @abstractmethod
    async def stop(self) -> None:
        """Disconnect and release resources."""

    @abstractmethod
    async def send(self, message: OutboundMessage) -> None:
        """Send a message. Raises on delivery failure."""

    async def mark_read(self, event: InboundEvent) -> None:
        """Mark a message as read."""

    async def send_presence(self, chat_id: str, state: str) -> None:
        """Update presence in a chat ("composing" or "paused")."""

    async def download_media(self, event: InboundEvent) -> bytes:
        """Download the image or video attached to (or quoted by) a message."""
        raise NotImplementedError(f"{self.name} channel cannot download media")

    async def _handle_batch(self, batch: list[InboundEvent]) -> None:
        """Publish a batch of inbound events to the bus."""
        await self.bus.publish_inbound(batch)

    @property
    def is_running(self) -> bool:
        """Check if the channel is running."""
        return self._running
