"""Async message bus between the channel and the dispatcher."""

import asyncio

from mushafbot.bus.events import InboundEvent


class MessageBus:
    """
    Carries inbound event batches from the channel to the dispatcher.

    Batches keep the order the network delivered them in; the dispatcher
    handles them one after another.
    """

    def __init__(self, maxsize: int = 0):
        self._inbound: asyncio.Queue[list[InboundEvent]] = asyncio.Queue(maxsize=maxsize)

    async def publish_inbound(self, batch: list[InboundEvent]) -> None:
        """Publish a batch of inbound events."""
        if batch:
            await self._inbound.put(batch)

    async def consume_inbound(self) -> list[InboundEvent]:
        """Wait for the next inbound batch."""
        return await self._inbound.get()

    @property
    def inbound_size(self) -> int:
        """Number of pending batches."""
        return self._inbound.qsize()
