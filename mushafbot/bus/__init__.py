"""Message bus for decoupled channel-dispatcher communication."""

from mushafbot.bus.events import InboundEvent, OutboundMessage
from mushafbot.bus.queue import MessageBus

__all__ = ["MessageBus", "InboundEvent", "OutboundMessage"]
