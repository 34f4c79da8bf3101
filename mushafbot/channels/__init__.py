"""Chat channels for mushafbot."""

from mushafbot.channels.base import BaseChannel, BridgeError
from mushafbot.channels.whatsapp import WhatsAppChannel

__all__ = ["BaseChannel", "BridgeError", "WhatsAppChannel"]
