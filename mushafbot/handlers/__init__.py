"""Built-in command handlers."""

from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.handlers import general, media, owner, quran


def register_default_commands(registry: CommandRegistry) -> CommandRegistry:
    """Register every built-in command on a registry."""
    general.register(registry)
    media.register(registry)
    owner.register(registry)
    quran.register(registry)
    return registry


__all__ = ["register_default_commands"]
