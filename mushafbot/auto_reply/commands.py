"""
Command registry and parsing for mushafbot.

Supports:
- Prefixed commands (/help, /سورة 18)
- Multiple aliases per command
- Permission flags and categories
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable

from loguru import logger

if TYPE_CHECKING:
    from mushafbot.auto_reply.context import CommandContext


# Type alias for command executors
CommandExecutor = Callable[["CommandContext"], Awaitable[None]]


@dataclass(frozen=True)
class CommandDescriptor:
    """A registered command. Immutable once built."""
    name: str
    executor: CommandExecutor
    aliases: tuple[str, ...] = ()
    description: str = "No description"
    description_ar: str = "لا يوجد وصف"
    usage: str = ""
    category: str = "general"
    owner_only: bool = False
    group_only: bool = False
    private_only: bool = False
    cooldown: int = 0  # Seconds, informational


@dataclass
class Command:
    """A parsed command invocation."""
    name: str
    arguments: list[str] = field(default_factory=list)
    prefix: str = ""
    raw: str = ""

    @property
    def arg(self) -> str:
        """Get first argument or empty string."""
        return self.arguments[0] if self.arguments else ""

    @property
    def args_str(self) -> str:
        """Get all arguments as a single string."""
        return " ".join(self.arguments)


class CommandRegistry:
    """
    Registry for command descriptors.

    Each descriptor is stored once under its primary name. A separate
    token table maps the primary name and every alias to that key, so
    aliases can never hold a diverging copy of a command.
    """

    def __init__(self):
        self._commands: dict[str, CommandDescriptor] = {}
        self._tokens: dict[str, str] = {}

    def register(
        self,
        name: str,
        executor: CommandExecutor,
        aliases: list[str] | None = None,
        description: str = "No description",
        description_ar: str = "",
        usage: str = "",
        category: str = "general",
        owner_only: bool = False,
        group_only: bool = False,
        private_only: bool = False,
        cooldown: int = 0,
    ) -> CommandDescriptor:
        """
        Register a command.

        A name or alias that is already taken is overwritten (last
        registration wins) and a warning is logged.

        Args:
            name: Primary command name.
            executor: Async function receiving the CommandContext.
            aliases: Alternative names for the command.
            description: English description.
            description_ar: Arabic description (defaults to the English one).
            usage: Usage hint shown in per-command help.
            category: Menu category (general, fun, media, owner, quran).
            owner_only: Restrict to the bot owner.
            group_only: Restrict to group chats.
            private_only: Restrict to direct chats.
            cooldown: Informational cooldown in seconds.

        Returns:
            The registered descriptor.
        """
        descriptor = CommandDescriptor(
            name=name,
            executor=executor,
            aliases=tuple(aliases or ()),
            description=description,
            description_ar=description_ar or description,
            usage=usage,
            category=category,
            owner_only=owner_only,
            group_only=group_only,
            private_only=private_only,
            cooldown=cooldown,
        )
        self.add(descriptor)
        return descriptor

    def add(self, descriptor: CommandDescriptor) -> None:
        """Insert a prebuilt descriptor under its name and aliases."""
        if descriptor.name in self._commands:
            logger.warning(f"Command '{descriptor.name}' registered twice; replacing previous definition")
        self._commands[descriptor.name] = descriptor

        for token in (descriptor.name, *descriptor.aliases):
            previous = self._tokens.get(token)
            if previous is not None and previous != descriptor.name:
                logger.warning(
                    f"Command token '{token}' moved from '{previous}' to '{descriptor.name}'"
                )
            self._tokens[token] = descriptor.name

    def resolve(self, token: str) -> CommandDescriptor | None:
        """Get the descriptor for a command name or alias."""
        key = self._tokens.get(token)
        if key is None:
            return None
        return self._commands.get(key)

    def list_unique(self) -> list[CommandDescriptor]:
        """List reachable commands once each, in registration order."""
        reachable = set(self._tokens.values())
        return [cmd for name, cmd in self._commands.items() if name in reachable]

    def by_category(self, category: str) -> list[CommandDescriptor]:
        """List commands in a category."""
        return [cmd for cmd in self.list_unique() if cmd.category == category]

    def __contains__(self, token: str) -> bool:
        return token in self._tokens

    def __len__(self) -> int:
        return len(self.list_unique())


def parse_command(text: str, prefixes: list[str] | str = "/") -> Command | None:
    """
    Parse a prefixed command from text.

    Prefixes are tried in order and the first match wins. The command name
    is lowercased; arguments keep their case.

    Examples:
        /help -> Command(name="help")
        /PING -> Command(name="ping")
        /سورة 18 -> Command(name="سورة", arguments=["18"])

    Args:
        text: Message text.
        prefixes: One prefix or a list of prefixes.

    Returns:
        Parsed Command or None if the text is not a command.
    """
    if isinstance(prefixes, str):
        prefixes = [prefixes]

    used = next((p for p in prefixes if p and text.startswith(p)), None)
    if used is None:
        return None

    parts = text[len(used):].split()
    if not parts:
        return None

    return Command(
        name=parts[0].lower(),
        arguments=parts[1:],
        prefix=used,
        raw=text,
    )
