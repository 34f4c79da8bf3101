"""CLI commands for mushafbot."""

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from mushafbot import __logo__, __version__

app = typer.Typer(
    name="mushafbot",
    help=f"{__logo__} MushafBot - Quran WhatsApp bot",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} MushafBot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """MushafBot - Quran WhatsApp bot."""
    pass


# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard():
    """Initialize mushafbot configuration and data directory."""
    from mushafbot.config.loader import get_config_path, get_data_dir, save_config
    from mushafbot.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    config = Config()
    save_config(config)
    console.print(f"[green]✓[/green] Created config at {config_path}")

    data_dir = get_data_dir(config)
    console.print(f"[green]✓[/green] Created data directory at {data_dir}")

    console.print(f"\n{__logo__} MushafBot is ready!")
    console.print("\nNext steps:")
    console.print(f"  1. Set your number under [cyan]bot.owner[/cyan] in [cyan]{config_path}[/cyan]")
    console.print("  2. Start the WhatsApp bridge and scan the QR code")
    console.print("  3. Run: [cyan]mushafbot run[/cyan]")


# ============================================================================
# Run
# ============================================================================


@app.command()
def run(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Connect to the WhatsApp bridge and start answering commands."""
    from mushafbot.bot import MushafBot
    from mushafbot.channels.base import BridgeError
    from mushafbot.config.loader import load_config

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")

    config = load_config()
    console.print(f"{__logo__} Starting {config.bot.name}...")
    console.print(f"[green]✓[/green] Bridge: {config.bridge.url}")
    console.print(f"[green]✓[/green] Prefixes: {' '.join(config.bot.prefix)}")
    if not config.bot.owner:
        console.print("[yellow]Warning: No owner configured, owner commands are disabled[/yellow]")

    bot = MushafBot(config)

    try:
        asyncio.run(bot.run())
    except BridgeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\nShutting down...")


# ============================================================================
# Status Commands
# ============================================================================


@app.command()
def status():
    """Show mushafbot configuration status."""
    from mushafbot.config.loader import get_config_path, load_config
    from mushafbot.content.quiz_pool import load_question_pool
    from mushafbot.storage.id_set import SeenUsers, TrackedChats

    config_path = get_config_path()
    console.print(f"{__logo__} MushafBot Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")

    config = load_config()
    data_dir = config.data_path
    console.print(f"Data: {data_dir} {'[green]✓[/green]' if data_dir.exists() else '[red]✗[/red]'}")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Bot name", config.bot.name)
    table.add_row("Prefixes", " ".join(config.bot.prefix))
    table.add_row("Owner", config.bot.owner or "[dim]not set[/dim]")
    table.add_row("Bridge", config.bridge.url)
    table.add_row(
        "Anti-spam",
        f"{config.anti_spam.max_messages}/{config.anti_spam.interval_seconds}s"
        if config.anti_spam.enabled else "[dim]disabled[/dim]",
    )
    table.add_row(
        "Auto duaa",
        f"1 in {config.auto_duaa.probability}" if config.auto_duaa.enabled else "[dim]disabled[/dim]",
    )
    table.add_row("Hadith API key", "[green]✓[/green]" if config.content.hadith_api_key else "[dim]not set[/dim]")
    console.print(table)

    if data_dir.exists():
        chats = TrackedChats(data_dir).stats()
        console.print(
            f"\nTracked chats: {chats['total']} "
            f"({chats['groups']} groups, {chats['private']} private)"
        )
        console.print(f"Seen users: {len(SeenUsers(data_dir))}")

    console.print(f"Quiz questions: {len(load_question_pool(config.quiz.questions_file))}")


if __name__ == "__main__":
    app()
