from __future__ import annotations

from pathlib import Path

import anyio
import discord
import typer

from . import __version__
from .bot import Bot
from .context import AnyContext
from .logging import get_logger, setup_logging
from .settings import ConfigError, load_settings, require_token

logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def build_bot(token: str, *, prefixes: list[str], guild_id: int | None) -> Bot:
    bot = Bot(token, prefixes=prefixes, guild_id=guild_id)

    @bot.command(description="Check that the bot is responding.")
    async def ping(ctx: AnyContext) -> None:
        await ctx.respond("pong")

    return bot


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Run a Discord bot with prefix and slash commands.",
)


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """cordcommands CLI."""


@app.command()
def run(
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to the TOML config file.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Log gateway events and command dispatch.",
    ),
) -> None:
    """Connect to Discord and serve commands until interrupted."""
    try:
        settings, config_path = load_settings(config)
        token = require_token(settings, config_path)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    setup_logging(debug=debug or settings.debug, json=settings.log_json)
    bot = build_bot(token, prefixes=settings.prefixes, guild_id=settings.guild_id)
    logger.info(
        "bot.starting",
        config_path=str(config_path),
        prefixes=list(bot.prefixes),
        commands=[command.name for command in bot.commands],
    )
    try:
        anyio.run(bot.run)
    except KeyboardInterrupt:
        logger.info("bot.stopped")
    except discord.LoginFailure as e:
        typer.echo(f"Discord rejected the bot token: {e}", err=True)
        raise typer.Exit(code=1) from e


def main() -> None:
    app()


if __name__ == "__main__":
    main()
