"""Discord client wrapper that owns the command registry."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import discord

from .command import Command, CommandRegistry
from .dispatch import dispatch_interaction, dispatch_message
from .logging import get_logger

if TYPE_CHECKING:
    from .command import CommandCallback

logger = get_logger(__name__)

DEFAULT_PREFIXES = ("!",)


def _first_doc_line(func: Callable[..., object]) -> str:
    doc = func.__doc__ or ""
    for line in doc.strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


class Bot:
    """Wrapper around a Pycord Bot that dispatches prefix and slash commands."""

    def __init__(
        self,
        token: str,
        *,
        prefixes: Iterable[str] = DEFAULT_PREFIXES,
        guild_id: int | None = None,
        commands: CommandRegistry | None = None,
    ) -> None:
        self._token = token
        self._guild_id = guild_id
        self.prefixes: tuple[str, ...] = tuple(p for p in prefixes if p) or DEFAULT_PREFIXES
        self.commands = commands if commands is not None else CommandRegistry()
        # Defer bot creation until inside async context
        self._bot: discord.Bot | None = None
        self._ready_event: asyncio.Event | None = None
        self._start_task: asyncio.Task[None] | None = None
        self._slash_registered: set[str] = set()

    def _ensure_bot(self) -> discord.Bot:
        """Create the bot if not already created. Must be called from async context."""
        if self._bot is not None:
            return self._bot

        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.messages = True

        debug_guilds = [self._guild_id] if self._guild_id else None
        self._bot = discord.Bot(intents=intents, debug_guilds=debug_guilds)
        self._ready_event = asyncio.Event()

        @self._bot.event
        async def on_ready() -> None:
            assert self._ready_event is not None
            logger.info("bot.ready", user=str(self._bot.user) if self._bot else None)
            self._ready_event.set()

        @self._bot.event
        async def on_message(message: discord.Message) -> None:
            assert self._bot is not None
            if message.author == self._bot.user:
                return
            await dispatch_message(self, message)

        return self._bot

    @property
    def bot(self) -> discord.Bot:
        """Get the underlying Pycord bot. Creates it if needed."""
        return self._ensure_bot()

    @property
    def user(self) -> discord.ClientUser | None:
        if self._bot is None:
            return None
        return self._bot.user

    def add_command(self, command: Command) -> Command:
        self.commands.register(command)
        if self._bot is not None:
            self._register_slash_command(command)
        return command

    def command(
        self,
        name: str | None = None,
        *,
        description: str | None = None,
        aliases: Iterable[str] = (),
        slash: bool = True,
    ) -> Callable[[CommandCallback], CommandCallback]:
        """Register a coroutine function as a command.

        Usage:
            @bot.command(aliases=["hi"])
            async def hello(ctx):
                await ctx.respond("Hello!")
        """

        def decorator(func: CommandCallback) -> CommandCallback:
            self.add_command(
                Command(
                    name=name or func.__name__,
                    callback=func,
                    description=(
                        description if description is not None else _first_doc_line(func)
                    ),
                    aliases=tuple(aliases),
                    slash=slash,
                )
            )
            return func

        return decorator

    def register_slash_commands(self) -> None:
        for command in self.commands.slash_commands():
            self._register_slash_command(command)

    def _register_slash_command(self, command: Command) -> None:
        if not command.slash or command.name in self._slash_registered:
            return
        pycord_bot = self._ensure_bot()

        # Factory so each callback captures its own command
        def make_command(cmd: Command):
            @pycord_bot.slash_command(name=cmd.name, description=cmd.slash_description)
            async def slash_command(
                ctx: discord.ApplicationContext,
                args: str = discord.Option(default="", description="Command arguments"),
            ) -> None:
                await dispatch_interaction(self, cmd, ctx, args)

            return slash_command

        make_command(command)
        self._slash_registered.add(command.name)
        logger.info("command.slash_registered", command=command.name)

    async def start(self) -> None:
        """Start the bot and wait until ready."""
        bot = self._ensure_bot()
        assert self._ready_event is not None
        self.register_slash_commands()

        async def _run_bot() -> None:
            try:
                await bot.start(self._token)
            except asyncio.CancelledError:
                pass
            except RuntimeError as e:
                # Suppress "Session is closed" error during shutdown
                if "Session is closed" not in str(e):
                    raise

        self._start_task = asyncio.create_task(_run_bot(), name="cordcommands-bot")
        ready_task = asyncio.create_task(self._ready_event.wait())
        try:
            await asyncio.wait(
                {ready_task, self._start_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            ready_task.cancel()
        if self._start_task.done() and not self._ready_event.is_set():
            # Login or connection failed before the gateway became ready.
            exc = self._start_task.exception()
            if exc is not None:
                logger.error(
                    "bot.start_failed",
                    error=str(exc),
                    error_type=exc.__class__.__name__,
                )
                raise exc
            raise RuntimeError("Discord client stopped before becoming ready.")

    async def run(self) -> None:
        """Start the bot and block until the connection ends."""
        try:
            await self.start()
            assert self._start_task is not None
            await self._start_task
        finally:
            await self.close()

    async def close(self) -> None:
        """Close the bot connection."""
        if self._bot is not None:
            await self._bot.close()
            if self._start_task is not None and not self._start_task.done():
                self._start_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._start_task

    async def wait_until_ready(self) -> None:
        """Wait until the bot is ready."""
        self._ensure_bot()
        assert self._ready_event is not None
        await self._ready_event.wait()
