"""Execution contexts handed to command callbacks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

import discord

from .builder import MessageBuilder
from .errors import ContextError
from .logging import get_logger

if TYPE_CHECKING:
    from .bot import Bot
    from .command import Command

logger = get_logger(__name__)

__all__ = ["AnyContext", "Context", "InteractionContext", "MessageContext"]


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class Context(ABC):
    """Data about a single command execution.

    A context is built once per triggering event, right before the command
    callback runs, and is not reused. Everything except the argument slot is
    fixed at construction; the dispatcher binds the parsed arguments once
    before handing the context to the callback.

    ``member`` is guaranteed to be set whenever ``guild`` is; both are
    ``None`` for commands run in direct messages.
    """

    bot: Bot
    guild: discord.Guild | None
    channel: discord.abc.Messageable
    member: discord.Member | None
    user: discord.User | discord.Member
    command: Command
    _arguments: tuple[Any, ...] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.guild is not None and self.member is None:
            raise ContextError(
                f"Context for command {self.command.name!r} has a guild but no member."
            )

    @property
    def arguments(self) -> tuple[Any, ...]:
        if self._arguments is None:
            raise ContextError(
                f"Arguments for command {self.command.name!r} have not been bound yet."
            )
        return self._arguments

    @property
    def arguments_bound(self) -> bool:
        return self._arguments is not None

    def bind_arguments(self, arguments: Iterable[Any]) -> None:
        if self._arguments is not None:
            raise ContextError(
                f"Arguments for command {self.command.name!r} are already bound."
            )
        object.__setattr__(self, "_arguments", tuple(arguments))

    @property
    def author(self) -> discord.User | discord.Member:
        return self.member if self.member is not None else self.user

    @property
    def guild_id(self) -> int | None:
        return self.guild.id if self.guild is not None else None

    @property
    def channel_id(self) -> int | None:
        return getattr(self.channel, "id", None)

    async def send(self, builder: str | MessageBuilder) -> discord.Message:
        """Send a new message to this context's channel."""
        return await self.channel.send(
            **MessageBuilder.of(builder).without_reply().to_send_kwargs()
        )

    @abstractmethod
    async def respond(self, builder: str | MessageBuilder) -> discord.Message:
        """Send a response to the command.

        Unlike ``send``, the response is tied to whatever triggered the
        command: a reply to the message, or a follow-up to the interaction.
        """


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class MessageContext(Context):
    """A context triggered by a prefixed message in a text channel."""

    prefix: str
    message: discord.Message
    # Message content with the prefix and command name stripped.
    raw_arguments: str

    async def respond(self, builder: str | MessageBuilder) -> discord.Message:
        builder = MessageBuilder.of(builder)
        try:
            return await self.channel.send(
                **builder.replying_to(self.message).to_send_kwargs()
            )
        except discord.HTTPException as exc:
            logger.warning(
                "context.reply_failed",
                command=self.command.name,
                message_id=self.message.id,
                status=exc.status,
                error=str(exc),
            )
            return await self.channel.send(**builder.without_reply().to_send_kwargs())

    def __str__(self) -> str:
        return (
            f"MessageContext[message={self.message.id}, "
            f"message.content={self.message.content}]"
        )


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class InteractionContext(Context):
    """A context triggered by a slash command."""

    interaction: discord.Interaction
    interaction_event: discord.ApplicationContext
    # Option values as received from the API, keyed by option name.
    raw_arguments: dict[str, Any]

    def __post_init__(self) -> None:
        Context.__post_init__(self)
        object.__setattr__(self, "raw_arguments", dict(self.raw_arguments))

    async def respond(self, builder: str | MessageBuilder) -> discord.Message:
        return await self.interaction_event.followup.send(
            wait=True, **MessageBuilder.of(builder).to_followup_kwargs()
        )

    def __str__(self) -> str:
        return (
            f"InteractionContext[interaction={self.interaction.token}, "
            f"arguments={self.raw_arguments}]"
        )


AnyContext: TypeAlias = MessageContext | InteractionContext

