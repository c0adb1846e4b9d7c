"""Turn Discord events into contexts and run the matching command."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import discord

from .command import Command
from .context import AnyContext, InteractionContext, MessageContext
from .errors import ContextError
from .logging import get_logger
from .parse import Invocation, parse_invocation, split_command_args

if TYPE_CHECKING:
    from .bot import Bot

logger = get_logger(__name__)

# Name of the single free-form option every slash command is registered with.
ARGS_OPTION = "args"


def _member_of(author: Any) -> discord.Member | None:
    return author if isinstance(author, discord.Member) else None


def build_message_context(
    bot: Bot,
    command: Command,
    message: discord.Message,
    invocation: Invocation,
) -> MessageContext:
    author = message.author
    context = MessageContext(
        bot=bot,
        guild=message.guild,
        channel=message.channel,
        member=_member_of(author),
        user=author,
        command=command,
        prefix=invocation.prefix,
        message=message,
        raw_arguments=invocation.raw_arguments,
    )
    context.bind_arguments(split_command_args(invocation.raw_arguments))
    return context


def build_interaction_context(
    bot: Bot,
    command: Command,
    app_ctx: discord.ApplicationContext,
    raw_arguments: Mapping[str, Any],
) -> InteractionContext:
    channel = app_ctx.channel
    if channel is None:
        raise ContextError(
            f"Interaction for command {command.name!r} has no channel to respond in."
        )
    context = InteractionContext(
        bot=bot,
        guild=app_ctx.guild,
        channel=channel,
        member=_member_of(app_ctx.author),
        user=app_ctx.user,
        command=command,
        interaction=app_ctx.interaction,
        interaction_event=app_ctx,
        raw_arguments=dict(raw_arguments),
    )
    args_text = raw_arguments.get(ARGS_OPTION)
    context.bind_arguments(
        split_command_args(args_text) if isinstance(args_text, str) else ()
    )
    return context


async def invoke(context: AnyContext) -> bool:
    """Run the context's command, reporting failures back to the user.

    Returns True if the command completed without raising.
    """
    command = context.command
    logger.debug(
        "command.invoked",
        command=command.name,
        trigger=type(context).__name__,
        guild_id=context.guild_id,
        channel_id=context.channel_id,
        user_id=context.user.id,
    )
    try:
        await command(context)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.exception(
            "command.failed",
            command=command.name,
            error=str(exc),
            error_type=exc.__class__.__name__,
        )
        try:
            await context.respond(f"error:\n{exc}")
        except discord.HTTPException as report_exc:
            logger.error(
                "command.error_report_failed",
                command=command.name,
                error=str(report_exc),
                status=report_exc.status,
            )
        return False
    logger.debug("command.completed", command=command.name)
    return True


async def dispatch_message(bot: Bot, message: discord.Message) -> bool:
    """Dispatch a prefixed message to its command.

    Returns True if the message named a registered command.
    """
    author = message.author
    if author.bot or message.webhook_id is not None:
        return False
    invocation = parse_invocation(message.content, bot.prefixes)
    if invocation is None:
        return False
    command = bot.commands.get(invocation.command_name, required=False)
    if command is None:
        logger.debug(
            "command.unknown",
            name=invocation.command_name,
            channel_id=message.channel.id,
        )
        return False
    try:
        context = build_message_context(bot, command, message, invocation)
    except ContextError as exc:
        logger.warning(
            "command.context_failed",
            command=command.name,
            message_id=message.id,
            channel_id=message.channel.id,
            error=str(exc),
        )
        return False
    await invoke(context)
    return True


async def dispatch_interaction(
    bot: Bot,
    command: Command,
    app_ctx: discord.ApplicationContext,
    args_text: str,
) -> None:
    """Handle a slash command invocation."""
    # Follow-ups need an initial response; defer buys time for the callback.
    await app_ctx.defer()
    context = build_interaction_context(
        bot, command, app_ctx, {ARGS_OPTION: args_text}
    )
    await invoke(context)
