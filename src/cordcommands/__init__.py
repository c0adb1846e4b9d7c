from .bot import Bot
from .builder import MessageBuilder
from .command import Command, CommandRegistry
from .context import AnyContext, Context, InteractionContext, MessageContext
from .errors import CommandNotFound, CommandsError, ContextError

__version__ = "0.1.0"

__all__ = [
    "AnyContext",
    "Bot",
    "Command",
    "CommandNotFound",
    "CommandRegistry",
    "CommandsError",
    "Context",
    "ContextError",
    "InteractionContext",
    "MessageBuilder",
    "MessageContext",
    "__version__",
]
