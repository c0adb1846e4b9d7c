"""Command definitions and the registry the dispatcher resolves against."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .errors import CommandNotFound, CommandsError

if TYPE_CHECKING:
    from .context import AnyContext

    CommandCallback = Callable[[AnyContext], Awaitable[Any]]

# Discord rejects slash command descriptions over 100 characters.
MAX_DESCRIPTION_LENGTH = 100
# Discord's CHAT_INPUT command name rule.
SLASH_NAME_RE = re.compile(r"^[-_\w]{1,32}$")


def _normalize_name(value: str) -> str:
    cleaned = value.strip().lower()
    if not cleaned:
        raise CommandsError("Command names must be non-empty strings.")
    if any(ch.isspace() for ch in cleaned):
        raise CommandsError(f"Invalid command name {value!r}; names cannot contain spaces.")
    return cleaned


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    callback: CommandCallback
    description: str = ""
    aliases: tuple[str, ...] = field(default_factory=tuple)
    slash: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _normalize_name(self.name))
        object.__setattr__(
            self, "aliases", tuple(_normalize_name(alias) for alias in self.aliases)
        )
        object.__setattr__(self, "description", self.description.strip())
        seen: set[str] = set()
        for name in self.names:
            if name in seen:
                raise CommandsError(
                    f"Command {self.name!r} lists the name {name!r} more than once."
                )
            seen.add(name)
        if self.slash and not SLASH_NAME_RE.match(self.name):
            raise CommandsError(
                f"Invalid slash command name {self.name!r}; use 1-32 letters, "
                "digits, '-' or '_', or register it with slash=False."
            )

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    @property
    def slash_description(self) -> str:
        description = self.description or self.name
        if len(description) > MAX_DESCRIPTION_LENGTH:
            return description[: MAX_DESCRIPTION_LENGTH - 3] + "..."
        return description

    async def __call__(self, context: AnyContext) -> Any:
        return await self.callback(context)


class CommandRegistry:
    """Case-insensitive lookup of commands by name or alias."""

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._commands: dict[str, Command] = {}
        self._by_name: dict[str, Command] = {}
        for command in commands:
            self.register(command)

    def register(self, command: Command) -> Command:
        for name in command.names:
            existing = self._by_name.get(name)
            if existing is not None:
                raise CommandsError(
                    f"Command name {name!r} is already used by {existing.name!r}."
                )
        self._commands[command.name] = command
        for name in command.names:
            self._by_name[name] = command
        return command

    def get(self, name: str, *, required: bool = True) -> Command | None:
        command = self._by_name.get(name.strip().lower())
        if command is None and required:
            raise CommandNotFound(name)
        return command

    def slash_commands(self) -> list[Command]:
        return [command for command in self._commands.values() if command.slash]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._by_name

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)
