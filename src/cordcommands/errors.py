from __future__ import annotations


class CommandsError(RuntimeError):
    pass


class ContextError(CommandsError):
    """A context was built or used in a way its contract does not allow."""


class CommandNotFound(CommandsError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command {name!r}.")
        self.name = name
