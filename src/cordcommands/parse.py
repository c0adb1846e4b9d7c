from __future__ import annotations

import shlex
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Invocation:
    prefix: str
    command_name: str
    raw_arguments: str


def match_prefix(content: str, prefixes: Iterable[str]) -> str | None:
    # Longest first so "!!" wins over "!".
    for prefix in sorted((p for p in prefixes if p), key=len, reverse=True):
        if content.startswith(prefix):
            return prefix
    return None


def parse_invocation(content: str, prefixes: Iterable[str]) -> Invocation | None:
    prefix = match_prefix(content, prefixes)
    if prefix is None:
        return None
    rest = content[len(prefix) :].lstrip()
    if not rest:
        return None
    parts = rest.split(maxsplit=1)
    command_name = parts[0].lower()
    raw_arguments = parts[1] if len(parts) > 1 else ""
    return Invocation(prefix=prefix, command_name=command_name, raw_arguments=raw_arguments)


def split_command_args(text: str) -> tuple[str, ...]:
    """Split command arguments, handling quotes."""
    if not text.strip():
        return ()
    try:
        return tuple(shlex.split(text))
    except ValueError:
        return tuple(text.split())
