"""Outbound message descriptors."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

import discord

from .errors import ContextError


@dataclass(frozen=True, slots=True)
class MessageBuilder:
    """Everything needed to send one message, independent of how it is sent.

    Channel sends and interaction follow-ups accept different keyword
    arguments; ``to_send_kwargs`` and ``to_followup_kwargs`` render the
    builder for each. Builders are immutable, so the same one can be sent
    more than once.
    """

    content: str | None = None
    embeds: Sequence[discord.Embed] = ()
    files: Sequence[discord.File] = ()
    allowed_mentions: discord.AllowedMentions | None = None
    reference: discord.MessageReference | None = None
    mention_author: bool | None = None
    tts: bool = False
    suppress: bool = False
    ephemeral: bool = False

    @classmethod
    def of(cls, value: str | MessageBuilder) -> MessageBuilder:
        if isinstance(value, MessageBuilder):
            return value
        return cls(content=value)

    @property
    def is_reply(self) -> bool:
        return self.reference is not None

    def replying_to(self, message: discord.Message) -> MessageBuilder:
        return replace(self, reference=message.to_reference())

    def without_reply(self) -> MessageBuilder:
        if self.reference is None:
            return self
        return replace(self, reference=None)

    def _ensure_payload(self) -> None:
        if not self.content and not self.embeds and not self.files:
            raise ContextError("Cannot send an empty message.")

    def _common_kwargs(self) -> dict[str, Any]:
        self._ensure_payload()
        kwargs: dict[str, Any] = {}
        if self.content:
            kwargs["content"] = self.content
        if self.embeds:
            kwargs["embeds"] = list(self.embeds)
        if self.files:
            kwargs["files"] = list(self.files)
        if self.allowed_mentions is not None:
            kwargs["allowed_mentions"] = self.allowed_mentions
        if self.tts:
            kwargs["tts"] = True
        return kwargs

    def to_send_kwargs(self) -> dict[str, Any]:
        kwargs = self._common_kwargs()
        if self.reference is not None:
            kwargs["reference"] = self.reference
        if self.mention_author is not None:
            kwargs["mention_author"] = self.mention_author
        if self.suppress:
            kwargs["suppress"] = True
        return kwargs

    def to_followup_kwargs(self) -> dict[str, Any]:
        kwargs = self._common_kwargs()
        if self.ephemeral:
            kwargs["ephemeral"] = True
        return kwargs
