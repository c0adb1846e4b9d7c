from unittest.mock import MagicMock

import discord
import pytest

from cordcommands.builder import MessageBuilder
from cordcommands.errors import ContextError


def test_of_wraps_text() -> None:
    assert MessageBuilder.of("hi") == MessageBuilder(content="hi")


def test_of_returns_builder_unchanged() -> None:
    builder = MessageBuilder(content="hi", tts=True)
    assert MessageBuilder.of(builder) is builder


def test_send_kwargs_only_include_set_fields() -> None:
    assert MessageBuilder(content="hi").to_send_kwargs() == {"content": "hi"}


def test_send_kwargs_include_reply_fields() -> None:
    reference = MagicMock(spec=discord.MessageReference)
    embed = discord.Embed(title="t")
    builder = MessageBuilder(
        content="hi",
        embeds=(embed,),
        reference=reference,
        mention_author=False,
        suppress=True,
    )
    assert builder.to_send_kwargs() == {
        "content": "hi",
        "embeds": [embed],
        "reference": reference,
        "mention_author": False,
        "suppress": True,
    }


def test_followup_kwargs_drop_reply_fields() -> None:
    builder = MessageBuilder(
        content="hi",
        reference=MagicMock(spec=discord.MessageReference),
        mention_author=True,
        suppress=True,
        ephemeral=True,
    )
    assert builder.to_followup_kwargs() == {"content": "hi", "ephemeral": True}


def test_replying_to_returns_copy() -> None:
    message = MagicMock(spec=discord.Message)
    builder = MessageBuilder(content="hi")
    reply = builder.replying_to(message)
    assert reply.reference is message.to_reference.return_value
    assert reply.is_reply
    assert builder.reference is None


def test_without_reply_clears_reference() -> None:
    builder = MessageBuilder(content="hi", reference=MagicMock())
    plain = builder.without_reply()
    assert plain.reference is None
    assert plain.content == "hi"
    assert builder.is_reply


def test_without_reply_on_plain_builder_is_identity() -> None:
    builder = MessageBuilder(content="hi")
    assert builder.without_reply() is builder


@pytest.mark.parametrize("builder", [MessageBuilder(), MessageBuilder(content="")])
def test_empty_builder_is_rejected(builder: MessageBuilder) -> None:
    with pytest.raises(ContextError, match="empty"):
        builder.to_send_kwargs()
    with pytest.raises(ContextError, match="empty"):
        builder.to_followup_kwargs()


def test_embed_only_builder_is_allowed() -> None:
    embed = discord.Embed(description="only an embed")
    assert MessageBuilder(embeds=[embed]).to_send_kwargs() == {"embeds": [embed]}
