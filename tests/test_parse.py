from cordcommands.parse import (
    Invocation,
    match_prefix,
    parse_invocation,
    split_command_args,
)


def test_match_prefix_prefers_longest() -> None:
    assert match_prefix("!!ping", ["!", "!!"]) == "!!"
    assert match_prefix("!ping", ["!", "!!"]) == "!"


def test_match_prefix_none() -> None:
    assert match_prefix("ping", ["!"]) is None
    assert match_prefix("ping", [""]) is None


def test_parse_invocation_splits_name_and_arguments() -> None:
    assert parse_invocation("!Echo hello  world", ["!"]) == Invocation(
        prefix="!", command_name="echo", raw_arguments="hello  world"
    )


def test_parse_invocation_without_arguments() -> None:
    assert parse_invocation("?ping", ["!", "?"]) == Invocation(
        prefix="?", command_name="ping", raw_arguments=""
    )


def test_parse_invocation_keeps_newlines_in_arguments() -> None:
    invocation = parse_invocation("!note first\nsecond", ["!"])
    assert invocation is not None
    assert invocation.command_name == "note"
    assert invocation.raw_arguments == "first\nsecond"


def test_parse_invocation_requires_prefix_and_name() -> None:
    assert parse_invocation("hello", ["!"]) is None
    assert parse_invocation("!", ["!"]) is None
    assert parse_invocation("!   ", ["!"]) is None


def test_split_command_args_handles_quotes() -> None:
    assert split_command_args('one "two three" four') == ("one", "two three", "four")


def test_split_command_args_unbalanced_quotes_fall_back() -> None:
    assert split_command_args('say "hi there') == ("say", '"hi', "there")


def test_split_command_args_blank() -> None:
    assert split_command_args("   ") == ()
