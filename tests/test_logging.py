import json
import logging

import structlog

from cordcommands.logging import get_logger, redact_tokens, setup_logging

TOKEN = "MTA5ODc2NTQzMjEwOTg3NjU0Mw.GaBcDe.abcdefghijklmnopqrstuvwxyz0123"


def test_redact_tokens_scrubs_string_values() -> None:
    event = {"event": f"login with {TOKEN}", "count": 3}
    result = redact_tokens(None, "info", event)
    assert TOKEN not in result["event"]
    assert "***REDACTED***" in result["event"]
    assert result["count"] == 3


def test_redact_tokens_leaves_plain_text() -> None:
    event = {"event": "command.failed", "command": "echo"}
    assert redact_tokens(None, "info", dict(event)) == event


def test_setup_logging_sets_levels() -> None:
    try:
        setup_logging(debug=True)
        assert logging.getLogger().level == logging.DEBUG
        setup_logging()
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("discord").level == logging.WARNING
    finally:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()


def test_get_logger_returns_bindable_logger() -> None:
    logger = get_logger(__name__)
    assert hasattr(logger, "bind")


def test_json_logging_renders_redacted_traceback(capsys) -> None:
    try:
        setup_logging(json=True)
        logger = get_logger("cordcommands.tests")
        try:
            raise ValueError(f"login failed for {TOKEN}")
        except ValueError:
            logger.exception("command.failed", command="echo")
        line = capsys.readouterr().err.strip().splitlines()[-1]
    finally:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    payload = json.loads(line)
    assert payload["event"] == "command.failed"
    assert "exc_info" not in payload
    assert "Traceback" in payload["exception"]
    assert "ValueError" in payload["exception"]
    assert TOKEN not in line
    assert "***REDACTED***" in payload["exception"]
