"""Tests for the denied-authorization handlers."""

import logging
from unittest.mock import MagicMock

from locationbroker.denial import (
    DEFAULT_PROMPT_MESSAGE,
    DEFAULT_PROMPT_TITLE,
    SettingsPromptHandler,
    SettingsPromptRequest,
    invoke_denied_handler,
    log_settings_prompt,
)


def test_settings_prompt_handler_default_message():
    prompt = MagicMock()
    SettingsPromptHandler(prompt)()
    prompt.assert_called_once_with(SettingsPromptRequest(title=DEFAULT_PROMPT_TITLE, message=DEFAULT_PROMPT_MESSAGE))


def test_settings_prompt_handler_custom_message():
    prompt = MagicMock()
    SettingsPromptHandler(prompt, message="Turn on GPS")()
    assert prompt.call_args.args[0].message == "Turn on GPS"


def test_log_settings_prompt(caplog):
    with caplog.at_level(logging.WARNING, logger="locationbroker"):
        log_settings_prompt(SettingsPromptRequest(title="Enable", message="Go to settings"))
    assert "Enable: Go to settings" in caplog.text


def test_invoke_denied_handler_swallows_errors(caplog):
    handler = MagicMock(side_effect=RuntimeError("alert failed"))
    with caplog.at_level(logging.ERROR, logger="locationbroker"):
        invoke_denied_handler(handler)
    handler.assert_called_once_with()
    assert "alert failed" in caplog.text
