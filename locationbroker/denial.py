"""Reaction to a denied location authorization.

The broker calls a zero-argument ``DeniedAuthorizationHandler`` whenever it
sees a denial. The default handler asks a settings-prompt collaborator to
invite the user to re-enable access in the system settings; the collaborator
is injected so the broker never depends on a UI.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from locationbroker.logging import LOCATIONBROKER_LOGGER

DeniedAuthorizationHandler = Callable[[], None]

DEFAULT_PROMPT_TITLE = "Enable Location Access"
DEFAULT_PROMPT_MESSAGE = (
    "The location access for this app is set to 'never'. "
    "Enable location access in the application settings. Go to Settings now?"
)


@dataclass(frozen=True)
class SettingsPromptRequest:
    """What the settings prompt should show."""

    title: str
    message: str


SettingsPrompt = Callable[[SettingsPromptRequest], None]


class SettingsPromptHandler:
    """Default denial handler: forwards to a settings-prompt collaborator."""

    def __init__(self, prompt: SettingsPrompt, message: Optional[str] = None, title: str = DEFAULT_PROMPT_TITLE):
        self.prompt = prompt
        self.request = SettingsPromptRequest(title=title, message=message or DEFAULT_PROMPT_MESSAGE)

    def __call__(self) -> None:
        self.prompt(self.request)


def log_settings_prompt(request: SettingsPromptRequest) -> None:
    """Settings prompt for headless use: the message goes to the log."""
    LOCATIONBROKER_LOGGER.warning(f"{request.title}: {request.message}")


def invoke_denied_handler(handler: DeniedAuthorizationHandler) -> None:
    """Call ``handler``; failures are logged and never propagate."""
    try:
        handler()
    except Exception as e:
        LOCATIONBROKER_LOGGER.error(f"Denied-authorization handler failed: {e}", exc_info=True)
