# dripdesk_ui/notifications.py
"""
Transient success/error messages.
Pages receive a notifier instead of calling the UI toolkit directly.
"""

import logging
from typing import Protocol

import gradio as gr

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class GradioNotifier:
    """Shows messages as Gradio toasts."""

    def success(self, message: str) -> None:
        if not message:
            return
        logger.info(message)
        gr.Info(message)

    def error(self, message: str) -> None:
        if not message:
            return
        logger.warning(message)
        gr.Warning(message)


class RecordingNotifier:
    """Keeps messages in memory, for headless use."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        if message:
            logger.info(message)
            self.messages.append(("success", message))

    def error(self, message: str) -> None:
        if message:
            logger.warning(message)
            self.messages.append(("error", message))

    @property
    def errors(self) -> list[str]:
        return [m for kind, m in self.messages if kind == "error"]

    @property
    def successes(self) -> list[str]:
        return [m for kind, m in self.messages if kind == "success"]
