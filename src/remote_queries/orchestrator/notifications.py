"""Notifier used when no interactive user surface is attached."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Routes user messages to the log.

    ``open_results`` is the fixed answer given to action prompts.
    """

    def __init__(self, *, open_results: bool = False) -> None:
        self.open_results = open_results

    async def show_and_log_error_message(self, message: str) -> None:
        logger.error(message)

    async def show_information_message_with_action(self, message: str, action: str) -> bool:
        logger.info("%s [%s: %s]", message, action, "yes" if self.open_results else "no")
        return self.open_results
