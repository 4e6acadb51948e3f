"""Notification sinks for standalone use."""
import logging
from typing import List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Render notifications as rich panels and keep them for inspection."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(stderr=True)
        self.sent: List[Tuple[str, str]] = []

    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        logger.warning("Notification: %s", title)
        self._console.print(Panel(body, title=title, border_style="red"))
