"""Optional diagnostic channel posting request traces to a local collector."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from ..protocols import FileField, IHttpRequester

logger = logging.getLogger(__name__)


def redact_form(data: Optional[Dict[str, Any]], files: Optional[List[FileField]] = None) -> str:
    """Render form fields as JSON with file bodies replaced by placeholders."""
    rendered: Dict[str, Any] = dict(data or {})
    for name, (file_name, content) in files or []:
        rendered[name] = f"<file name={file_name} size={len(content)}>"
    return json.dumps(rendered, ensure_ascii=False, default=str)


class DebugSink:
    """
    Posts plain-text traces to a collector URL when enabled.

    Implements IDebugSink protocol. Disabled sinks never touch the network.
    """

    def __init__(self, requester: IHttpRequester, url: str, enabled: bool = False):
        self._requester = requester
        self._url = url
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def emit(self, message: str) -> None:
        if not self._enabled:
            return
        try:
            await self._requester.request(
                "POST",
                self._url,
                headers={"Content-Type": "text/plain"},
                content=message,
            )
        except Exception as e:
            logger.debug("DebugSink: failed to deliver trace: %s", e)


class NullDebugSink:
    """Debug sink that drops everything."""

    enabled = False

    async def emit(self, message: str) -> None:
        return None
