"""
Protocols (Interfaces) for host capabilities.

The host application owns HTTP, configuration, notifications and the debug
sink. The plugin only talks to these small interfaces.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

# (field name, (file name, content)) as accepted by httpx ``files=``
FileField = Tuple[str, Tuple[str, bytes]]


@runtime_checkable
class IHttpRequester(Protocol):
    """Interface for raw HTTP requests returning the response body."""

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List[FileField]] = None,
        content: Optional[str] = None,
    ) -> str:
        """Send request, return body text. Raises httpx.HTTPError."""
        ...


@runtime_checkable
class IConfigStore(Protocol):
    """Interface for host configuration storage."""

    def get_config(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    def save_config(self, key: str, value: Dict[str, Any]) -> None:
        ...


@runtime_checkable
class INotifier(Protocol):
    """Interface for user-facing notifications (fire and forget)."""

    def notify(self, title: str, body: str) -> None:
        ...


@runtime_checkable
class IDebugSink(Protocol):
    """Interface for the optional diagnostic channel."""

    @property
    def enabled(self) -> bool:
        ...

    async def emit(self, message: str) -> None:
        ...


@dataclass
class PluginHost:
    """Capability object injected into every pipeline."""
    requester: IHttpRequester
    config_store: IConfigStore
    notifier: INotifier
    debug: IDebugSink


@runtime_checkable
class IUploaderRegistry(Protocol):
    """Interface for the host's uploader registry."""

    def register(self, uploader_id: str, entry: Dict[str, Any]) -> None:
        ...
