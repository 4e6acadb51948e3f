"""Concrete host capabilities for superbed plugin."""
from .config_store import JsonConfigStore
from .debug_sink import DebugSink, NullDebugSink, redact_form
from .http_client import HTTPRequester
from .notifier import ConsoleNotifier

__all__ = [
    "ConsoleNotifier",
    "DebugSink",
    "HTTPRequester",
    "JsonConfigStore",
    "NullDebugSink",
    "redact_form",
]
