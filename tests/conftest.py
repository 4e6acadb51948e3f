"""Shared fakes for superbed tests."""
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import pytest

from superbed.models import OutputItem, UploadContext
from superbed.protocols import PluginHost
from superbed.services.debug_sink import NullDebugSink
from superbed.settings import CONFIG_KEY, SuperbedSettings

UPLOAD_URL = "https://upload.example/upload"


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: Optional[Dict[str, str]]
    data: Optional[Dict[str, Any]]
    files: Optional[list]
    content: Optional[str]

    @property
    def file_names(self) -> List[str]:
        return [file_name for _, (file_name, _) in self.files or []]


class FakeRequester:
    """Records calls; the responder returns a dict, a str or an exception."""

    def __init__(self, responder: Callable[[RecordedCall], Any]):
        self._responder = responder
        self.calls: List[RecordedCall] = []

    async def request(self, method, url, *, headers=None, data=None, files=None, content=None):
        call = RecordedCall(method, url, headers, data, files, content)
        self.calls.append(call)
        result = self._responder(call)
        if isinstance(result, Exception):
            raise result
        return result if isinstance(result, str) else json.dumps(result)


class FakeSuperbed:
    """Scripted provider: ids and URLs are derived from uploaded file names."""

    def __init__(self, login_error: Optional[str] = None, fail_batch: Optional[int] = None,
                 fail_msg: str = "quota exceeded", resolve_as_pairs: bool = False):
        self.login_error = login_error
        self.fail_batch = fail_batch
        self.fail_msg = fail_msg
        self.resolve_as_pairs = resolve_as_pairs
        self.batches: List[List[str]] = []

    def __call__(self, call: RecordedCall):
        if call.url.endswith("/signin"):
            if self.login_error:
                return {"err": 1, "msg": self.login_error}
            return {"err": 0, "user": {"token": "session-token"}}
        if call.url.endswith("/?code=1"):
            return {"err": 0, "url": UPLOAD_URL, "ts": 1700000000, "token": "ticket", "active": True}
        if call.url == UPLOAD_URL:
            self.batches.append(call.file_names)
            if self.fail_batch == len(self.batches):
                return {"err": 1, "msg": self.fail_msg}
            return {
                "err": 0,
                "forward": "fw/" + str(len(self.batches)),
                "ids": [f"id-{name}" for name in call.file_names],
            }
        if "forward=" in call.url:
            ids = parse_qs(urlparse(call.url).query)["ids"][0].split(",")
            results = {}
            for index, image_id in enumerate(ids):
                url = f"https://img.example/{image_id[3:]}"
                results[image_id] = [index, url] if self.resolve_as_pairs else {"url": url}
            return {"err": 0, "results": results}
        if "api.superbed.cn/upload" in call.url:
            return {
                "err": 0,
                "urls": {str(i): f"https://paid.example/{name}" for i, name in enumerate(call.file_names)},
            }
        raise AssertionError(f"unexpected request {call.method} {call.url}")

    @staticmethod
    def upload_calls(requester: FakeRequester) -> List[RecordedCall]:
        return [c for c in requester.calls if c.url == UPLOAD_URL]


class MemoryConfigStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(initial or {})
        self.saved: List[tuple] = []

    def get_config(self, key):
        return self.data.get(key)

    def save_config(self, key, value):
        self.saved.append((key, value))
        self.data[key] = value


class RecordingNotifier:
    def __init__(self):
        self.sent: List[tuple] = []

    def notify(self, title, body):
        self.sent.append((title, body))


def make_host(responder, config: Optional[Dict[str, Any]] = None) -> PluginHost:
    store = MemoryConfigStore({CONFIG_KEY: config} if config is not None else None)
    return PluginHost(
        requester=FakeRequester(responder),
        config_store=store,
        notifier=RecordingNotifier(),
        debug=NullDebugSink(),
    )


def make_context(count: int) -> UploadContext:
    return UploadContext(
        output=[OutputItem(file_name=f"img{i:02d}.png", buffer=f"data-{i}".encode()) for i in range(count)]
    )


@pytest.fixture
def settings():
    return SuperbedSettings()


@pytest.fixture
def provider():
    return FakeSuperbed()
