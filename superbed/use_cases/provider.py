"""Shared helpers for talking to the provider's JSON endpoints."""
from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List, Sequence

from superbed.errors import ProviderResponseError
from superbed.models import Image
from superbed.protocols import FileField


def parse_response(body: str) -> Dict[str, Any]:
    """Decode a provider response body; every valid body carries ``err``."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as exc:
        raise ProviderResponseError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict) or "err" not in data:
        raise ProviderResponseError(f"missing err field in {body[:200]!r}")
    return data


def is_error(data: Dict[str, Any]) -> bool:
    return data.get("err") != 0


def error_message(data: Dict[str, Any]) -> str:
    return str(data.get("msg") or f"err={data.get('err')}")


def sign_request(token: str, ts: Any, nonce: int) -> str:
    """Lowercase hex MD5 of ``token_ts_nonce``."""
    return hashlib.md5(f"{token}_{ts}_{nonce}".encode("utf-8")).hexdigest()


def build_file_fields(images: Sequence[Image]) -> List[FileField]:
    """One ``file{i}`` multipart field per image, keyed by position."""
    return [(f"file{i}", (image.file_name, image.buffer)) for i, image in enumerate(images)]
