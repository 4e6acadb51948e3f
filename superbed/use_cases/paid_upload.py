"""Use case for the paid-tier (API token) upload."""
from __future__ import annotations

import logging
from typing import Any, List, Sequence
from urllib.parse import urlencode

from superbed.errors import UploadFailed
from superbed.models import Image
from superbed.protocols import PluginHost
from superbed.services.debug_sink import redact_form
from superbed.settings import SuperbedSettings
from superbed.use_cases.provider import build_file_fields, error_message, is_error, parse_response

logger = logging.getLogger(__name__)


def extract_paid_urls(urls: Any) -> List[str]:
    """
    Flatten the response's ``urls`` into an ordered list.

    The provider returns a mapping; its values are taken in response order
    and matched to images by position. That order is not documented.
    """
    if isinstance(urls, dict):
        return [str(u) for u in urls.values()]
    if isinstance(urls, (list, tuple)):
        return [str(u) for u in urls]
    raise UploadFailed(f"unexpected urls payload: {urls!r}")


class PaidUploadUseCase:
    """Upload every image in one token-authenticated request."""

    async def execute(
        self,
        host: PluginHost,
        settings: SuperbedSettings,
        token: str,
        images: Sequence[Image],
    ) -> List[str]:
        if not images:
            return []

        # No batch cap observed on the paid endpoint.
        files = build_file_fields(images)
        await host.debug.emit(f"paid upload: {redact_form(None, files)}")
        body = await host.requester.request(
            "POST",
            f"{settings.paid_upload_url}?{urlencode({'token': token})}",
            files=files,
        )
        await host.debug.emit(f"paid upload response: {body}")

        data = parse_response(body)
        if is_error(data):
            raise UploadFailed(error_message(data))

        urls = extract_paid_urls(data.get("urls") or {})
        if len(urls) != len(images):
            raise UploadFailed(f"expected {len(images)} urls, got {len(urls)}")

        logger.debug("Paid upload: %d images done", len(urls))
        return urls
