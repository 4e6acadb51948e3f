"""Use cases for the free-tier (username/password) upload pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

from superbed.errors import LoginFailed, UploadFailed, UrlResolutionFailed
from superbed.models import BatchResult, Credentials, Image, UploadTicket
from superbed.protocols import PluginHost
from superbed.services.debug_sink import redact_form
from superbed.settings import MAX_BATCH_SIZE, SuperbedSettings
from superbed.use_cases.provider import (
    build_file_fields,
    error_message,
    is_error,
    parse_response,
    sign_request,
)

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def chunk_images(images: Sequence[Image], size: int = MAX_BATCH_SIZE) -> List[List[Image]]:
    """Split images into consecutive batches of at most ``size``."""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    return [list(images[i:i + size]) for i in range(0, len(images), size)]


def build_signed_fields(token: str, ts: Any, nonce: int) -> Dict[str, Any]:
    """Base form fields shared by every batch of one session."""
    return {
        "nonce": nonce,
        "ts": ts,
        "token": token,
        "sign": sign_request(token, ts, nonce),
        "_xsrf": "",
        "endpoints": "superbed",
        "categories": "",
    }


def _extract_url(result: Any) -> Optional[str]:
    if isinstance(result, dict):
        return result.get("url")
    if isinstance(result, (list, tuple)) and len(result) >= 2:
        return result[1]
    return None


class SignInUseCase:
    """Log in with username/password and return the session token."""

    async def execute(
        self, host: PluginHost, settings: SuperbedSettings, credentials: Credentials
    ) -> str:
        await host.debug.emit("signing in")
        body = await host.requester.request(
            "POST",
            settings.signin_url,
            headers=settings.common_headers,
            data={
                "username": credentials.username,
                "password": credentials.password,
                "remember": "on",
            },
        )
        await host.debug.emit(f"signin response: {body}")

        data = parse_response(body)
        if is_error(data):
            raise LoginFailed(error_message(data))

        token = (data.get("user") or {}).get("token")
        if not token:
            raise LoginFailed("no session token in response")
        logger.debug("Signed in as %s", credentials.username)
        return token


class RequestUploadTicketUseCase:
    """Fetch the upload destination for this session."""

    async def execute(
        self, host: PluginHost, settings: SuperbedSettings, session_token: str
    ) -> UploadTicket:
        await host.debug.emit("requesting upload ticket")
        body = await host.requester.request(
            "GET",
            settings.ticket_url,
            headers=settings.session_headers(session_token),
        )
        await host.debug.emit(f"upload ticket: {body}")
        # active is not checked here; a stale ticket fails at upload time.
        return UploadTicket.from_response(parse_response(body))


class UploadBatchUseCase:
    """Upload one batch and return the provider's (forward, ids)."""

    async def execute(
        self,
        host: PluginHost,
        settings: SuperbedSettings,
        session_token: str,
        ticket: UploadTicket,
        base_fields: Dict[str, Any],
        batch: Sequence[Image],
    ) -> Tuple[str, List[str]]:
        files = build_file_fields(batch)
        await host.debug.emit(f"uploading batch to {ticket.url}: {redact_form(base_fields, files)}")
        body = await host.requester.request(
            "POST",
            ticket.url,
            headers=settings.session_headers(session_token),
            data=base_fields,
            files=files,
        )
        await host.debug.emit(f"batch response: {body}")

        data = parse_response(body)
        if is_error(data):
            raise UploadFailed(error_message(data))

        ids = [str(i) for i in data.get("ids") or []]
        if len(ids) != len(batch):
            raise UploadFailed(f"expected {len(batch)} ids, got {len(ids)}")
        return data.get("forward", ""), ids


class ResolveRealUrlsUseCase:
    """Turn provider ids into durable URLs, keeping the ids' order."""

    async def execute(
        self,
        host: PluginHost,
        settings: SuperbedSettings,
        forward: str,
        ids: Sequence[str],
    ) -> BatchResult:
        url = (
            f"{settings.resolve_url}?forward={quote(forward, safe=_URI_COMPONENT_SAFE)}"
            f"&ids={','.join(ids)}"
        )
        await host.debug.emit("resolving real URLs")
        body = await host.requester.request("GET", url, headers=settings.common_headers)
        await host.debug.emit(f"real URLs: {body}")

        data = parse_response(body)
        if is_error(data):
            raise UrlResolutionFailed(error_message(data))

        results = data.get("results") or {}
        entries = []
        for image_id in ids:
            real_url = _extract_url(results.get(image_id))
            if not real_url:
                raise UrlResolutionFailed(f"no URL returned for id {image_id}")
            entries.append((image_id, real_url))
        return BatchResult(entries=tuple(entries))


class FreeUploadUseCase:
    """
    Full free-tier pipeline.

    login -> ticket -> for each batch: upload, resolve. Batches run strictly
    one after another since they share one signed session. The first failure
    aborts the rest; batches already uploaded are not rolled back.
    """

    def __init__(
        self,
        sign_in: Optional[SignInUseCase] = None,
        request_ticket: Optional[RequestUploadTicketUseCase] = None,
        upload_batch: Optional[UploadBatchUseCase] = None,
        resolve_urls: Optional[ResolveRealUrlsUseCase] = None,
    ):
        self._sign_in = sign_in or SignInUseCase()
        self._request_ticket = request_ticket or RequestUploadTicketUseCase()
        self._upload_batch = upload_batch or UploadBatchUseCase()
        self._resolve_urls = resolve_urls or ResolveRealUrlsUseCase()

    async def execute(
        self,
        host: PluginHost,
        settings: SuperbedSettings,
        credentials: Credentials,
        images: Sequence[Image],
    ) -> List[str]:
        if not images:
            return []

        session_token = await self._sign_in.execute(host, settings, credentials)
        ticket = await self._request_ticket.execute(host, settings, session_token)
        base_fields = build_signed_fields(session_token, ticket.ts, settings.nonce)
        await host.debug.emit(f"signed fields: {redact_form(base_fields)}")

        batches = chunk_images(images, settings.batch_size)
        logger.debug("Free upload: %d images in %d batches", len(images), len(batches))

        urls: List[str] = []
        for index, batch in enumerate(batches, start=1):
            forward, ids = await self._upload_batch.execute(
                host, settings, session_token, ticket, base_fields, batch
            )
            result = await self._resolve_urls.execute(host, settings, forward, ids)
            urls.extend(result.urls)
            logger.debug("Batch %d/%d done (%d images)", index, len(batches), len(batch))

        return urls
