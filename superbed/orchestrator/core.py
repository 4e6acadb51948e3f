"""Core orchestrator - the host-facing ``handle`` entry point."""
import json
import logging
from typing import Optional

from ..models import Credentials, UploadContext, UploadMode
from ..protocols import PluginHost
from ..settings import SuperbedSettings
from ..use_cases.auth import ResolveUploadModeUseCase, load_plugin_config
from .handlers import (
    NO_CREDENTIALS_BODY,
    NO_CREDENTIALS_TITLE,
    FreeUploadHandler,
    PaidUploadHandler,
)

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """
    Picks the credential flow and delegates to the matching handler.

    Every failure ends as exactly one notification; nothing propagates to
    the host. Credentials and tickets live only for one ``handle`` call.

    Usage:
        orchestrator = UploadOrchestrator(host)
        await orchestrator.handle(context)
        urls = [item.img_url for item in context.output]
    """

    def __init__(
        self,
        host: PluginHost,
        settings: Optional[SuperbedSettings] = None,
        free_handler: Optional[FreeUploadHandler] = None,
        paid_handler: Optional[PaidUploadHandler] = None,
    ):
        self._host = host
        self._settings = settings or SuperbedSettings()
        self._free_handler = free_handler or FreeUploadHandler(host, self._settings)
        self._paid_handler = paid_handler or PaidUploadHandler(host, self._settings)

    async def handle(self, context: UploadContext) -> UploadContext:
        config = load_plugin_config(self._host.config_store, self._settings.config_key)
        credentials = Credentials.from_config(config)
        await self._host.debug.emit(f"user config: {_redacted_config(credentials)}")

        mode = ResolveUploadModeUseCase.execute(credentials)
        logger.debug("Upload mode: %s (%d items)", mode.value, len(context.output))

        if mode is UploadMode.NONE:
            self._host.notifier.notify(NO_CREDENTIALS_TITLE, NO_CREDENTIALS_BODY)
            return context

        if not context.output:
            return context

        if mode is UploadMode.PAID:
            await self._paid_handler.upload(context, credentials)
        else:
            await self._free_handler.upload(context, credentials)
        return context


def _redacted_config(credentials: Credentials) -> str:
    return json.dumps(
        {
            "token": "***" if credentials.token else "",
            "username": credentials.username,
            "password": "***" if credentials.password else "",
        }
    )
