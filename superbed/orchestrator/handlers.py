"""Per-mode upload handlers: run the pipeline, assign URLs or notify."""
import logging
import traceback
from typing import List, Optional

from ..models import Credentials, UploadContext
from ..protocols import PluginHost
from ..settings import SuperbedSettings
from ..use_cases.free_upload import FreeUploadUseCase
from ..use_cases.paid_upload import PaidUploadUseCase

logger = logging.getLogger(__name__)

FAILURE_TITLE = "Superbed upload failed"
NO_CREDENTIALS_TITLE = "Superbed upload failed: insufficient credentials"
NO_CREDENTIALS_BODY = (
    "Provide a token (paid account) or a username and password (free account)."
)


def _assign_urls(context: UploadContext, urls: List[str]) -> None:
    for item, url in zip(context.output, urls):
        item.img_url = url


class FreeUploadHandler:
    """Handles username/password uploads."""

    def __init__(
        self,
        host: PluginHost,
        settings: SuperbedSettings,
        use_case: Optional[FreeUploadUseCase] = None,
    ):
        self._host = host
        self._settings = settings
        self._use_case = use_case or FreeUploadUseCase()

    async def upload(self, context: UploadContext, credentials: Credentials) -> bool:
        await self._host.debug.emit("free account upload")
        try:
            urls = await self._use_case.execute(
                self._host, self._settings, credentials, context.images
            )
        except Exception as exc:
            logger.error("Free upload failed: %s", exc, exc_info=True)
            self._host.notifier.notify(FAILURE_TITLE, f"{exc}\n{traceback.format_exc()}")
            return False

        # Nothing is assigned until every batch resolved.
        _assign_urls(context, urls)
        return True


class PaidUploadHandler:
    """Handles API token uploads."""

    def __init__(
        self,
        host: PluginHost,
        settings: SuperbedSettings,
        use_case: Optional[PaidUploadUseCase] = None,
    ):
        self._host = host
        self._settings = settings
        self._use_case = use_case or PaidUploadUseCase()

    async def upload(self, context: UploadContext, credentials: Credentials) -> bool:
        await self._host.debug.emit("paid account upload")
        try:
            urls = await self._use_case.execute(
                self._host, self._settings, credentials.token, context.images
            )
        except Exception as exc:
            logger.error("Paid upload failed: %s", exc, exc_info=True)
            self._host.notifier.notify(FAILURE_TITLE, f"{type(exc).__name__}: {exc}")
            return False

        _assign_urls(context, urls)
        return True
