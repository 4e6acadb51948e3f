"""Plugin entry: registration, settings form and ``handle``."""
import logging
from typing import Any, Dict, List, Optional

from .models import SettingField, UploadContext
from .orchestrator import UploadOrchestrator
from .protocols import IUploaderRegistry, PluginHost
from .settings import UPLOADER_ID, UPLOADER_NAME, SuperbedSettings
from .use_cases.auth import load_plugin_config

logger = logging.getLogger(__name__)


class SuperbedPlugin:
    """Binds the orchestrator to one host's capabilities."""

    uploader = UPLOADER_ID

    def __init__(self, host: PluginHost, settings: Optional[SuperbedSettings] = None):
        self._host = host
        self._settings = settings or SuperbedSettings()
        self._orchestrator = UploadOrchestrator(host, self._settings)

    def register(self, registry: IUploaderRegistry) -> None:
        registry.register(
            UPLOADER_ID,
            {
                "handle": self.handle,
                "name": UPLOADER_NAME,
                "config": self.config_schema,
            },
        )
        logger.debug("Registered uploader %s", UPLOADER_ID)

    async def handle(self, context: UploadContext) -> UploadContext:
        return await self._orchestrator.handle(context)

    def config_schema(self) -> List[SettingField]:
        """Settings form: three optional fields defaulting to stored values."""
        return build_config_schema(
            load_plugin_config(self._host.config_store, self._settings.config_key)
        )


def build_config_schema(config: Dict[str, Any]) -> List[SettingField]:
    return [
        SettingField(
            name="token",
            type="input",
            message="Paid account: API token (from the user center), used first when set",
            default=config.get("token") or "",
        ),
        SettingField(
            name="username",
            type="input",
            message="Free account: username",
            default=config.get("username") or "",
        ),
        SettingField(
            name="password",
            type="password",
            message="Free account: password",
            default="",
        ),
    ]


def create_plugin(host: PluginHost, settings: Optional[SuperbedSettings] = None) -> SuperbedPlugin:
    return SuperbedPlugin(host, settings)
