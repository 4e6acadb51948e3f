"""
Superbed - uploader plugin for the superbed image host.

Two credential flows:
- Paid: API token, one multipart request for all images
- Free: username/password login, upload ticket, signed batches of 5,
  id -> URL resolution

Usage:
    from superbed import SuperbedPlugin, PluginHost, UploadContext, OutputItem

    plugin = SuperbedPlugin(host)
    plugin.register(registry)

    context = UploadContext(output=[OutputItem(file_name="a.png", buffer=data)])
    await plugin.handle(context)
    print(context.output[0].img_url)
"""
from .errors import (
    InsufficientCredentials,
    LoginFailed,
    ProviderResponseError,
    SuperbedError,
    TransportError,
    UploadFailed,
    UrlResolutionFailed,
)
from .models import (
    BatchResult,
    Credentials,
    Image,
    OutputItem,
    SettingField,
    UploadContext,
    UploadMode,
    UploadTicket,
)
from .orchestrator import UploadOrchestrator
from .plugin import SuperbedPlugin, build_config_schema, create_plugin
from .protocols import PluginHost
from .settings import SuperbedSettings

__version__ = "0.1.0"
__all__ = [
    # Main
    "SuperbedPlugin",
    "UploadOrchestrator",
    "PluginHost",
    "SuperbedSettings",
    "build_config_schema",
    "create_plugin",
    # Models
    "BatchResult",
    "Credentials",
    "Image",
    "OutputItem",
    "SettingField",
    "UploadContext",
    "UploadMode",
    "UploadTicket",
    # Errors
    "InsufficientCredentials",
    "LoginFailed",
    "ProviderResponseError",
    "SuperbedError",
    "TransportError",
    "UploadFailed",
    "UrlResolutionFailed",
]
