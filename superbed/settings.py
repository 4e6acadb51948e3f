"""Provider constants and tunables."""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

CONFIG_KEY = "picBed.superbed"
UPLOADER_ID = "superbed"
UPLOADER_NAME = "Superbed"

SIGN_NONCE = 646703147
MAX_BATCH_SIZE = 5


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SuperbedSettings:
    """Immutable configuration for provider endpoints and request shapes."""
    site_url: str = "https://www.superbed.cn"
    api_url: str = "https://api.superbed.cn"
    user_agent: str = "Mozilla/5.0"
    referrer: str = "https://www.superbed.cn/"
    nonce: int = SIGN_NONCE
    batch_size: int = MAX_BATCH_SIZE
    timeout: float = 60.0
    debug_enabled: bool = False
    debug_url: str = "http://127.0.0.1:3000/"
    config_key: str = CONFIG_KEY
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def signin_url(self) -> str:
        return f"{self.site_url}/signin"

    @property
    def ticket_url(self) -> str:
        return f"{self.site_url}/?code=1"

    @property
    def resolve_url(self) -> str:
        return f"{self.site_url}/"

    @property
    def paid_upload_url(self) -> str:
        return f"{self.api_url}/upload"

    @property
    def common_headers(self) -> Dict[str, str]:
        # Provider rejects requests carrying default client headers.
        headers = {"User-Agent": self.user_agent, "Referrer": self.referrer}
        headers.update(self.extra_headers)
        return headers

    def session_headers(self, token: str) -> Dict[str, str]:
        return {"Cookie": f"token={token}", **self.common_headers}

    @classmethod
    def from_env(cls, debug: Optional[bool] = None) -> "SuperbedSettings":
        """Build settings from SUPERBED_* environment variables."""
        defaults = cls()
        timeout = os.getenv("SUPERBED_TIMEOUT")
        return cls(
            site_url=os.getenv("SUPERBED_SITE_URL", defaults.site_url).rstrip("/"),
            api_url=os.getenv("SUPERBED_API_URL", defaults.api_url).rstrip("/"),
            timeout=float(timeout) if timeout else defaults.timeout,
            debug_enabled=debug if debug is not None else _env_bool("SUPERBED_DEBUG"),
            debug_url=os.getenv("SUPERBED_DEBUG_URL", defaults.debug_url),
        )
