"""
Models for superbed plugin.

Immutable dataclasses for provider payloads, mutable ones only where the
host hands us state to fill in.
"""
import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class UploadMode(Enum):
    """Which credential flow an upload goes through."""
    FREE = "free"
    PAID = "paid"
    NONE = "none"


@dataclass(frozen=True)
class Credentials:
    """Stored account credentials. Token (paid) takes precedence."""
    token: str = ""
    username: str = ""
    password: str = ""

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "Credentials":
        config = config or {}
        return cls(
            token=config.get("token") or "",
            username=config.get("username") or "",
            password=config.get("password") or "",
        )

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @property
    def has_login(self) -> bool:
        return bool(self.username) and bool(self.password)


@dataclass(frozen=True)
class Image:
    """Image buffer ready to be sent as a multipart file field."""
    buffer: bytes
    file_name: str

    @property
    def size(self) -> int:
        return len(self.buffer)


@dataclass
class OutputItem:
    """Host-owned item; ``img_url`` is filled on success."""
    file_name: str
    buffer: Optional[bytes] = None
    base64_image: Optional[str] = None
    img_url: Optional[str] = None

    def to_image(self) -> Image:
        body = self.buffer
        if not body and self.base64_image:
            body = base64.b64decode(self.base64_image)
        return Image(buffer=body or b"", file_name=f"{self.file_name}")


@dataclass
class UploadContext:
    """Per-invocation context handed over by the host."""
    output: List[OutputItem] = field(default_factory=list)

    @property
    def images(self) -> List[Image]:
        return [item.to_image() for item in self.output]


@dataclass(frozen=True)
class UploadTicket:
    """Short-lived upload destination issued per session (free tier)."""
    url: str
    ts: int
    token: str
    active: bool = False

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "UploadTicket":
        return cls(
            url=data.get("url", ""),
            ts=data.get("ts", 0),
            token=data.get("token", ""),
            active=bool(data.get("active", False)),
        )


@dataclass(frozen=True)
class BatchResult:
    """Ordered (id, url) pairs for one uploaded chunk."""
    entries: Tuple[Tuple[str, str], ...]

    @property
    def urls(self) -> List[str]:
        return [url for _, url in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class SettingField:
    """One field of the host's settings form."""
    name: str
    type: str
    message: str
    required: bool = False
    default: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "message": self.message,
            "required": self.required,
            "default": self.default,
        }
