"""Error taxonomy for superbed uploads."""
import httpx

# Transport failures come straight from httpx and are never wrapped.
TransportError = httpx.HTTPError


class SuperbedError(Exception):
    """Base class for provider and account errors."""


class InsufficientCredentials(SuperbedError):
    """Neither a token nor a username/password pair is configured."""

    def __init__(self, message: str = "token or username/password required"):
        super().__init__(message)


class LoginFailed(SuperbedError):
    """Provider rejected the username/password login."""

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(f"Login failed: {msg}")


class UploadFailed(SuperbedError):
    """Provider rejected an upload request."""

    prefix = "Upload failed"

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(f"{self.prefix}: {msg}")


class UrlResolutionFailed(UploadFailed):
    """Uploaded ids could not be resolved into URLs."""

    prefix = "Resolving real URLs failed"


class ProviderResponseError(UploadFailed):
    """Provider answered with something that is not the expected JSON."""

    prefix = "Unexpected provider response"
