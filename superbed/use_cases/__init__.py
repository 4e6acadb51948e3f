"""Application use cases for superbed upload workflows."""

from .auth import DEFAULT_CONFIG, ResolveUploadModeUseCase, load_plugin_config
from .free_upload import (
    FreeUploadUseCase,
    RequestUploadTicketUseCase,
    ResolveRealUrlsUseCase,
    SignInUseCase,
    UploadBatchUseCase,
    build_signed_fields,
    chunk_images,
)
from .paid_upload import PaidUploadUseCase, extract_paid_urls
from .provider import build_file_fields, parse_response, sign_request

__all__ = [
    "DEFAULT_CONFIG",
    "ResolveUploadModeUseCase",
    "load_plugin_config",
    "FreeUploadUseCase",
    "RequestUploadTicketUseCase",
    "ResolveRealUrlsUseCase",
    "SignInUseCase",
    "UploadBatchUseCase",
    "build_signed_fields",
    "chunk_images",
    "PaidUploadUseCase",
    "extract_paid_urls",
    "build_file_fields",
    "parse_response",
    "sign_request",
]
