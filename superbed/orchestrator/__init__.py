"""Orchestrator package for superbed uploads."""
from .core import UploadOrchestrator
from .handlers import FreeUploadHandler, PaidUploadHandler

__all__ = ["UploadOrchestrator", "FreeUploadHandler", "PaidUploadHandler"]
