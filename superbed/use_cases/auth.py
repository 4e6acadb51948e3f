"""Credential loading and upload mode resolution."""
from __future__ import annotations

import logging
from typing import Any, Dict

from superbed.models import Credentials, UploadMode
from superbed.protocols import IConfigStore

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, str] = {"token": "", "username": "", "password": ""}


def load_plugin_config(config_store: IConfigStore, key: str) -> Dict[str, Any]:
    """Return stored config, writing the empty default when none exists."""
    config = config_store.get_config(key)
    if config is None:
        logger.info("No stored config under %s, initializing defaults", key)
        config = dict(DEFAULT_CONFIG)
        config_store.save_config(key, config)
    return config


class ResolveUploadModeUseCase:
    """Pick the credential flow; a token always wins."""

    @staticmethod
    def execute(credentials: Credentials) -> UploadMode:
        if credentials.has_token:
            return UploadMode.PAID
        if credentials.has_login:
            return UploadMode.FREE
        return UploadMode.NONE
