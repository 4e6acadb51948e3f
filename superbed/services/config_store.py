"""
JsonConfigStore - Local storage for uploader configuration.

Keeps one JSON document on disk, addressed by dotted keys such as
``picBed.superbed``.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "superbed"
DEFAULT_CONFIG_FILE = "config.json"


class JsonConfigStore:
    """
    Dotted-key configuration stored in a JSON file.

    Implements IConfigStore protocol.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
        self._data: Dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            logger.debug("ConfigStore: No config file at %s, starting fresh", self._path)
            self._data = {}
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                self._data = json.load(f)
            logger.debug("ConfigStore: Loaded %s", self._path)
        except json.JSONDecodeError as e:
            logger.warning("ConfigStore: Failed to parse %s: %s - starting fresh", self._path, e)
            self._data = {}

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
        logger.debug("ConfigStore: Saved %s", self._path)

    def get_config(self, key: str) -> Optional[Dict[str, Any]]:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def save_config(self, key: str, value: Dict[str, Any]) -> None:
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
        self._save()
