"""Durable token storage for the Auth Rocket client"""

import json
import logging
import os
import platform
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from .constants import TOKEN_KEY


logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String key-value store that may be unavailable in some environments

    Implementations must treat every operation as a no-op when
    ``is_available()`` is False.
    """

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> bool:
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        pass


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store, lost when the process exits"""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def is_available(self) -> bool:
        return True

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True


class FileKeyValueStore(KeyValueStore):
    """Store backed by a JSON object in a private file"""

    def __init__(self, path: Optional[Path] = None):
        """Initialize file storage

        Args:
            path: Path to the store file (default: ~/.auth-rocket/storage.json)
        """
        if path is None:
            path = Path.home() / ".auth-rocket" / "storage.json"

        self.path = Path(path)

    def is_available(self) -> bool:
        """Check that the store directory exists (creating it if needed) and is writable"""
        parent_dir = self.path.parent
        try:
            if not parent_dir.exists():
                parent_dir.mkdir(parents=True, exist_ok=True)
                if platform.system() != "Windows":
                    os.chmod(parent_dir, 0o700)
        except OSError as e:
            logger.debug(f"Store directory {parent_dir} unavailable: {e}")
            return False

        return os.access(parent_dir, os.W_OK)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to read store file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed store file {self.path}")
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> bool:
        try:
            self.path.write_text(json.dumps(data, indent=2))
            if platform.system() != "Windows":
                self.path.chmod(0o600)
        except OSError as e:
            logger.error(f"Failed to write store file {self.path}: {e}")
            return False
        return True

    def get(self, key: str) -> Optional[str]:
        if not self.is_available():
            return None
        return self._read().get(key)

    def set(self, key: str, value: str) -> bool:
        if not self.is_available():
            return False
        data = self._read()
        data[key] = value
        return self._write(data)

    def remove(self, key: str) -> bool:
        if not self.is_available():
            return False
        data = self._read()
        if key not in data:
            return True
        del data[key]
        return self._write(data)


class TokenStorage:
    """Persists the bearer token under a fixed key"""

    def __init__(self, store: Optional[KeyValueStore] = None, key: str = TOKEN_KEY):
        """Initialize token storage

        Args:
            store: Backing key-value store (file store in the default location if None)
            key: Key the token is stored under
        """
        self.store = store or FileKeyValueStore()
        self.key = key

    def save_token(self, token: str) -> bool:
        """Persist the token

        Returns:
            True if the token was written
        """
        saved = self.store.set(self.key, token)
        if saved:
            logger.debug("Saved auth token")
        else:
            logger.warning("Auth token was not persisted, store unavailable")
        return saved

    def get_token(self) -> Optional[str]:
        return self.store.get(self.key)

    def has_token(self) -> bool:
        return bool(self.get_token())

    def clear_token(self) -> bool:
        """Remove the stored token

        Returns:
            True if nothing is left stored under the key
        """
        cleared = self.store.remove(self.key)
        if cleared:
            logger.debug("Cleared auth token")
        return cleared
