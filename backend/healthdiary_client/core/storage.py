"""
Health Diary Client — Session Storage
======================================

What:  Two string key/value stores standing in for the browser's
       localStorage (token, user) and sessionStorage (one-shot banners).
How:   `local` is written through to a JSON file when a path is configured,
       so a login survives restarts; `session` only ever lives in memory.
"""

import json
import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore:

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._data: Dict[str, str] = {}
        if path:
            self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, str(e))
            return
        if isinstance(data, dict):
            self._data = {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        if not self.path:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._save()

    def pop(self, key: str) -> Optional[str]:
        """Read and remove in one step (used for one-shot banners)."""
        value = self._data.pop(key, None)
        if value is not None:
            self._save()
        return value

    def clear(self) -> None:
        self._data.clear()
        self._save()

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SessionStore:
    """`local` persists token and user; `session` holds per-run messages."""

    TOKEN_KEY = "token"
    USER_KEY = "user"

    LOGIN_ERROR_KEY = "loginError"
    REGISTER_ERROR_KEY = "registerError"
    REGISTRATION_SUCCESS_KEY = "registrationSuccess"

    def __init__(self, storage_path: Optional[str] = None):
        self.local = KeyValueStore(storage_path)
        self.session = KeyValueStore()
