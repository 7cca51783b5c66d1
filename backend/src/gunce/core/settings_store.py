"""
User settings persistence.

Settings (reminder preferences, password protection, the stored password
hash) live in a small JSON file next to the local database. A SettingsStore
instance is created once per process and injected wherever it is needed.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..schemas.settings import UserSettings, UserSettingsUpdate
from .exceptions import ConfigurationError
from .logging import get_logger

logger = get_logger(__name__)


class SettingsStore:
    """Load-on-start, save-on-change store for user settings."""

    def __init__(self, path: Optional[str | Path] = None, initial: Optional[UserSettings] = None):
        self.path = Path(path) if path else None
        self._settings = initial or UserSettings()
        self._password_hash: Optional[str] = None

    @classmethod
    def load(cls, path: str | Path) -> "SettingsStore":
        """Read settings from disk; a missing file yields defaults."""
        store = cls(path)
        if not store.path.exists():
            logger.info(f"Settings file {store.path} not found, using defaults")
            return store

        try:
            raw = json.loads(store.path.read_text(encoding="utf-8"))
            store._settings = UserSettings(**raw.get("settings", {}))
            store._password_hash = raw.get("password_hash")
        except (OSError, ValueError, PydanticValidationError) as e:
            raise ConfigurationError(f"Settings file {store.path} is unreadable: {e}") from e

        logger.info(f"Loaded settings from {store.path}")
        return store

    @property
    def settings(self) -> UserSettings:
        return self._settings

    @property
    def password_hash(self) -> Optional[str]:
        return self._password_hash

    @property
    def password_protection(self) -> bool:
        return self._settings.password_protection and self._password_hash is not None

    def update(self, changes: UserSettingsUpdate | Dict[str, Any]) -> UserSettings:
        """Apply a partial update and persist it."""
        if isinstance(changes, UserSettingsUpdate):
            changes = changes.model_dump(exclude_unset=True)
        merged = self._settings.model_dump()
        merged.update(changes)
        self._settings = UserSettings(**merged)
        self.save()
        return self._settings

    def set_password_hash(self, password_hash: Optional[str]) -> None:
        """Store (or clear) the login password hash and toggle protection accordingly."""
        self._password_hash = password_hash
        self._settings = self._settings.model_copy(update={"password_protection": password_hash is not None})
        self.save()

    def save(self) -> None:
        """Write settings atomically; in-memory stores (no path) are a no-op."""
        if self.path is None:
            return

        payload = {"settings": self._settings.model_dump(mode="json"), "password_hash": self._password_hash}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise ConfigurationError(f"Settings file {self.path} could not be written: {e}") from e
        logger.debug(f"Saved settings to {self.path}")
