"""
Best-effort persistence of viewer settings, reading positions and the AI
service configuration.

Every load falls back to defaults and every save reports failure through its
return value; nothing in here raises into the UI.
"""
import hashlib
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from boxexplorer.utils.logger import logger
from boxexplorer.utils.resource_loader import get_config_dir

DEFAULT_INSTRUCTION = (
    "Explain the selected content, list the key points and the likely context."
)

SETTINGS_FILE = "settings.json"
DOCUMENTS_FILE = "documents.json"
LAST_OPENED_FILE = "last_opened.json"
READING_STATE_FILE = "reading_state.json"
AI_CONFIG_FILE = "ai.json"


@dataclass
class ViewerSettings:
    """User-level viewer preferences, persisted with camelCase keys."""

    mode: str = "single"
    theme: str = "sepia"
    scale_mode: str = "fitWidth"
    manual_scale: float = 1.2
    ai_instruction: str = DEFAULT_INSTRUCTION

    _KEYS = {
        "mode": "mode",
        "theme": "theme",
        "scaleMode": "scale_mode",
        "manualScale": "manual_scale",
        "aiInstruction": "ai_instruction",
    }

    _CHOICES = {
        "mode": ("single", "scroll"),
        "theme": ("sepia", "light", "dark"),
        "scale_mode": ("fitWidth", "manual"),
    }

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in self._KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewerSettings":
        """Merge stored values over the defaults, ignoring unknown keys."""
        settings = cls()
        if not isinstance(data, dict):
            return settings
        for key, attr in cls._KEYS.items():
            if key in data and data[key] is not None:
                setattr(settings, attr, data[key])
        try:
            settings.manual_scale = float(settings.manual_scale)
        except (TypeError, ValueError):
            settings.manual_scale = cls.manual_scale
        for attr, allowed in cls._CHOICES.items():
            if getattr(settings, attr) not in allowed:
                setattr(settings, attr, getattr(cls, attr))
        return settings


def document_fingerprint(data: bytes) -> str:
    """Stable key for per-document state, derived from the file contents."""
    return hashlib.sha1(data).hexdigest()


class SettingsStore:
    """JSON files in the per-user config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else None

    @property
    def config_dir(self) -> Path:
        if self._config_dir is None:
            self._config_dir = get_config_dir()
        return self._config_dir

    # ===== Low-level JSON helpers =====

    def _read_json(self, name: str) -> Optional[Any]:
        path = self.config_dir / name
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to read {path}: {e}")
            return None

    def _write_json(self, name: str, data: Any) -> bool:
        path = self.config_dir / name
        try:
            os.makedirs(path.parent, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.debug(f"Failed to write {path}: {e}")
            return False

    # ===== Viewer settings =====

    def load_settings(self) -> ViewerSettings:
        return ViewerSettings.from_dict(self._read_json(SETTINGS_FILE) or {})

    def save_settings(self, settings: ViewerSettings) -> bool:
        return self._write_json(SETTINGS_FILE, settings.to_dict())

    # ===== Per-document state (keyed by fingerprint) =====

    def load_doc_state(self, doc_key: Optional[str]) -> Optional[Dict[str, Any]]:
        if not doc_key:
            return None
        data = self._read_json(DOCUMENTS_FILE)
        if not isinstance(data, dict):
            return None
        state = data.get(doc_key)
        return state if isinstance(state, dict) else None

    def save_doc_state(self, doc_key: Optional[str], state: Dict[str, Any]) -> bool:
        if not doc_key:
            return False
        data = self._read_json(DOCUMENTS_FILE)
        if not isinstance(data, dict):
            data = {}
        data[doc_key] = state
        return self._write_json(DOCUMENTS_FILE, data)

    # ===== Last opened file and reading position per path =====

    def load_last_opened_path(self) -> Optional[str]:
        data = self._read_json(LAST_OPENED_FILE)
        if not isinstance(data, dict):
            return None
        value = str(data.get("path") or "").strip()
        return value or None

    def save_last_opened_path(self, path: str) -> bool:
        if not path:
            return False
        return self._write_json(LAST_OPENED_FILE, {"path": path})

    def load_last_reading_page(self, path: str) -> Optional[int]:
        if not path or not path.strip():
            return None
        data = self._read_json(READING_STATE_FILE)
        if not isinstance(data, dict):
            return None
        pages = data.get("pages")
        if not isinstance(pages, dict):
            return None
        page = pages.get(path)
        try:
            return int(page) if page is not None else None
        except (TypeError, ValueError):
            return None

    def save_last_reading_page(self, path: str, page: int) -> bool:
        if not path or not path.strip():
            return False
        data = self._read_json(READING_STATE_FILE)
        if not isinstance(data, dict) or not isinstance(data.get("pages"), dict):
            data = {"pages": {}}
        data["pages"][path] = max(1, int(page))
        return self._write_json(READING_STATE_FILE, data)

    # ===== AI service configuration (opaque record) =====

    def load_ai_config(self) -> Dict[str, Any]:
        data = self._read_json(AI_CONFIG_FILE)
        return data if isinstance(data, dict) else {}

    def save_ai_config(self, config: Dict[str, Any]) -> bool:
        return self._write_json(AI_CONFIG_FILE, dict(config))


__all__ = [
    "DEFAULT_INSTRUCTION",
    "SettingsStore",
    "ViewerSettings",
    "document_fingerprint",
]
