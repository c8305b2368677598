from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class AiConfig:
    """Completion service settings, persisted as ``ai.json``."""

    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    temperature: Optional[float] = 0.2
    max_tokens: Optional[int] = 1024
    show_boxes: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AiConfig":
        """Merge a stored record over the defaults, ignoring unknown keys."""
        config = cls()
        if not isinstance(data, dict):
            return config

        for key in ("model", "base_url", "api_key"):
            value = data.get(key)
            if isinstance(value, str):
                setattr(config, key, value)

        if "temperature" in data:
            config.temperature = _optional_number(data["temperature"], float)
        if "max_tokens" in data:
            config.max_tokens = _optional_number(data["max_tokens"], int)
        if "show_boxes" in data:
            config.show_boxes = bool(data["show_boxes"])

        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def is_complete(self) -> bool:
        """Endpoint, credential and model are all set."""
        return bool(self.api_key and self.base_url and self.model)

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"


def _optional_number(value: Any, kind):
    if value is None or value == "":
        return None
    try:
        return kind(value)
    except (TypeError, ValueError):
        return None
