"""
Request construction for the completion service.
"""

import json
from typing import Any, Dict, List, Sequence

from ..selection.models import SelectionEntry
from ..selection.text_reconstructor import build_selected_text
from .config import AiConfig
from .errors import AnnotationConfigError

MISSING_SELECTION = "Select some content first."
MISSING_CONFIG = "Configure the AI service first (AI settings)."
EMPTY_TEXT = "The selected text is empty, nothing to analyse."


def build_meta(entries: Sequence[SelectionEntry]) -> Dict[str, Any]:
    """Distinct pages touched by the selection and its size."""
    return {"pages": sorted({e.page for e in entries}), "count": len(entries)}


def build_user_content(text: str, meta: Dict[str, Any]) -> str:
    meta_json = json.dumps(meta, ensure_ascii=False, separators=(",", ":"))
    return f"【Selected content】\n{text or '—'}\n\n【Meta】\n{meta_json}"


def build_messages(instruction: str, text: str, meta: Dict[str, Any]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": instruction},
        {"role": "user", "content": build_user_content(text, meta)},
    ]


def build_request_body(config: AiConfig, instruction: str, text: str, meta: Dict[str, Any]) -> Dict[str, Any]:
    """
    Chat-completions body with streaming enabled.

    ``temperature`` and ``max_tokens`` are left out when unset.
    """
    body: Dict[str, Any] = {
        "model": config.model,
        "messages": build_messages(instruction, text, meta),
    }
    if config.temperature is not None:
        body["temperature"] = config.temperature
    if config.max_tokens is not None:
        body["max_tokens"] = config.max_tokens
    body["stream"] = True
    return body


def build_headers(config: AiConfig) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key}",
    }


def build_request(
    config: AiConfig,
    instruction: str,
    entries: Sequence[SelectionEntry],
    default_instruction: str = "",
):
    """
    Validate inputs and assemble ``(url, headers, body)``.

    Raises:
        AnnotationConfigError: empty selection, incomplete service settings,
            or a selection that reconstructs to blank text
    """
    if not entries:
        raise AnnotationConfigError(MISSING_SELECTION)
    if not config.is_complete:
        raise AnnotationConfigError(MISSING_CONFIG)

    text = build_selected_text(entries)
    if not text.strip():
        raise AnnotationConfigError(EMPTY_TEXT)

    instruction = (instruction or "").strip() or default_instruction
    body = build_request_body(config, instruction, text, build_meta(entries))
    return config.completions_url, build_headers(config), body
