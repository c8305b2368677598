"""
Dialog editing the completion service settings.
"""

import math
from typing import Optional

from PyQt5.QtWidgets import (
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)

from ...core.annotation import AiConfig


def parse_optional_float(text: str) -> Optional[float]:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_optional_int(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


class AiConfigDialog(QDialog):
    """Form over an :class:`AiConfig`; blank numeric fields mean "not sent"."""

    def __init__(self, config: AiConfig, parent=None):
        super().__init__(parent)
        self.setWindowTitle("AI settings")
        self.setMinimumWidth(420)
        self._setup_ui()
        self.fill(config)

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        form = QFormLayout()
        self.model_input = QLineEdit(self)
        form.addRow("Model", self.model_input)

        self.base_url_input = QLineEdit(self)
        self.base_url_input.setPlaceholderText("https://api.openai.com/v1")
        form.addRow("Base URL", self.base_url_input)

        self.api_key_input = QLineEdit(self)
        self.api_key_input.setEchoMode(QLineEdit.Password)
        form.addRow("API key", self.api_key_input)

        self.temperature_input = QLineEdit(self)
        self.temperature_input.setPlaceholderText("blank: service default")
        form.addRow("Temperature", self.temperature_input)

        self.max_tokens_input = QLineEdit(self)
        self.max_tokens_input.setPlaceholderText("blank: service default")
        form.addRow("Max tokens", self.max_tokens_input)

        self.show_boxes_input = QCheckBox("Show glyph boxes", self)
        form.addRow("", self.show_boxes_input)

        layout.addLayout(form)

        hint = QLabel("Settings are stored in the application config directory.", self)
        hint.setObjectName("statusLabel")
        layout.addWidget(hint)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel, self)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def fill(self, config: AiConfig):
        self.model_input.setText(config.model)
        self.base_url_input.setText(config.base_url)
        self.api_key_input.setText(config.api_key)
        self.temperature_input.setText("" if config.temperature is None else str(config.temperature))
        self.max_tokens_input.setText("" if config.max_tokens is None else str(config.max_tokens))
        self.show_boxes_input.setChecked(config.show_boxes)

    def get_config(self) -> AiConfig:
        return AiConfig(
            model=self.model_input.text().strip(),
            base_url=self.base_url_input.text().strip(),
            api_key=self.api_key_input.text().strip(),
            temperature=parse_optional_float(self.temperature_input.text()),
            max_tokens=parse_optional_int(self.max_tokens_input.text()),
            show_boxes=self.show_boxes_input.isChecked(),
        )
