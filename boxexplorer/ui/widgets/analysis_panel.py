"""
Side panel: selection preview, instruction editor and AI output.
"""

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import (
    QFrame,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
)


class AnalysisPanel(QFrame):
    """Shows the reconstructed selection and the streamed AI answer."""

    analyze_requested = pyqtSignal(str)
    instruction_edited = pyqtSignal(str)

    def __init__(self, instruction: str = "", parent=None):
        super().__init__(parent)
        self.setObjectName("AnalysisPanel")
        self.setMinimumWidth(320)
        self.setup_ui(instruction)

    def setup_ui(self, instruction: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self.count_label = QLabel("Selected (0)", self)
        self.count_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.count_label)

        self.selection_text = QPlainTextEdit(self)
        self.selection_text.setReadOnly(True)
        self.selection_text.setPlainText("—")
        self.selection_text.setMaximumHeight(140)
        layout.addWidget(self.selection_text)

        layout.addWidget(QLabel("Instruction", self))
        self.instruction_input = QPlainTextEdit(self)
        self.instruction_input.setPlainText(instruction)
        self.instruction_input.setMaximumHeight(90)
        self.instruction_input.textChanged.connect(
            lambda: self.instruction_edited.emit(self.instruction_input.toPlainText())
        )
        layout.addWidget(self.instruction_input)

        self.analyze_button = QPushButton("Analyse selection", self)
        self.analyze_button.setObjectName("analyzeButton")
        self.analyze_button.setEnabled(False)
        self.analyze_button.clicked.connect(
            lambda: self.analyze_requested.emit(self.instruction_input.toPlainText())
        )
        layout.addWidget(self.analyze_button)

        self.status_label = QLabel("", self)
        self.status_label.setObjectName("statusLabel")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        self.output = QTextBrowser(self)
        self.output.setOpenExternalLinks(True)
        self.output.setPlainText("—")
        layout.addWidget(self.output, 1)

    def set_selection_preview(self, count: int, text: str):
        self.count_label.setText(f"Selected ({count})")
        self.selection_text.setPlainText(text)

    def set_analyze_enabled(self, enabled: bool):
        self.analyze_button.setEnabled(enabled)

    def set_status(self, message: str, is_error: bool = False):
        self.status_label.setText(message)
        self.status_label.setProperty("error", "true" if is_error else "false")
        self.status_label.style().unpolish(self.status_label)
        self.status_label.style().polish(self.status_label)

    def set_output(self, content: str, is_html: bool):
        scroll = self.output.verticalScrollBar()
        at_bottom = scroll.value() >= scroll.maximum() - 4
        if is_html:
            self.output.setHtml(content)
        else:
            self.output.setPlainText(content)
        if at_bottom:
            scroll.setValue(scroll.maximum())
