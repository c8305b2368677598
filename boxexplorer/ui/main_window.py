"""
Main application window for BoxExplorer.
"""

import os
from typing import Optional

from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QIntValidator
from PyQt5.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QSizePolicy,
    QSpacerItem,
    QSplitter,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from .. import __appname__
from ..controllers import ReaderController, UserInputHandler
from ..styles import ThemeManager
from .dialogs import AiConfigDialog
from .toolbars import SearchBar
from .widgets import AnalysisPanel, DocumentView


class MainWindow(QMainWindow):
    """Main application window: toolbar, document view and analysis panel."""

    def __init__(self, file_path: Optional[str] = None, controller: Optional[ReaderController] = None):
        super().__init__()

        self.controller = controller or ReaderController(parent=self)
        self.input_handler = UserInputHandler(self, self.controller)

        self._setup_window()
        self._setup_ui()
        self._setup_connections()

        self._apply_theme()
        self._update_header()

        if file_path and os.path.exists(file_path):
            self.controller.open_path(file_path)
        else:
            QTimer.singleShot(0, self._offer_last_opened)

    def _setup_window(self):
        self.setWindowTitle(__appname__)
        self.setMinimumSize(900, 600)

    def _setup_ui(self):
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._create_toolbar()
        layout.addWidget(self.top_frame)

        self.document_view = DocumentView(self.controller, self)
        self.document_view.set_input_handler(self.input_handler)

        self.analysis_panel = AnalysisPanel(self.controller.settings.ai_instruction, self)

        splitter = QSplitter(Qt.Horizontal, self)
        splitter.addWidget(self.document_view)
        splitter.addWidget(self.analysis_panel)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        layout.addWidget(splitter, 1)

        self.setCentralWidget(central)

    def _create_toolbar(self):
        """Create the top toolbar."""
        self.top_frame = QFrame(self)
        self.top_frame.setObjectName("TopFrame")
        self.top_layout = QHBoxLayout(self.top_frame)
        self.top_layout.setContentsMargins(10, 8, 10, 8)
        self.top_layout.setSpacing(6)

        # File operations
        self._add_toolbar_button("Open", "Open PDF (Ctrl+O)", self.open_pdf)
        self.close_button = self._add_toolbar_button("Close", "Close PDF", self.close_pdf)

        self._add_toolbar_spacer(20, expanding=True)

        # Page navigation
        self.prev_button = self._add_toolbar_button("◀", "Previous page (Left, PageUp)", self.controller.previous_page)
        self.page_edit = QLineEdit("", self.top_frame)
        self.page_edit.setObjectName("page_input")
        self.page_edit.setAlignment(Qt.AlignCenter)
        self.page_edit.setValidator(QIntValidator(1, 1, self))
        self.page_edit.returnPressed.connect(self.page_number_changed)
        self.top_layout.addWidget(self.page_edit)
        self.total_page_label = QLabel("/ —", self.top_frame)
        self.top_layout.addWidget(self.total_page_label)
        self.next_button = self._add_toolbar_button("▶", "Next page (Right, PageDown)", self.controller.next_page)

        self._add_toolbar_spacer(12)

        # Zoom controls
        self.zoom_out_button = self._add_toolbar_button("−", "Zoom out (-)", self.controller.zoom_out)
        self.zoom_label = QLabel("—", self.top_frame)
        self.zoom_label.setMinimumWidth(44)
        self.zoom_label.setAlignment(Qt.AlignCenter)
        self.top_layout.addWidget(self.zoom_label)
        self.zoom_in_button = self._add_toolbar_button("+", "Zoom in (+)", self.controller.zoom_in)
        self.fit_button = self._add_toolbar_button("Fit", "Fit width (F)", self.controller.fit_width)

        self._add_toolbar_spacer(12)

        self.search_bar = SearchBar(self.top_frame)
        self.top_layout.addWidget(self.search_bar)

        self._add_toolbar_spacer(20, expanding=True)

        # View and settings
        self.mode_button = self._add_toolbar_button("", "Toggle page mode (M)", self.controller.toggle_mode)
        self.theme_button = self._add_toolbar_button("", "Cycle theme (T)", self.controller.cycle_theme)
        self._add_toolbar_button("AI", "AI settings", self.show_ai_config)

    def _add_toolbar_button(self, text: str, tooltip: str, callback) -> QToolButton:
        """Add a button to the toolbar."""
        btn = QToolButton(self.top_frame)
        btn.setText(text)
        btn.setToolTip(tooltip)
        btn.setFocusPolicy(Qt.NoFocus)
        btn.clicked.connect(callback)
        self.top_layout.addWidget(btn)
        return btn

    def _add_toolbar_spacer(self, width: int, expanding: bool = False):
        """Add a spacer to the toolbar."""
        policy = QSizePolicy.Expanding if expanding else QSizePolicy.Fixed
        self.top_layout.addSpacerItem(QSpacerItem(width, 20, policy, QSizePolicy.Minimum))

    def _setup_connections(self):
        c = self.controller
        c.document_changed.connect(lambda _has_doc: self._update_header())
        c.page_changed.connect(lambda _page: self._update_header())
        c.settings_changed.connect(self._update_header)
        c.theme_changed.connect(lambda _name: self._apply_theme())
        c.search_updated.connect(self.search_bar.set_result)
        c.selection_preview_changed.connect(self.analysis_panel.set_selection_preview)
        c.analyze_enabled_changed.connect(self.analysis_panel.set_analyze_enabled)
        c.error_occurred.connect(self._show_error)

        c.pipeline.status_changed.connect(self.analysis_panel.set_status)
        c.pipeline.output_rendered.connect(self.analysis_panel.set_output)
        self.analysis_panel.set_status(c.pipeline.status, c.pipeline.status_is_error)

        self.search_bar.search_requested.connect(lambda text, direction: c.run_search(text, direction))
        self.search_bar.text_edited.connect(lambda _text: c.search_text_edited())

        self.analysis_panel.analyze_requested.connect(c.analyze)
        self.analysis_panel.instruction_edited.connect(c.set_instruction)

    # ===== Header state =====

    def _update_header(self):
        c = self.controller
        has_doc = c.has_document

        for widget in (
            self.close_button,
            self.prev_button,
            self.next_button,
            self.page_edit,
            self.zoom_out_button,
            self.zoom_in_button,
            self.fit_button,
            self.search_bar,
        ):
            widget.setEnabled(has_doc)

        self.mode_button.setText("Scroll" if c.settings.mode == "scroll" else "Single")
        self.theme_button.setText(ThemeManager.label(c.settings.theme))
        self.zoom_label.setText(c.zoom_label())

        if not has_doc:
            self.total_page_label.setText("/ —")
            self.page_edit.setText("")
            self.setWindowTitle(__appname__)
            return

        self.page_edit.setValidator(QIntValidator(1, c.page_count, self))
        self.page_edit.setText(str(c.current_page))
        self.total_page_label.setText(f"/ {c.page_count}")
        self.prev_button.setEnabled(c.current_page > 1)
        self.next_button.setEnabled(c.current_page < c.page_count)

        path = c.session.doc_path
        title = os.path.basename(path) if path else "Untitled"
        self.setWindowTitle(f"{title} - {__appname__}")

    def _apply_theme(self):
        ThemeManager.apply_theme(self, self.controller.settings.theme)
        self._update_header()

    # ===== Actions =====

    def open_pdf(self):
        file_path, _ = QFileDialog.getOpenFileName(self, "Open PDF", "", "PDF Files (*.pdf)")
        if file_path:
            self.controller.open_path(file_path)

    def close_pdf(self):
        self.controller.close_document()

    def page_number_changed(self):
        try:
            page = int(self.page_edit.text())
        except ValueError:
            return
        self.controller.set_current_page(page)
        self.document_view.setFocus()

    def show_ai_config(self):
        dialog = AiConfigDialog(self.controller.ai_config, self)
        if dialog.exec_() != AiConfigDialog.Accepted:
            return
        if not self.controller.update_ai_config(dialog.get_config()):
            self._show_error("Saving the AI settings failed; they apply to this session only.")

    def focus_search(self):
        self.search_bar.focus_input()

    def text_input_has_focus(self) -> bool:
        focus = self.focusWidget()
        return isinstance(focus, (QLineEdit, QPlainTextEdit))

    def _offer_last_opened(self):
        path = self.controller.last_opened_path()
        if not path:
            return
        reply = QMessageBox.question(
            self,
            "Reopen last file",
            f"Open the last file again?\n\n{path}",
            QMessageBox.Open | QMessageBox.Cancel,
            QMessageBox.Open,
        )
        if reply == QMessageBox.Open:
            self.controller.open_path(path)

    def _show_error(self, message: str):
        QMessageBox.warning(self, __appname__, message)

    # ===== Event Handlers =====

    def keyPressEvent(self, event):  # type: ignore[override]
        """Handle keyboard shortcuts."""
        if self.input_handler.handle_key_press(event):
            event.accept()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):  # type: ignore[override]
        if self.controller.has_document:
            self.controller.close_document()
        super().closeEvent(event)
