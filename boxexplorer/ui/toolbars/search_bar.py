from PyQt5.QtCore import QEvent, Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QSizePolicy,
    QToolButton,
)


class SearchLineEdit(QLineEdit):
    """
    QLineEdit reporting Enter with its direction: Shift+Enter searches back.

    Note: Return must be handled at the widget level so the Shift modifier
    is still known; ``returnPressed`` does not carry it.
    """

    navigate_next = pyqtSignal()
    navigate_prev = pyqtSignal()

    def event(self, event: QEvent) -> bool:
        if event.type() == QEvent.KeyPress and event.key() in (Qt.Key_Return, Qt.Key_Enter):
            if event.modifiers() & Qt.ShiftModifier:
                self.navigate_prev.emit()
            else:
                self.navigate_next.emit()
            return True

        return super().event(event)


class SearchBar(QFrame):
    """Inline search box for the current page."""

    search_requested = pyqtSignal(str, int)  # query, direction
    text_edited = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("SearchBar")
        self.setup_ui()

    def setup_ui(self):
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Preferred)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.search_input = SearchLineEdit(self)
        self.search_input.setPlaceholderText("Search page...")
        self.search_input.setFixedWidth(180)
        self.search_input.textEdited.connect(self.text_edited)
        self.search_input.navigate_next.connect(lambda: self._request(1))
        self.search_input.navigate_prev.connect(lambda: self._request(-1))
        layout.addWidget(self.search_input)

        self.prev_button = QToolButton(self)
        self.prev_button.setText("◀")
        self.prev_button.setToolTip("Previous match (Shift+Enter)")
        self.prev_button.clicked.connect(lambda: self._request(-1))
        layout.addWidget(self.prev_button)

        self.next_button = QToolButton(self)
        self.next_button.setText("▶")
        self.next_button.setToolTip("Next match (Enter)")
        self.next_button.clicked.connect(lambda: self._request(1))
        layout.addWidget(self.next_button)

        self.status_label = QLabel("", self)
        self.status_label.setObjectName("statusLabel")
        self.status_label.setMinimumWidth(56)
        layout.addWidget(self.status_label)

    def _request(self, direction: int):
        self.search_requested.emit(self.search_input.text(), direction)

    def focus_input(self):
        self.search_input.setFocus()
        self.search_input.selectAll()

    def set_result(self, index: int, count: int):
        """Show the active match position; a negative count means no search."""
        if count < 0:
            self.status_label.setText("")
        elif count == 0:
            self.status_label.setText("0 results")
        else:
            self.status_label.setText(f"{index + 1} of {count}")
