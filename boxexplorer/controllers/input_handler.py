from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence

from ..core.selection import DragGesture


class UserInputHandler:
    """
    Handles keyboard shortcuts and mouse gestures for the reader window.
    """

    def __init__(self, main_window, controller):
        """
        Args:
            main_window: The main window, for focus-related actions
            controller (ReaderController): Receiver of all commands
        """
        self.main_window = main_window
        self.controller = controller
        self.gesture: Optional[DragGesture] = None

    # ===== Keyboard =====

    def handle_key_press(self, event) -> bool:
        """
        Dispatch a key press; returns True if it was handled.

        Focus shortcuts always work. Document shortcuts are ignored while a
        text field has focus or no document is open.
        """
        if event.matches(QKeySequence.Find):
            self.main_window.focus_search()
            return True
        if event.matches(QKeySequence.Open):
            self.main_window.open_pdf()
            return True

        if self.main_window.text_input_has_focus():
            return False

        if event.matches(QKeySequence.Copy):
            self.controller.copy_selection()
            return True

        key = event.key()
        if key == Qt.Key_Escape:
            self.controller.clear_selection()
            return True

        if key == Qt.Key_M:
            self.controller.toggle_mode()
            return True
        if key == Qt.Key_T:
            self.controller.cycle_theme()
            return True

        if not self.controller.has_document:
            return False

        if key in (Qt.Key_Left, Qt.Key_PageUp):
            self.controller.previous_page()
        elif key in (Qt.Key_Right, Qt.Key_PageDown):
            self.controller.next_page()
        elif key == Qt.Key_F:
            self.controller.fit_width()
        elif key in (Qt.Key_Plus, Qt.Key_Equal):
            self.controller.zoom_in()
        elif key == Qt.Key_Minus:
            self.controller.zoom_out()
        else:
            return False
        return True

    # ===== Mouse on the document canvas =====

    def handle_mouse_press(self, canvas, x: float, y: float, button) -> None:
        if button != Qt.LeftButton:
            return
        self.gesture = DragGesture(x, y)

    def handle_mouse_move(self, canvas, x: float, y: float) -> None:
        if self.gesture is None:
            return
        if self.gesture.move(x, y):
            canvas.set_rubber_band(self.gesture.rect)

    def handle_mouse_release(self, canvas, x: float, y: float, button) -> None:
        """
        Finish a gesture: a drag selects by rectangle, anything shorter is a
        click that toggles the glyph under the pointer.
        """
        if button != Qt.LeftButton or self.gesture is None:
            return

        gesture, self.gesture = self.gesture, None
        gesture.move(x, y)
        canvas.set_rubber_band(None)

        if gesture.is_dragging:
            self.controller.select_rect(gesture.rect)
        else:
            self.controller.click_at(gesture.start_x, gesture.start_y)
