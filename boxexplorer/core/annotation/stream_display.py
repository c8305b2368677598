"""
Paced reveal of streamed text.
"""

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

TICK_INTERVAL_MS = 16


class StreamPacer(QObject):
    """
    Reveals queued text one character per tick.

    Network deltas arrive in bursts; the pacer turns them into a steady
    typing effect. ``revealed`` carries the whole displayed text after each
    tick.
    """

    revealed = pyqtSignal(str)

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self._queue = ""
        self._displayed = ""
        self._active = False

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.tick)

    def start(self):
        """Reset both buffers and start ticking."""
        self._queue = ""
        self._displayed = ""
        self._active = True
        self._timer.start()

    def stop(self):
        self._active = False
        self._timer.stop()

    def enqueue(self, text: str):
        if text:
            self._queue += text

    def tick(self) -> bool:
        """Move one queued character to the display; False if nothing moved."""
        if not self._active or not self._queue:
            return False
        self._displayed += self._queue[0]
        self._queue = self._queue[1:]
        self.revealed.emit(self._displayed)
        return True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def displayed(self) -> str:
        return self._displayed

    @property
    def queued(self) -> str:
        return self._queue
