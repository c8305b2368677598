"""
Trailing-edge debouncing for resize, scroll and search-input handlers.
"""
from typing import Any, Callable, Optional, Tuple

from PyQt5.QtCore import QObject, QTimer


class Debouncer(QObject):
    """
    Coalesces rapid calls into one trailing invocation after a quiet interval.

    Every ``trigger()`` bumps a generation counter and (re)starts the timer.
    When the timer fires, the callback only runs if the generation it was
    armed for is still the latest one, so a cancelled or superseded burst
    never executes.
    """

    def __init__(self, callback: Callable[..., Any], wait_ms: int = 200, parent=None):
        super().__init__(parent)
        self._callback = callback
        self._args: Tuple[Any, ...] = ()
        self._generation = 0
        self._armed_generation: Optional[int] = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(wait_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_pending(self) -> bool:
        return self._armed_generation is not None

    def trigger(self, *args: Any) -> int:
        """Schedule the callback; returns the generation that was armed."""
        self._generation += 1
        self._armed_generation = self._generation
        self._args = args
        self._timer.start()
        return self._generation

    def cancel(self) -> None:
        """Drop any pending invocation."""
        self._generation += 1
        self._armed_generation = None
        self._timer.stop()

    def flush(self) -> None:
        """Run a pending invocation immediately."""
        if self._armed_generation is not None:
            self._timer.stop()
            self._fire()

    def _fire(self) -> None:
        if self._armed_generation != self._generation:
            return
        self._armed_generation = None
        args, self._args = self._args, ()
        self._callback(*args)
