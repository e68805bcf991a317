from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class DrawingStore(QObject):
    """
    Central on/off switch for line picking.

    The picker and the toolbar both subscribe to `drawing_toggled`; the
    signal is only emitted when the value actually changes.
    """
    drawing_toggled = Signal(bool)

    def __init__(self, enabled: bool = False) -> None:
        super().__init__()
        self._drawing_enabled = enabled

    def is_drawing_enabled(self) -> bool:
        return self._drawing_enabled

    def set_drawing_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled != self._drawing_enabled:
            self._drawing_enabled = enabled
            self.drawing_toggled.emit(self._drawing_enabled)

    def toggle_drawing(self) -> None:
        self.set_drawing_enabled(not self._drawing_enabled)
