"""
Qt adapters for the picker: the render-surface viewport and an
application-wide click source.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QEvent, QObject, QPoint, QPointF, Qt
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QApplication, QWidget

from elevationprofile.controller.picking import ClickListener
from elevationprofile.model.points import ClickEvent, ViewportRect

logger = logging.getLogger(__name__)

# A press/release pair further apart than this is a drag (orbit/pan), not a click.
CLICK_DRAG_TOLERANCE_PX: float = 4.0


class QtViewport:
    """Exposes a widget's geometry in global screen pixels."""
    def __init__(self, widget: QWidget) -> None:
        self._widget = widget

    @property
    def render_target(self) -> QWidget:
        return self._widget

    def bounding_rect(self) -> ViewportRect:
        top_left = self._widget.mapToGlobal(QPoint(0, 0))
        return ViewportRect(
            left=float(top_left.x()),
            top=float(top_left.y()),
            width=float(self._widget.width()),
            height=float(self._widget.height()),
        )

    def size(self) -> tuple[float, float]:
        return float(self._widget.width()), float(self._widget.height())

    def aspect(self) -> float:
        w, h = self.size()
        return w / h if h > 0 else 1.0


class QtClickSource(QObject):
    """
    Global left-click source.

    While at least one listener is registered, an event filter is installed
    on the QApplication, so every widget's clicks are seen; listeners decide
    themselves whether the target is relevant.
    """
    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._listeners: list[ClickListener] = []
        self._press_pos: Optional[QPointF] = None
        self._installed = False

    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: ClickListener) -> None:
        if listener in self._listeners:
            return
        self._listeners.append(listener)
        self._install()

    def remove_listener(self, listener: ClickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
        if not self._listeners:
            self._uninstall()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if not isinstance(event, QMouseEvent) or event.button() != Qt.MouseButton.LeftButton:
            return False

        if event.type() == QEvent.Type.MouseButtonPress:
            self._press_pos = event.globalPosition()
        elif event.type() == QEvent.Type.MouseButtonRelease:
            pos = event.globalPosition()
            if self._press_pos is not None:
                moved = (pos - self._press_pos).manhattanLength()
                if moved > CLICK_DRAG_TOLERANCE_PX:
                    return False
            self.dispatch(ClickEvent(target=watched, client_x=pos.x(), client_y=pos.y()))

        # Never consume: the interactor still needs the event for camera control
        return False

    def dispatch(self, click: ClickEvent) -> None:
        for listener in list(self._listeners):
            listener(click)

    def _install(self) -> None:
        app = QApplication.instance()
        if app is not None and not self._installed:
            app.installEventFilter(self)
            self._installed = True

    def _uninstall(self) -> None:
        app = QApplication.instance()
        if app is not None and self._installed:
            app.removeEventFilter(self)
        self._installed = False
        self._press_pos = None
