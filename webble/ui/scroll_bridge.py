"""
Qt adapter for scroll-driven chrome visibility.
Feeds scroll view callbacks into ChromeVisibilityController and re-emits its
decisions as signals for the window to act on.
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from webble.chrome import ChromeVisibilityController, ScrollSample

logger = logging.getLogger(__name__)


class ScrollChromeBridge(QObject):
    """Connects a scrolling view to the chrome visibility state machine."""

    # Signals for the window
    autoHideChanged = pyqtSignal(bool)  # Emitted when hide-on-swipe should be toggled
    showBarsRequested = pyqtSignal()  # Emitted when an edge flick should reveal the bars

    def __init__(self, controller: ChromeVisibilityController = None, parent: QObject = None):
        """Initialize the bridge.

        Args:
            controller: State machine to drive (a default one is created if omitted)
            parent: Qt parent object
        """
        super().__init__(parent)
        self.controller = controller or ChromeVisibilityController()
        self._auto_hide = self.controller.state.bars_auto_hide_enabled

    def _publish_auto_hide(self, enabled: bool | None):
        if enabled is None or enabled == self._auto_hide:
            return
        self._auto_hide = enabled
        self.autoHideChanged.emit(enabled)

    @pyqtSlot(float, float, float)
    def drag_began(self, offset_y: float, viewport_height: float, content_height: float):
        self.controller.on_drag_begin(ScrollSample(offset_y, viewport_height, content_height))

    @pyqtSlot(float, float, float, bool)
    def drag_ended(self, offset_y: float, viewport_height: float, content_height: float,
                   will_decelerate: bool):
        decision = self.controller.on_drag_end(
            ScrollSample(offset_y, viewport_height, content_height), will_decelerate)
        self._publish_auto_hide(decision.auto_hide_enabled)
        if decision.should_show_bars:
            self.showBarsRequested.emit()

    @pyqtSlot(float, float, float)
    def deceleration_ended(self, offset_y: float, viewport_height: float, content_height: float):
        decision = self.controller.on_deceleration_end(
            ScrollSample(offset_y, viewport_height, content_height))
        self._publish_auto_hide(decision.auto_hide_enabled)

    @pyqtSlot(float, float, float)
    def request_show_bars(self, offset_y: float, viewport_height: float, content_height: float):
        """Show the bars on user request and refresh the auto-hide setting."""
        self.showBarsRequested.emit()
        self._publish_auto_hide(
            self.controller.show_bars(ScrollSample(offset_y, viewport_height, content_height)))
