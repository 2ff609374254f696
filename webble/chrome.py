"""
Scroll-driven chrome visibility for WebBLE.

Decides, from scroll samples taken at the start and end of a drag, whether the
navigation and tool bars may hide on swipe and whether a drag past the elastic
edge of the page should bring the bars back.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

logger = logging.getLogger(__name__)

# Distance from the top or bottom of the content that counts as "at the edge"
EDGE_THRESHOLD = 5.0
# Bars stay pinned once the viewport is within this distance of the content end
BOTTOM_MARGIN = 100.0


class DragState(Enum):
    NEUTRAL = 'neutral'
    DRAGGING_FROM_TOP = 'dragging_from_top'
    DRAGGING_FROM_BOTTOM = 'dragging_from_bottom'


@dataclass(frozen=True)
class ScrollSample:
    """Scroll position of the page, all values in the same unit."""
    offset_y: float
    viewport_height: float
    content_height: float

    @property
    def viewport_bottom(self) -> float:
        return self.offset_y + self.viewport_height


@dataclass(frozen=True)
class ChromeVisibilityState:
    drag: DragState = DragState.NEUTRAL
    bars_auto_hide_enabled: bool = True

    @property
    def is_dragging_from_top(self) -> bool:
        return self.drag is DragState.DRAGGING_FROM_TOP

    @property
    def is_dragging_from_bottom(self) -> bool:
        return self.drag is DragState.DRAGGING_FROM_BOTTOM


@dataclass(frozen=True)
class DragEndDecision:
    """Outcome of a finished drag.

    ``auto_hide_enabled`` is None when the page keeps decelerating and no edge
    flick showed the bars; the decision is then made by ``on_deceleration_end``.
    """
    auto_hide_enabled: bool | None
    should_show_bars: bool


@dataclass(frozen=True)
class DecelerationDecision:
    auto_hide_enabled: bool


def compute_auto_hide(sample: ScrollSample, bottom_margin: float = BOTTOM_MARGIN) -> bool:
    """Check whether the bars may hide on swipe at this scroll position.

    Args:
        sample: Current scroll position
        bottom_margin: Size of the zone at the end of the content where bars stay visible

    Returns:
        True if the bars may hide, False if they must stay visible
    """
    if sample.content_height > bottom_margin:
        hide_zone_start = sample.content_height - bottom_margin
    else:
        hide_zone_start = 0.0
    return sample.viewport_bottom <= hide_zone_start


class ChromeVisibilityController:
    """State machine for bar visibility over the lifetime of drag gestures.

    Example:
        controller = ChromeVisibilityController(show_bars_on_edge_flick=True)
        controller.on_drag_begin(ScrollSample(0.0, 800.0, 3000.0))
        decision = controller.on_drag_end(ScrollSample(-10.0, 800.0, 3000.0), will_decelerate=False)
        decision.should_show_bars  # True
    """

    def __init__(self, show_bars_on_edge_flick: bool = False,
                 edge_threshold: float = EDGE_THRESHOLD,
                 bottom_margin: float = BOTTOM_MARGIN) -> None:
        self.show_bars_on_edge_flick = show_bars_on_edge_flick
        self.edge_threshold = edge_threshold
        self.bottom_margin = bottom_margin
        self.state = ChromeVisibilityState()

    def compute_auto_hide(self, sample: ScrollSample) -> bool:
        return compute_auto_hide(sample, self.bottom_margin)

    def _set_auto_hide(self, sample: ScrollSample) -> bool:
        enabled = self.compute_auto_hide(sample)
        if enabled != self.state.bars_auto_hide_enabled:
            logger.debug(f"Bars auto-hide {'enabled' if enabled else 'disabled'} at offset {sample.offset_y}")
        self.state = replace(self.state, bars_auto_hide_enabled=enabled)
        return enabled

    def on_drag_begin(self, sample: ScrollSample) -> DragState:
        """Record which edge, if any, a drag starts from."""
        if sample.offset_y < self.edge_threshold:
            drag = DragState.DRAGGING_FROM_TOP
        elif sample.content_height - sample.viewport_bottom < self.edge_threshold:
            drag = DragState.DRAGGING_FROM_BOTTOM
        else:
            drag = DragState.NEUTRAL
        self.state = replace(self.state, drag=drag)
        return drag

    def on_drag_end(self, sample: ScrollSample, will_decelerate: bool) -> DragEndDecision:
        """Finish a drag.

        Args:
            sample: Scroll position when the finger lifted
            will_decelerate: Whether the page keeps scrolling after the drag

        Returns:
            DragEndDecision with the auto-hide setting and whether to show the bars
        """
        auto_hide = None if will_decelerate else self._set_auto_hide(sample)

        show_bars = False
        if self.show_bars_on_edge_flick:
            if self.state.is_dragging_from_top and sample.offset_y < 0.0:
                show_bars = True
            elif self.state.is_dragging_from_bottom and sample.viewport_bottom > sample.content_height:
                show_bars = True
        if show_bars:
            logger.debug(f"Edge flick from {self.state.drag.value}, showing bars")
            # Showing the bars always re-evaluates auto-hide, even mid-deceleration
            auto_hide = self.show_bars(sample)

        self.state = replace(self.state, drag=DragState.NEUTRAL)
        return DragEndDecision(auto_hide_enabled=auto_hide, should_show_bars=show_bars)

    def on_deceleration_end(self, sample: ScrollSample) -> DecelerationDecision:
        return DecelerationDecision(auto_hide_enabled=self._set_auto_hide(sample))

    def show_bars(self, sample: ScrollSample) -> bool:
        """Bars were shown explicitly; re-evaluate auto-hide for the current position."""
        return self._set_auto_hide(sample)
