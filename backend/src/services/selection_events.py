"""Selection-change notification stream shared by all editing surfaces."""
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionEvent:
    """
    The document selection changed.

    `surface_id` names the editing surface holding the selection, or is None
    when the selection is somewhere else in the document. Offsets index the
    rendered text of that surface.
    """

    surface_id: str | None
    start: int
    end: int

    @property
    def is_collapsed(self) -> bool:
        """True when nothing is selected (a caret only)."""
        return self.start == self.end


SelectionHandler = Callable[[SelectionEvent], None]


class Subscription:
    """Handle returned by subscribe(); call unsubscribe() to detach the handler."""

    def __init__(self, bus: "SelectionChangeBus", handler: SelectionHandler) -> None:
        self._bus = bus
        self._handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        """Detach the handler. Safe to call more than once."""
        if self.active:
            self._bus._remove(self._handler)
            self.active = False


class SelectionChangeBus:
    """
    Fan-out of document-wide selection changes.

    Fires for selections anywhere in the document, so handlers must check the
    event's surface before acting on it.
    """

    def __init__(self) -> None:
        self._handlers: list[SelectionHandler] = []

    @property
    def listener_count(self) -> int:
        """Number of attached handlers."""
        return len(self._handlers)

    def subscribe(self, handler: SelectionHandler) -> Subscription:
        """Attach a handler and return its subscription."""
        self._handlers.append(handler)
        return Subscription(self, handler)

    def publish(self, event: SelectionEvent) -> None:
        """Deliver an event to every handler attached when publishing starts."""
        for handler in list(self._handlers):
            handler(event)

    def _remove(self, handler: SelectionHandler) -> None:
        self._handlers.remove(handler)
        logger.debug("selection_listener_removed", extra={"remaining": len(self._handlers)})
