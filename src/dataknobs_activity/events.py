"""Events dispatched from surfaces to their host.

Surfaces and hosts are both :class:`EventTarget` instances. A surface's
``parent`` is the target it bubbles into, normally the host. Listeners are
called synchronously in registration order; a failing listener is logged and
does not stop delivery to the others.

Example:
    ```python
    from dataknobs_activity.events import MODEL_UPDATED, EventTarget

    host = EventTarget()
    surface.parent = host

    def on_model_updated(event):
        event.detail["continuation"]({"saved": True}, None)

    host.add_event_listener(MODEL_UPDATED, on_model_updated)
    ```
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

MODEL_UPDATED = "modelUpdated"
SUBMIT_ACTIVITY = "submitActivity"

EventListener = Callable[["ActivityEvent"], Any]


@dataclass
class ActivityEvent:
    """A one-shot message from a surface.

    Attributes:
        name: Event name (``modelUpdated`` or ``submitActivity``)
        detail: Event payload, including its ``continuation``
        bubbles: Whether the event travels to ancestor targets
        event_id: Unique identifier; also the continuation's correlation id
        timestamp: When the event was created
        target: The target the event was first dispatched on
        current_target: The target whose listeners are running
    """

    name: str
    detail: Dict[str, Any] = field(default_factory=dict)
    bubbles: bool = True
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    target: EventTarget | None = field(default=None, repr=False)
    current_target: EventTarget | None = field(default=None, repr=False)
    _propagation_stopped: bool = field(default=False, repr=False)

    def stop_propagation(self) -> None:
        """Prevent delivery to further ancestors."""
        self._propagation_stopped = True

    @property
    def propagation_stopped(self) -> bool:
        return self._propagation_stopped


class EventTarget:
    """Something that listens for and dispatches :class:`ActivityEvent` s.

    Args:
        parent: Target that bubbling events are delivered to next
    """

    def __init__(self, parent: EventTarget | None = None) -> None:
        self.parent = parent
        self._listeners: Dict[str, List[EventListener]] = {}

    def add_event_listener(self, name: str, listener: EventListener) -> None:
        """Register ``listener`` for events called ``name``."""
        listeners = self._listeners.setdefault(name, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, name: str, listener: EventListener) -> None:
        """Unregister a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, []))

    def dispatch_event(self, event: ActivityEvent) -> int:
        """Deliver ``event`` here and, if it bubbles, to each ancestor.

        Args:
            event: The event to dispatch

        Returns:
            Number of listeners the event was delivered to
        """
        event.target = self
        delivered = 0
        node: EventTarget | None = self

        while node is not None:
            event.current_target = node
            for listener in list(node._listeners.get(event.name, [])):
                delivered += 1
                try:
                    listener(event)
                except Exception:
                    logger.exception(
                        "Error in listener for %s event %s",
                        event.name,
                        event.event_id[:8],
                    )
            if not event.bubbles or event.propagation_stopped:
                break
            node = node.parent

        event.current_target = None
        if delivered == 0:
            logger.warning("Event %s dispatched with no listeners", event.name)
        else:
            logger.debug(
                "Dispatched %s event %s to %d listeners",
                event.name,
                event.event_id[:8],
                delivered,
            )
        return delivered


__all__ = [
    "MODEL_UPDATED",
    "SUBMIT_ACTIVITY",
    "ActivityEvent",
    "EventListener",
    "EventTarget",
]
