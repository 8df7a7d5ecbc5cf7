"""Attribute-driven lifecycle shared by authoring and delivery surfaces.

A surface starts ``UNMOUNTED``. The host sets its attributes (JSON strings)
and mounts it; mounting renders from whatever attributes are present at that
moment. After that, any real change to an observed attribute re-renders from
the latest values of all attributes. Rendering never reads state left over
from a previous render, so repeated and out-of-order updates are safe.

``MOUNTED`` is terminal: removal from the host is not modelled.

Example:
    ```python
    surface = AuthoringSurface()
    surface.set_attribute("model", encode_attribute(model))   # no render yet
    surface.mount()                                            # first render
    surface.set_attribute("model", encode_attribute(other))   # re-render
    ```
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple

from dataknobs_common.transitions import InvalidTransitionError, TransitionValidator

from dataknobs_activity.events import EventTarget
from dataknobs_activity.views import RenderTarget

logger = logging.getLogger(__name__)


class SurfaceState(str, Enum):
    """Lifecycle states of a surface."""

    UNMOUNTED = "unmounted"
    MOUNTED = "mounted"


# Keyed by state value; the validator works on plain strings
SURFACE_LIFECYCLE = TransitionValidator(
    "surface_lifecycle",
    {
        SurfaceState.UNMOUNTED.value: {SurfaceState.MOUNTED.value},
        SurfaceState.MOUNTED.value: set(),
    },
)


class Surface(EventTarget, ABC):
    """Base class for a hosted activity surface.

    Subclasses declare ``observed_attributes`` and implement :meth:`props`
    (parse the current attributes) and :meth:`render` (project them into the
    render target).

    Args:
        parent: Event target that outbound events bubble into
    """

    observed_attributes: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, parent: EventTarget | None = None) -> None:
        super().__init__(parent=parent)
        self._attributes: Dict[str, str] = {}
        self._state = SurfaceState.UNMOUNTED
        self.render_target = RenderTarget()

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._state is SurfaceState.MOUNTED

    # Attribute protocol

    def get_attribute(self, name: str) -> str | None:
        return self._attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def set_attribute(self, name: str, value: str) -> None:
        """Set an attribute as the host would.

        Only a real change notifies :meth:`attribute_changed`.
        """
        old = self._attributes.get(name)
        self._attributes[name] = value
        if old != value:
            self.attribute_changed(name, old, value)

    def remove_attribute(self, name: str) -> None:
        if name in self._attributes:
            old = self._attributes.pop(name)
            self.attribute_changed(name, old, None)

    # Lifecycle

    def mount(self) -> None:
        """Attach to the host and perform the first render.

        Calling this on a mounted surface does nothing.
        """
        try:
            SURFACE_LIFECYCLE.validate(self._state.value, SurfaceState.MOUNTED.value)
        except InvalidTransitionError as e:
            logger.debug("%s not mounted again: %s", type(self).__name__, e)
            return

        self.render_target = RenderTarget()
        self._state = SurfaceState.MOUNTED
        logger.debug("%s mounted", type(self).__name__)
        self.refresh()

    def attribute_changed(self, name: str, old: str | None, new: str | None) -> None:
        """React to an attribute change by re-rendering when mounted."""
        if name not in self.observed_attributes:
            return
        if not self.mounted:
            logger.debug("%s: '%s' changed before mount", type(self).__name__, name)
            return
        self.refresh()

    def refresh(self) -> None:
        """Re-render from the current attributes."""
        self.render(**self.props())

    @abstractmethod
    def props(self) -> Dict[str, Any]:
        """Parse the current attributes into render arguments."""

    @abstractmethod
    def render(self, **props: Any) -> None:
        """Replace the render target contents from ``props``."""


__all__ = [
    "SurfaceState",
    "SURFACE_LIFECYCLE",
    "Surface",
]
