"""Registries consulted by the host when instantiating activities.

Instead of process-wide globals, registries are plain objects built once at
startup and handed to whatever creates activity instances (normally an
:class:`~dataknobs_activity.host.ActivityHost`). Every key is set once and
read many times; re-registering a key raises
:class:`~dataknobs_activity.exceptions.RegistrationError`.

- :class:`CreationRegistry` maps an activity type id to the coroutine that
  builds a brand-new default model.
- :class:`ElementRegistry` maps element names to surface classes.

Example:
    ```python
    creation = CreationRegistry()
    creation.register("oli_sample", create_default_model)

    model = await creation.create("oli_sample", CreationContext("oli_sample"))
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Dict,
    Protocol,
    Type,
    TypeVar,
)

from dataknobs_common.registry import Registry

from dataknobs_activity.exceptions import RegistrationError
from dataknobs_activity.models import Model

if TYPE_CHECKING:
    from dataknobs_activity.lifecycle import Surface

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CreationContext:
    """Information the host passes to a creation function.

    Attributes:
        activity_type: The activity type being instantiated
        project_slug: Project the new instance belongs to, if any
        extra: Any further host-specific values
    """

    activity_type: str
    project_slug: str | None = None
    extra: Dict[str, Any] = field(default_factory=dict)


class CreationFunction(Protocol):
    """Builds a new default model, possibly by calling out to a service."""

    def __call__(self, context: CreationContext) -> Awaitable[Model]: ...


class SetOnceRegistry(Registry[T]):
    """Thread-safe registry whose keys are set once and read many times.

    Lookups, listing and unregistering come from
    :class:`dataknobs_common.registry.Registry`; only registration is
    tightened to reject every overwrite.

    Args:
        name: Registry name, used in errors and logs
    """

    def register(self, key: str, item: T, metadata: Dict[str, Any] | None = None) -> None:  # type: ignore[override]
        """Register ``item`` under ``key``.

        Raises:
            RegistrationError: If ``key`` is already registered
        """
        self.register_all({key: item}, metadata=metadata)

    def register_all(self, items: Dict[str, T], metadata: Dict[str, Any] | None = None) -> None:
        """Register several items at once, or none of them.

        Raises:
            RegistrationError: If any key is already registered
        """
        with self._lock:
            taken = [key for key in items if self.has(key)]
            if taken:
                raise RegistrationError(
                    f"Already registered in {self.name}: {', '.join(taken)}",
                    context={"keys": taken, "registry": self.name},
                )
            for key, item in items.items():
                super().register(key, item, metadata=metadata)
        logger.debug("Registered %s in %s", list(items), self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, items={self.count()})"


class CreationRegistry(SetOnceRegistry[CreationFunction]):
    """Creation functions keyed by activity type id."""

    def __init__(self) -> None:
        super().__init__("creation_functions")

    async def create(self, activity_type: str, context: CreationContext | None = None) -> Model:
        """Build a new default model for ``activity_type``.

        Args:
            activity_type: Registered activity type id
            context: Creation context; defaults to one naming the type

        Returns:
            The model produced by the registered creation function

        Raises:
            NotFoundError: If no creation function is registered for the type
        """
        create_fn = self.get(activity_type)
        model = await create_fn(context or CreationContext(activity_type=activity_type))
        logger.debug("Created default model for %s", activity_type)
        return model


class ElementRegistry(SetOnceRegistry[Type["Surface"]]):
    """Surface classes keyed by element name."""

    def __init__(self) -> None:
        super().__init__("elements")

    def define(self, element_name: str, surface_cls: Type[Surface]) -> None:
        """Register ``surface_cls`` as the implementation of ``element_name``."""
        self.register(element_name, surface_cls)

    def define_all(self, elements: Dict[str, Type[Surface]]) -> None:
        """Register several element names together, or none of them."""
        self.register_all(elements)

    def create_element(self, element_name: str, **kwargs: Any) -> Surface:
        """Instantiate the surface registered for ``element_name``."""
        return self.get(element_name)(**kwargs)


__all__ = [
    "CreationContext",
    "CreationFunction",
    "SetOnceRegistry",
    "CreationRegistry",
    "ElementRegistry",
]
