"""Creation of brand-new activity instances.

The host calls the creation function registered for an activity type
whenever an author adds a new instance. Creation functions are coroutines so
that an implementation may consult an external service using the
:class:`~dataknobs_activity.registry.CreationContext`; the sample one resolves
immediately.
"""

from __future__ import annotations

import logging

from dataknobs_activity.builder import build_model
from dataknobs_activity.exceptions import ConfigurationError, RegistrationError
from dataknobs_activity.manifest import ActivityManifest
from dataknobs_activity.models import Model
from dataknobs_activity.registry import (
    CreationContext,
    CreationFunction,
    CreationRegistry,
    ElementRegistry,
)

logger = logging.getLogger(__name__)

DEFAULT_STEM = "What is two plus two?"
DEFAULT_CORRECT = 4


async def create_default_model(context: CreationContext) -> Model:
    """Return a fresh sample model; ``context`` is not needed here."""
    return build_model(DEFAULT_STEM, DEFAULT_CORRECT)


def make_creation_function(stem: str, correct: object) -> CreationFunction:
    """Build a creation function producing models with the given defaults."""

    async def create(context: CreationContext) -> Model:
        return build_model(stem, correct)

    return create


def register_activity(
    manifest: ActivityManifest,
    creation_registry: CreationRegistry,
    element_registry: ElementRegistry,
    create_fn: CreationFunction = create_default_model,
) -> None:
    """Register an activity type with both registries.

    The creation function is keyed by ``manifest.id`` and both surface
    classes by their element names.

    Either every key is registered or none is.

    Raises:
        RegistrationError: If the type or either element is already registered
        ConfigurationError: If a surface entry cannot be imported, or both
            surfaces share one element name
    """
    if manifest.authoring.element == manifest.delivery.element:
        raise ConfigurationError(
            f"Authoring and delivery share element name {manifest.authoring.element!r}",
            context={"activity_type": manifest.id, "element": manifest.authoring.element},
        )
    elements = {
        manifest.authoring.element: manifest.authoring.load(),
        manifest.delivery.element: manifest.delivery.load(),
    }

    taken = [key for key in elements if element_registry.has(key)]
    if creation_registry.has(manifest.id):
        taken.insert(0, manifest.id)
    if taken:
        raise RegistrationError(
            f"Cannot register activity type {manifest.id}: already registered: {', '.join(taken)}",
            context={"activity_type": manifest.id, "keys": taken},
        )

    creation_registry.register(manifest.id, create_fn)
    try:
        element_registry.define_all(elements)
    except RegistrationError:
        # Lost a race for an element name
        creation_registry.unregister(manifest.id)
        raise
    logger.info("Registered activity type %s", manifest.id)


__all__ = [
    "DEFAULT_STEM",
    "DEFAULT_CORRECT",
    "create_default_model",
    "make_creation_function",
    "register_activity",
]
