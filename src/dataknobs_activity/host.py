"""A reference host for activity surfaces.

:class:`ActivityHost` plays the platform's part of the contract: it creates
activity instances through the creation registry, instantiates and mounts the
registered surfaces, pushes attributes into them, and answers their events.
``modelUpdated`` is answered by storing the new model; ``submitActivity`` by
grading the payload. Both run as asyncio tasks and finish by invoking the
event's continuation exactly once, with the result or with the error raised
while handling it.

Undo/redo, deferred saving and persistence belong to real hosts and are not
modelled; :meth:`ActivityHost.push_model` is the hook an undo stack would use.

Example:
    ```python
    host = ActivityHost.from_settings(ActivitySettings())
    instance = await host.create_activity("oli_sample")
    state = host.start_attempt(instance.activity_id)
    surface = host.open_delivery(instance.activity_id, state)

    surface.render_target.set_value(state.parts[0].attempt_guid, "4")
    result = await surface.render_target.click("submit")
    result.evaluations[0].feedback.content
    # 'Correct'
    ```
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Set, Union

from dataknobs_activity.attributes import GRADED, MODEL, STATE, encode_attribute
from dataknobs_activity.continuation import Continuation
from dataknobs_activity.creation import create_default_model, register_activity
from dataknobs_activity.delivery import FeedbackPresenter
from dataknobs_activity.events import MODEL_UPDATED, SUBMIT_ACTIVITY, ActivityEvent, EventTarget
from dataknobs_activity.exceptions import NotFoundError, OperationError
from dataknobs_activity.grading import evaluate
from dataknobs_activity.lifecycle import Surface
from dataknobs_activity.manifest import ActivityManifest
from dataknobs_activity.models import (
    AttemptState,
    EvaluationResult,
    Model,
    PartState,
    SubmissionPayload,
)
from dataknobs_activity.registry import (
    CreationContext,
    CreationFunction,
    CreationRegistry,
    ElementRegistry,
)
from dataknobs_activity.settings import ActivitySettings, configure_logging

logger = logging.getLogger(__name__)

Evaluator = Callable[
    [Model, AttemptState, SubmissionPayload],
    Union[EvaluationResult, Awaitable[EvaluationResult]],
]


@dataclass
class ActivityInstance:
    """One activity as stored by the host."""

    activity_id: str
    activity_type: str
    model: Model
    revision: int = 1


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a model update."""

    activity_id: str
    revision: int

    def to_dict(self) -> Dict[str, Any]:
        return {"activityId": self.activity_id, "revision": self.revision}


class ActivityHost(EventTarget):
    """Hosts activity surfaces and answers their events.

    Args:
        creation_registry: Creation functions by activity type
        element_registry: Surface classes by element name
        evaluator: Grades submissions; defaults to
            :func:`~dataknobs_activity.grading.evaluate`
    """

    def __init__(
        self,
        creation_registry: CreationRegistry,
        element_registry: ElementRegistry,
        evaluator: Evaluator | None = None,
    ) -> None:
        super().__init__()
        self.creation_registry = creation_registry
        self.element_registry = element_registry
        self._evaluator: Evaluator = evaluator or evaluate
        self._manifests: Dict[str, ActivityManifest] = {}
        self._instances: Dict[str, ActivityInstance] = {}
        self._attempts: Dict[str, tuple[str, AttemptState]] = {}
        self._surfaces: Dict[Surface, str] = {}
        self._tasks: Set[asyncio.Task[None]] = set()

        self.add_event_listener(MODEL_UPDATED, self._on_model_updated)
        self.add_event_listener(SUBMIT_ACTIVITY, self._on_submit_activity)

    @classmethod
    def from_settings(cls, settings: ActivitySettings, evaluator: Evaluator | None = None) -> ActivityHost:
        """Build registries and a host from settings.

        Applies the configured log level, loads the manifest and registers the
        activity with a creation function using the configured defaults.
        """
        configure_logging(settings)
        host = cls(CreationRegistry(), ElementRegistry(), evaluator=evaluator)
        host.add_activity(settings.load_manifest(), settings.creation_function())
        return host

    def add_activity(
        self,
        manifest: ActivityManifest,
        create_fn: CreationFunction = create_default_model,
    ) -> None:
        """Register an activity type with this host's registries."""
        register_activity(manifest, self.creation_registry, self.element_registry, create_fn)
        self._manifests[manifest.id] = manifest

    # Instances and attempts

    async def create_activity(
        self,
        activity_type: str,
        context: CreationContext | None = None,
    ) -> ActivityInstance:
        """Create and store a new instance with the type's default model."""
        model = await self.creation_registry.create(activity_type, context)
        instance = ActivityInstance(
            activity_id=str(uuid.uuid4()),
            activity_type=activity_type,
            model=model,
        )
        self._instances[instance.activity_id] = instance
        logger.info("Created %s activity %s", activity_type, instance.activity_id)
        return instance

    def get_instance(self, activity_id: str) -> ActivityInstance:
        """Look up a stored instance.

        Raises:
            NotFoundError: If the activity does not exist
        """
        if activity_id not in self._instances:
            raise NotFoundError(
                f"Activity not found: {activity_id}",
                context={"activity_id": activity_id},
            )
        return self._instances[activity_id]

    def start_attempt(self, activity_id: str) -> AttemptState:
        """Start a fresh attempt with one part attempt per model part."""
        instance = self.get_instance(activity_id)
        state = AttemptState(
            attempt_guid=str(uuid.uuid4()),
            parts=[
                PartState(attempt_guid=str(uuid.uuid4()), partId=part.id)
                for part in instance.model.parts
            ],
        )
        self._attempts[state.attempt_guid] = (activity_id, state)
        return state

    def get_attempt(self, attempt_guid: str) -> tuple[str, AttemptState]:
        """Return the activity id and state of an attempt.

        Raises:
            NotFoundError: If the attempt is unknown
        """
        if attempt_guid not in self._attempts:
            raise NotFoundError(
                f"Attempt not found: {attempt_guid}",
                context={"attempt_guid": attempt_guid},
            )
        return self._attempts[attempt_guid]

    # Surfaces

    def _manifest_for(self, instance: ActivityInstance) -> ActivityManifest:
        if instance.activity_type not in self._manifests:
            raise NotFoundError(
                f"No manifest for activity type: {instance.activity_type}",
                context={"activity_type": instance.activity_type},
            )
        return self._manifests[instance.activity_type]

    def _attach(self, surface: Surface, activity_id: str) -> Surface:
        self._surfaces[surface] = activity_id
        return surface

    def open_authoring(self, activity_id: str) -> Surface:
        """Instantiate, configure and mount the authoring surface."""
        instance = self.get_instance(activity_id)
        element = self._manifest_for(instance).authoring.element
        surface = self._attach(self.element_registry.create_element(element, parent=self), activity_id)

        surface.set_attribute(MODEL, encode_attribute(instance.model))
        surface.mount()
        return surface

    def open_delivery(
        self,
        activity_id: str,
        state: AttemptState | None = None,
        graded: bool = False,
        presenter: FeedbackPresenter | None = None,
    ) -> Surface:
        """Instantiate, configure and mount the delivery surface.

        A new attempt is started when ``state`` is not given.
        """
        instance = self.get_instance(activity_id)
        element = self._manifest_for(instance).delivery.element
        state = state or self.start_attempt(activity_id)
        surface = self._attach(
            self.element_registry.create_element(element, parent=self, presenter=presenter),
            activity_id,
        )

        surface.set_attribute(MODEL, encode_attribute(instance.model))
        surface.set_attribute(STATE, encode_attribute(state))
        surface.set_attribute(GRADED, encode_attribute(graded))
        surface.mount()
        return surface

    def close(self, surface: Surface) -> None:
        """Forget a surface the host opened.

        A closed surface no longer receives pushed models, and its events
        fail with :class:`NotFoundError`.

        Raises:
            NotFoundError: If the surface is not open on this host
        """
        if surface not in self._surfaces:
            raise NotFoundError(
                f"{type(surface).__name__} is not open on this host",
                context={"surface": type(surface).__name__},
            )
        activity_id = self._surfaces.pop(surface)
        logger.debug("Closed %s for activity %s", type(surface).__name__, activity_id)

    def surfaces_for(self, activity_id: str) -> List[Surface]:
        return [surface for surface, owner in self._surfaces.items() if owner == activity_id]

    def push_model(self, activity_id: str, model: Model) -> None:
        """Make ``model`` current and push it to every open surface.

        This is how an undo or redo reaches the surfaces.
        """
        instance = self.get_instance(activity_id)
        instance.model = model
        raw = encode_attribute(model)
        for surface in self.surfaces_for(activity_id):
            surface.set_attribute(MODEL, raw)

    def new_attempt(self, surface: Surface) -> AttemptState:
        """Replace the attempt shown by a delivery surface with a fresh one."""
        state = self.start_attempt(self._activity_of(surface))
        surface.set_attribute(STATE, encode_attribute(state))
        return state

    def _activity_of(self, surface: EventTarget | None) -> str:
        if surface not in self._surfaces:
            raise NotFoundError("Event from a surface this host did not open")
        return self._surfaces[surface]  # type: ignore[index]

    # Event handling

    def _schedule(self, event: ActivityEvent, handler: Callable[[ActivityEvent], Awaitable[Any]]) -> None:
        continuation: Continuation = event.detail["continuation"]
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            continuation(None, OperationError(
                f"Cannot handle {event.name} without a running event loop",
                context={"event_id": event.event_id},
            ))
            return

        task = loop.create_task(self._complete(event, handler))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _complete(
        self,
        event: ActivityEvent,
        handler: Callable[[ActivityEvent], Awaitable[Any]],
    ) -> None:
        continuation: Continuation = event.detail["continuation"]
        try:
            result = await handler(event)
        except Exception as e:
            logger.warning("Handling %s event %s failed: %s", event.name, event.event_id[:8], e)
            continuation(None, e)
        else:
            continuation(result, None)

    def _on_model_updated(self, event: ActivityEvent) -> None:
        self._schedule(event, self._save_model)

    def _on_submit_activity(self, event: ActivityEvent) -> None:
        self._schedule(event, self._grade_submission)

    async def _save_model(self, event: ActivityEvent) -> SaveResult:
        instance = self.get_instance(self._activity_of(event.target))
        instance.model = event.detail["model"]
        instance.revision += 1
        logger.info("Saved activity %s revision %d", instance.activity_id, instance.revision)
        return SaveResult(activity_id=instance.activity_id, revision=instance.revision)

    async def _grade_submission(self, event: ActivityEvent) -> EvaluationResult:
        activity_id, state = self.get_attempt(event.detail["attemptGuid"])
        instance = self.get_instance(activity_id)

        result = self._evaluator(instance.model, state, event.detail["payload"])
        if inspect.isawaitable(result):
            result = await result
        return result

    async def drain(self) -> None:
        """Wait until every event received so far has been answered."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


__all__ = ["ActivityHost", "ActivityInstance", "SaveResult", "Evaluator"]
