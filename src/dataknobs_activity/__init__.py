"""Pluggable activity surfaces for a learning-content host.

An activity is made of two surfaces that the host drives through string
attributes and that report back through one-shot events:

- **AuthoringSurface**: edits a model and sends the replacement with
  ``modelUpdated``
- **DeliverySurface**: collects a learner's answer, sends it with
  ``submitActivity`` and presents the returned feedback

Each outbound event carries a :class:`Continuation` that the host invokes
exactly once with ``(result, error)``. New instances are created by the
coroutine registered for the activity type in a :class:`CreationRegistry`.

Example:
    ```python
    from dataknobs_activity import ActivityHost, ActivitySettings

    host = ActivityHost.from_settings(ActivitySettings())
    instance = await host.create_activity("oli_sample")

    authoring = host.open_authoring(instance.activity_id)
    authoring.render_target.set_value("correct", "5")
    saved = await authoring.submit()
    ```
"""

from dataknobs_activity.attributes import encode_attribute
from dataknobs_activity.authoring import AuthoringSurface
from dataknobs_activity.builder import build_model, correct_answer
from dataknobs_activity.continuation import Continuation
from dataknobs_activity.creation import create_default_model, register_activity
from dataknobs_activity.delivery import DeliverySurface
from dataknobs_activity.events import (
    MODEL_UPDATED,
    SUBMIT_ACTIVITY,
    ActivityEvent,
    EventTarget,
)
from dataknobs_activity.exceptions import (
    ActivityError,
    ConfigurationError,
    ContinuationError,
    NotFoundError,
    OperationError,
    RegistrationError,
    ValidationError,
)
from dataknobs_activity.grading import evaluate
from dataknobs_activity.host import ActivityHost, ActivityInstance, SaveResult
from dataknobs_activity.lifecycle import Surface, SurfaceState
from dataknobs_activity.manifest import SAMPLE_MANIFEST, ActivityManifest, load_manifest
from dataknobs_activity.models import (
    AttemptState,
    Evaluation,
    EvaluationResult,
    Feedback,
    Model,
    Part,
    PartResponse,
    PartState,
    Response,
    ScoringStrategy,
)
from dataknobs_activity.registry import CreationContext, CreationRegistry, ElementRegistry
from dataknobs_activity.settings import ActivitySettings, configure_logging

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Surfaces
    "Surface",
    "SurfaceState",
    "AuthoringSurface",
    "DeliverySurface",
    # Events
    "ActivityEvent",
    "EventTarget",
    "Continuation",
    "MODEL_UPDATED",
    "SUBMIT_ACTIVITY",
    # Model
    "Model",
    "Part",
    "Response",
    "Feedback",
    "ScoringStrategy",
    "AttemptState",
    "PartState",
    "PartResponse",
    "Evaluation",
    "EvaluationResult",
    "build_model",
    "correct_answer",
    "encode_attribute",
    # Registration
    "CreationContext",
    "CreationRegistry",
    "ElementRegistry",
    "create_default_model",
    "register_activity",
    "ActivityManifest",
    "SAMPLE_MANIFEST",
    "load_manifest",
    # Settings
    "ActivitySettings",
    "configure_logging",
    # Host
    "ActivityHost",
    "ActivityInstance",
    "SaveResult",
    "evaluate",
    # Exceptions
    "ActivityError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "RegistrationError",
    "ContinuationError",
]
