"""Shared fixtures for dataknobs_activity tests."""

from typing import List

import pytest

from dataknobs_activity.attributes import encode_attribute
from dataknobs_activity.builder import build_model
from dataknobs_activity.events import MODEL_UPDATED, SUBMIT_ACTIVITY, ActivityEvent, EventTarget
from dataknobs_activity.host import ActivityHost
from dataknobs_activity.models import AttemptState, PartState
from dataknobs_activity.settings import ActivitySettings


class RecordingHost(EventTarget):
    """Event target that records every surface event it receives."""

    def __init__(self):
        super().__init__()
        self.events: List[ActivityEvent] = []
        self.add_event_listener(MODEL_UPDATED, self.events.append)
        self.add_event_listener(SUBMIT_ACTIVITY, self.events.append)


@pytest.fixture
def recording_host():
    """A parent target that captures dispatched events."""
    return RecordingHost()


@pytest.fixture
def sample_model():
    """The default two-plus-two model."""
    return build_model("What is two plus two?", 4)


@pytest.fixture
def sample_state():
    """An attempt with a single part attempt."""
    return AttemptState(
        attempt_guid="attempt-1",
        parts=[PartState(attempt_guid="part-attempt-1")],
    )


@pytest.fixture
def model_attr(sample_model):
    """The sample model as an attribute string."""
    return encode_attribute(sample_model)


@pytest.fixture
def state_attr(sample_state):
    """The sample attempt state as an attribute string."""
    return encode_attribute(sample_state)


@pytest.fixture
def host():
    """A reference host with the sample activity registered."""
    return ActivityHost.from_settings(ActivitySettings())
