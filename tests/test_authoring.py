"""Tests for the authoring surface."""

import logging

import pytest

from dataknobs_activity.attributes import encode_attribute
from dataknobs_activity.authoring import AuthoringSurface
from dataknobs_activity.builder import build_model
from dataknobs_activity.continuation import Continuation
from dataknobs_activity.events import MODEL_UPDATED
from dataknobs_activity.exceptions import ValidationError
from dataknobs_activity.views import RenderTarget


@pytest.fixture
def surface(recording_host, model_attr):
    surface = AuthoringSurface(parent=recording_host)
    surface.set_attribute("model", model_attr)
    surface.mount()
    return surface


class TestRender:

    def test_observes_model_only(self):
        assert AuthoringSurface.observed_attributes == ("model",)

    def test_fields_reflect_model(self, surface):
        fields = surface.render_target.fields

        assert fields == {"stem": "What is two plus two?", "correct": "4"}
        assert "save" in surface.render_target.controls

    def test_markup_contains_values(self, surface):
        html = surface.render_target.html

        assert 'id="stem" value="What is two plus two?"' in html
        assert 'id="correct" value="4"' in html

    def test_stem_is_escaped(self, recording_host):
        surface = AuthoringSurface(parent=recording_host)
        surface.set_attribute("model", encode_attribute(build_model('<b>"bold"</b>', 1)))
        surface.mount()

        assert "<b>" not in surface.render_target.html
        assert surface.render_target.value("stem") == '<b>"bold"</b>'

    def test_model_change_rerenders(self, surface):
        """Test the fields follow the latest model attribute, not the first."""
        surface.set_attribute("model", encode_attribute(build_model("What is 3 x 3?", 9)))

        assert surface.render_target.value("stem") == "What is 3 x 3?"
        assert surface.render_target.value("correct") == "9"

    def test_rerender_discards_unsaved_edits(self, surface):
        surface.render_target.set_value("stem", "half-typed")
        surface.set_attribute("model", encode_attribute(build_model("Undone", 2)))

        assert surface.render_target.value("stem") == "Undone"

    def test_mount_replaces_render_target(self, recording_host, model_attr):
        surface = AuthoringSurface(parent=recording_host)
        before = surface.render_target
        surface.set_attribute("model", model_attr)
        surface.mount()

        assert isinstance(surface.render_target, RenderTarget)
        assert surface.render_target is not before

    def test_malformed_model_fails_mount(self, recording_host):
        surface = AuthoringSurface(parent=recording_host)
        surface.set_attribute("model", '{"stem": "Q", "authoring": {"parts": []}}')

        with pytest.raises(ValidationError) as exc_info:
            surface.mount()

        assert exc_info.value.context["attribute"] == "model"

    def test_missing_model_fails_mount(self, recording_host):
        with pytest.raises(ValidationError):
            AuthoringSurface(parent=recording_host).mount()

    def test_malformed_model_fails_rerender(self, surface):
        with pytest.raises(ValidationError):
            surface.set_attribute("model", "[]")


class TestSubmit:

    def test_submit_dispatches_replacement_model(self, surface, recording_host):
        """Test one modelUpdated event carries the model built from the fields."""
        surface.render_target.set_value("stem", "Q2")
        surface.render_target.set_value("correct", "5")

        continuation = surface.submit()

        assert len(recording_host.events) == 1
        event = recording_host.events[0]
        assert event.name == MODEL_UPDATED
        assert event.bubbles is True
        assert event.detail["model"] == build_model("Q2", 5)
        assert event.detail["continuation"] is continuation
        assert isinstance(continuation, Continuation)
        assert continuation.correlation_id == event.event_id

    def test_save_control_submits(self, surface, recording_host):
        surface.render_target.click("save")

        assert [e.name for e in recording_host.events] == [MODEL_UPDATED]
        assert recording_host.events[0].detail["model"] == build_model("What is two plus two?", "4")

    def test_submit_returns_without_waiting(self, surface):
        continuation = surface.submit()

        assert not continuation.done()

    def test_default_completion_logs_result(self, surface, caplog):
        caplog.set_level(logging.INFO, logger="dataknobs_activity")
        continuation = surface.submit()

        continuation({"revision": 2}, None)

        assert "Model update saved" in caplog.text

    def test_default_completion_logs_error(self, surface, caplog):
        continuation = surface.submit()

        continuation(None, RuntimeError("save failed"))

        assert "Model update failed: save failed" in caplog.text

    def test_completion_can_be_overridden(self, recording_host, model_attr):
        outcomes = []

        class RecordingAuthoring(AuthoringSurface):
            def on_save_complete(self, result, error):
                outcomes.append((result, error))

        surface = RecordingAuthoring(parent=recording_host)
        surface.set_attribute("model", model_attr)
        surface.mount()

        surface.submit()("ok", None)

        assert outcomes == [("ok", None)]
