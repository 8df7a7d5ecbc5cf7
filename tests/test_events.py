"""Tests for event dispatch between surfaces and hosts."""

from datetime import datetime

from dataknobs_activity.events import MODEL_UPDATED, SUBMIT_ACTIVITY, ActivityEvent, EventTarget


class TestActivityEvent:

    def test_defaults(self):
        event = ActivityEvent(name=MODEL_UPDATED)

        assert event.bubbles is True
        assert event.detail == {}
        assert event.event_id
        assert isinstance(event.timestamp, datetime)
        assert not event.propagation_stopped

    def test_event_names(self):
        assert MODEL_UPDATED == "modelUpdated"
        assert SUBMIT_ACTIVITY == "submitActivity"


class TestEventTarget:

    def test_listener_receives_event(self):
        target = EventTarget()
        received = []
        target.add_event_listener(MODEL_UPDATED, received.append)

        event = ActivityEvent(name=MODEL_UPDATED, detail={"x": 1})
        delivered = target.dispatch_event(event)

        assert delivered == 1
        assert received == [event]
        assert event.target is target
        assert event.current_target is None

    def test_listeners_filtered_by_name(self):
        target = EventTarget()
        received = []
        target.add_event_listener(SUBMIT_ACTIVITY, received.append)

        assert target.dispatch_event(ActivityEvent(name=MODEL_UPDATED)) == 0
        assert received == []

    def test_duplicate_listener_registered_once(self):
        target = EventTarget()
        received = []
        target.add_event_listener(MODEL_UPDATED, received.append)
        target.add_event_listener(MODEL_UPDATED, received.append)

        target.dispatch_event(ActivityEvent(name=MODEL_UPDATED))

        assert len(received) == 1
        assert target.listener_count(MODEL_UPDATED) == 1

    def test_remove_listener(self):
        target = EventTarget()
        received = []
        target.add_event_listener(MODEL_UPDATED, received.append)
        target.remove_event_listener(MODEL_UPDATED, received.append)
        target.remove_event_listener(MODEL_UPDATED, print)

        target.dispatch_event(ActivityEvent(name=MODEL_UPDATED))

        assert received == []

    def test_bubbles_to_ancestors(self):
        """Test a bubbling event reaches the host through an intermediate target."""
        host = EventTarget()
        page = EventTarget(parent=host)
        surface = EventTarget(parent=page)
        seen = []
        page.add_event_listener(MODEL_UPDATED, lambda e: seen.append(("page", e.current_target)))
        host.add_event_listener(MODEL_UPDATED, lambda e: seen.append(("host", e.current_target)))

        event = ActivityEvent(name=MODEL_UPDATED)
        surface.dispatch_event(event)

        assert seen == [("page", page), ("host", host)]
        assert event.target is surface

    def test_non_bubbling_event_stays_local(self):
        host = EventTarget()
        surface = EventTarget(parent=host)
        seen = []
        host.add_event_listener(MODEL_UPDATED, seen.append)

        surface.dispatch_event(ActivityEvent(name=MODEL_UPDATED, bubbles=False))

        assert seen == []

    def test_stop_propagation(self):
        host = EventTarget()
        page = EventTarget(parent=host)
        seen = []
        page.add_event_listener(MODEL_UPDATED, lambda e: e.stop_propagation())
        host.add_event_listener(MODEL_UPDATED, seen.append)

        page.dispatch_event(ActivityEvent(name=MODEL_UPDATED))

        assert seen == []

    def test_failing_listener_does_not_stop_others(self, caplog):
        target = EventTarget()
        received = []

        def broken(event):
            raise RuntimeError("listener failure")

        target.add_event_listener(MODEL_UPDATED, broken)
        target.add_event_listener(MODEL_UPDATED, received.append)

        delivered = target.dispatch_event(ActivityEvent(name=MODEL_UPDATED))

        assert delivered == 2
        assert len(received) == 1
        assert "Error in listener" in caplog.text
