"""Tests for the error/session funnel."""

import pytest

from fleetstore import Action, Dispatcher, HttpError, TransportError
from fleetstore import db
from fleetstore.funnel import ErrorFunnel, failure_message
from fleetstore.gateway import FailureStream, RequestFailure


def _failure(error, method="GET", path="/api/v1/devices"):
    return RequestFailure(method, path, error)


@pytest.fixture
def failures():
    return FailureStream()


@pytest.fixture
def store():
    return db.create()


class TestFailureMessage:
    def test_server_message_wins(self):
        assert failure_message(_failure(HttpError(409, "Device already exists", "Conflict"))) == (
            "Device already exists"
        )

    def test_status_line_fallback(self):
        assert failure_message(_failure(HttpError(500, None, "Internal Server Error"))) == (
            "500 Internal Server Error"
        )

    def test_transport_error_text(self):
        assert failure_message(_failure(TransportError("offline"))) == "offline"


class TestErrorFunnel:
    def test_domain_failure_sets_status(self, store, failures):
        ErrorFunnel(store, failures)
        failures.emit(_failure(HttpError(400, "bad regex")))
        assert store.deref("post_status") == "bad regex"

    def test_latest_failure_overwrites(self, store, failures):
        ErrorFunnel(store, failures)
        failures.emit(_failure(HttpError(400, "first")))
        failures.emit(_failure(TransportError("second")))
        assert store.deref("post_status") == "second"

    def test_session_expiry_reloads_instead_of_rendering(self, store, failures):
        reloads = []
        ErrorFunnel(store, failures, on_session_expired=lambda: reloads.append(True))
        store.reset("devices", [{"uuid": "a"}])
        failures.emit(_failure(HttpError(401, "Unauthorized")))
        assert reloads == [True]
        assert store.deref("devices") == []
        assert store.deref("post_status") == ""

    def test_session_expiry_without_callback(self, store, failures):
        ErrorFunnel(store, failures)
        store.reset("devices", ["a"])
        failures.emit(_failure(HttpError(401)))
        assert store.deref("devices") == []

    def test_report(self, store, failures):
        funnel = ErrorFunnel(store, failures)
        funnel.report("Device already exists")
        assert store.deref("post_status") == "Device already exists"

    def test_catch_all_clears_status(self, store, failures):
        funnel = ErrorFunnel(store, failures)
        d = Dispatcher()
        funnel.register(d)
        store.reset("post_status", "old failure")
        d.dispatch(Action("get-devices"))
        assert store.deref("post_status") == ""

    def test_catch_all_logs_every_action(self, store, failures, caplog):
        funnel = ErrorFunnel(store, failures)
        d = Dispatcher()
        funnel.register(d)
        with caplog.at_level("INFO", logger="fleetstore.funnel"):
            d.dispatch(Action("no-such-kind", x=1))
        assert "no-such-kind" in caplog.text

    def test_dispose_detaches(self, store, failures):
        funnel = ErrorFunnel(store, failures)
        funnel.dispose()
        failures.emit(_failure(HttpError(400, "ignored")))
        assert store.deref("post_status") == ""

    def test_dispose_idempotent(self, store, failures):
        funnel = ErrorFunnel(store, failures)
        funnel.dispose()
        funnel.dispose()
        assert len(failures) == 0

    def test_one_listener_per_funnel(self, store, failures):
        ErrorFunnel(store, failures)
        assert len(failures) == 1
