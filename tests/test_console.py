"""Tests for Console wiring: ordering, error slate, session expiry, lifecycle."""

import asyncio
import gc
import logging
import weakref

import httpx
import pytest

from fleetstore import Action, Console, ConsoleConfig, HttpError, HttpxTransport, NoEventLoopError
from fleetstore.config import ApiConfig


class TestErrorSlate:
    @pytest.mark.asyncio
    async def test_status_cleared_at_start_of_next_action(self, console, transport):
        transport.on("GET", "/api/v1/devices", HttpError(500, "core unavailable"))
        console.dispatch(Action("get-devices"))
        await console.settle()
        assert console.store.deref("post_status") == "core unavailable"

        transport.on("GET", "/api/v1/devices", [])
        console.dispatch(Action("get-devices"))
        assert console.store.deref("post_status") == ""
        await console.settle()
        assert console.store.deref("post_status") == ""

    @pytest.mark.asyncio
    async def test_session_expiry_reloads(self, transport):
        reloads = []
        console = Console(transport, on_session_expired=lambda: reloads.append(True))
        console.store.reset("devices", [{"uuid": "a"}])
        transport.on("GET", "/api/v1/packages", HttpError(401, "Unauthorized"))
        console.dispatch(Action("get-packages"))
        await console.settle()
        assert reloads == [True]
        assert console.store.deref("devices") == []
        assert console.store.deref("post_status") == ""


class TestScheduling:
    @pytest.mark.asyncio
    async def test_handlers_run_after_dispatch_returns(self, console, transport):
        transport.on("GET", "/api/v1/devices", [{"uuid": "a"}])
        console.dispatch(Action("get-devices"))
        assert transport.calls == []
        assert console.tasks.pending == 1
        await console.settle()
        assert console.tasks.pending == 0
        assert transport.paths() == ["/api/v1/devices"]

    @pytest.mark.asyncio
    async def test_late_response_applied_without_notifying(self, console, transport):
        transport.gate = asyncio.Event()
        transport.on("GET", "/api/v1/devices", [{"uuid": "late"}])
        fired = []
        console.store.add_watch("devices", "page", lambda: fired.append(True))
        console.dispatch(Action("get-devices"))
        await asyncio.sleep(0)
        console.store.remove_watch("devices", "page")  # view unmounted
        transport.gate.set()
        await console.settle()
        assert console.store.deref("devices") == [{"uuid": "late"}]
        assert fired == []

    @pytest.mark.asyncio
    async def test_chained_dispatch_is_not_reentrant(self, console, transport, caplog):
        transport.on("PUT", "/api/v1/devices/D1/component/P-7", None)
        transport.on("GET", "/api/v1/devices/D1/component", ["P-7"])
        with caplog.at_level(logging.ERROR):
            console.dispatch(Action("add-component-to-device", device="D1", partNumber="P-7"))
            await console.settle()
        assert "DispatchReentryError" not in caplog.text
        assert console.store.deref("components_on_device") == ["P-7"]

    @pytest.mark.asyncio
    async def test_bad_payload_is_logged_not_raised(self, console, transport, caplog):
        with caplog.at_level(logging.ERROR, logger="fleetstore.tasks"):
            console.dispatch(Action("get-package", name="nav"))  # no version
            await console.settle()
        assert "get-package" in caplog.text
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_unknown_kind_reaches_only_catch_all(self, console, transport):
        console.store.reset("post_status", "old")
        console.dispatch(Action("open-settings"))
        await console.settle()
        assert console.store.deref("post_status") == ""
        assert transport.calls == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, transport):
        async with Console(transport) as console:
            transport.on("GET", "/api/v1/devices", [])
            console.dispatch(Action("get-devices"))
        assert transport.closed
        assert transport.paths() == ["/api/v1/devices"]

    @pytest.mark.asyncio
    async def test_closed_console_ignores_actions(self, transport):
        console = Console(transport)
        await console.aclose()
        console.dispatch(Action("get-devices"))
        assert console.tasks.pending == 0

    def test_dispatch_without_loop_is_refused(self, console, transport):
        console.store.reset("post_status", "previous failure")
        with pytest.raises(NoEventLoopError):
            console.dispatch(Action("get-devices"))
        assert console.store.deref("post_status") == "previous failure"
        assert console.tasks.pending == 0
        assert transport.calls == []

    def test_one_handler_per_domain(self, console):
        assert set(console.handlers) == {
            "devices", "packages", "firmware", "components", "filters", "updates",
        }

    def test_from_config(self):
        config = ConsoleConfig(api=ApiConfig(base_url="http://ota.test/", prefix="api/v2"))
        console = Console.from_config(config)
        assert isinstance(console.transport, HttpxTransport)
        assert console.gateway._prefix == "/api/v2"

    @pytest.mark.asyncio
    async def test_over_httpx(self):
        def handler(request):
            assert request.url.path == "/api/v1/devices/search"
            return httpx.Response(200, json=[{"uuid": "u1", "deviceId": "D1"}])

        client = httpx.AsyncClient(base_url="http://ota.test", transport=httpx.MockTransport(handler))
        async with Console(HttpxTransport("http://ota.test", client=client)) as console:
            console.dispatch(Action("search-devices-by-regex", regex="."))
            await console.settle()
            assert console.store.deref("searchable_devices") == [{"uuid": "u1", "deviceId": "D1"}]


class TestOwnership:
    def test_discarded_console_releases_its_atoms(self, transport):
        console = Console(transport)
        refs = [weakref.ref(console.store.atom(name)) for name in console.store.names]
        del console
        gc.collect()
        assert all(ref() is None for ref in refs)
