"""Tests for Workflow sequencing and short-circuit."""

import pytest

from fleetstore import AlreadyExists, HttpError, TransportError, Workflow


def _recorder(log, name, error=None):
    async def step():
        log.append(name)
        if error is not None:
            raise error

    return step


class TestWorkflow:
    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self):
        log = []
        wf = Workflow("w").step("a", _recorder(log, "a")).step("b", _recorder(log, "b"))
        result = await wf.run()
        assert log == ["a", "b"]
        assert result.ok
        assert not result.partial
        assert result.completed == ["a", "b"]
        assert result.steps == ["a", "b"]

    @pytest.mark.asyncio
    async def test_first_failure_stops_run(self):
        log = []
        error = HttpError(500, "resolver down")
        wf = (
            Workflow("create-device")
            .step("probe", _recorder(log, "probe"))
            .step("create", _recorder(log, "create"))
            .step("associate", _recorder(log, "associate", error))
            .step("refresh", _recorder(log, "refresh"))
        )
        result = await wf.run()
        assert log == ["probe", "create", "associate"]
        assert result.failed_step == "associate"
        assert result.error is error
        assert result.completed == ["probe", "create"]
        assert result.partial

    @pytest.mark.asyncio
    async def test_abort_at_first_step_is_not_partial(self):
        log = []
        wf = (
            Workflow("w")
            .step("probe", _recorder(log, "probe", AlreadyExists("Device", "D1")))
            .step("create", _recorder(log, "create"))
        )
        result = await wf.run()
        assert log == ["probe"]
        assert not result.ok
        assert not result.partial
        assert isinstance(result.error, AlreadyExists)

    @pytest.mark.asyncio
    async def test_transport_errors_abort(self):
        wf = Workflow("w").step("a", _recorder([], "a", TransportError("offline")))
        result = await wf.run()
        assert result.failed_step == "a"

    @pytest.mark.asyncio
    async def test_programming_errors_propagate(self):
        wf = Workflow("w").step("a", _recorder([], "a", KeyError("deviceId")))
        with pytest.raises(KeyError):
            await wf.run()

    @pytest.mark.asyncio
    async def test_partial_failure_is_logged(self, caplog):
        wf = (
            Workflow("create-device")
            .step("create", _recorder([], "create"))
            .step("associate", _recorder([], "associate", HttpError(500)))
        )
        await wf.run()
        assert "not rolled back" in caplog.text

    @pytest.mark.asyncio
    async def test_read_only_prefix_is_not_partial(self, caplog):
        log = []
        wf = (
            Workflow("create-device")
            .step("probe", _recorder(log, "probe"), writes=False)
            .step("create", _recorder(log, "create", HttpError(409, "Device D1 already exists")))
        )
        result = await wf.run()
        assert result.completed == ["probe"]
        assert result.failed_step == "create"
        assert not result.partial
        assert "not rolled back" not in caplog.text

    @pytest.mark.asyncio
    async def test_write_before_read_only_failure_is_partial(self):
        wf = (
            Workflow("w")
            .step("create", _recorder([], "create"))
            .step("refresh", _recorder([], "refresh", TransportError("offline")), writes=False)
        )
        result = await wf.run()
        assert result.partial
