"""Unit tests for BackgroundTaskRunner, call_port and contribution types."""

from __future__ import annotations

import asyncio

import pytest

from praefectus.foundation.application import (
    BackgroundTaskRunner,
    LifespanContribution,
    MiddlewareContribution,
)
from praefectus.foundation.application.port_calls import call_port
from praefectus.foundation.domain import ConflictError, TransportError


@pytest.mark.unit
class TestBackgroundTaskRunner:
    @pytest.mark.asyncio
    async def test_spawned_task_runs_without_being_awaited(self) -> None:
        runner = BackgroundTaskRunner()
        done = asyncio.Event()

        async def work() -> None:
            done.set()

        runner.spawn(work(), name="work")
        await runner.wait_idle()

        assert done.is_set()
        assert runner.is_idle()

    @pytest.mark.asyncio
    async def test_pending_counts_running_tasks(self) -> None:
        runner = BackgroundTaskRunner()
        gate = asyncio.Event()

        runner.spawn(gate.wait())
        runner.spawn(gate.wait())

        assert runner.pending == 2
        gate.set()
        await runner.wait_idle()
        assert runner.pending == 0

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        runner = BackgroundTaskRunner()

        async def explode() -> None:
            raise RuntimeError("initializer crashed")

        with caplog.at_level("ERROR"):
            runner.spawn(explode(), name="initialize:t1")
            await runner.wait_idle()

        [record] = [r for r in caplog.records if r.getMessage() == "background_task_failed"]
        assert record.task_name == "initialize:t1"
        assert record.error == "initializer crashed"

    @pytest.mark.asyncio
    async def test_wait_idle_covers_tasks_spawned_by_tasks(self) -> None:
        runner = BackgroundTaskRunner()
        finished: list[str] = []

        async def child() -> None:
            finished.append("child")

        async def parent() -> None:
            runner.spawn(child())
            finished.append("parent")

        runner.spawn(parent())
        await runner.wait_idle()

        assert finished == ["parent", "child"]

    @pytest.mark.asyncio
    async def test_drain_waits_for_outstanding_work(self) -> None:
        runner = BackgroundTaskRunner()
        finished = asyncio.Event()

        async def slow() -> None:
            await asyncio.sleep(0.01)
            finished.set()

        runner.spawn(slow())
        await runner.drain(timeout=5)

        assert finished.is_set()

    @pytest.mark.asyncio
    async def test_drain_cancels_after_timeout(self) -> None:
        runner = BackgroundTaskRunner()
        task = runner.spawn(asyncio.Event().wait())

        await runner.drain(timeout=0.01)

        assert task.cancelled()
        assert runner.is_idle()

    @pytest.mark.asyncio
    async def test_spawn_after_drain_is_rejected(self) -> None:
        runner = BackgroundTaskRunner()
        await runner.drain()

        async def work() -> None:
            return None

        with pytest.raises(RuntimeError, match="closed"):
            runner.spawn(work())


@pytest.mark.unit
class TestCallPort:
    @pytest.mark.asyncio
    async def test_returns_result(self) -> None:
        async def fetch() -> int:
            return 42

        assert await call_port("fetch", fetch()) == 42

    @pytest.mark.asyncio
    async def test_domain_error_passes_through(self) -> None:
        async def fetch() -> None:
            raise ConflictError("slug taken")

        with pytest.raises(ConflictError, match="slug taken"):
            await call_port("create_tenant", fetch())

    @pytest.mark.asyncio
    async def test_other_errors_become_transport_error(self) -> None:
        async def fetch() -> None:
            raise TimeoutError

        with pytest.raises(TransportError) as exc_info:
            await call_port("get_tenant", fetch(), tenant_id="t1")

        assert exc_info.value.operation == "get_tenant"
        assert exc_info.value.reason == "TimeoutError"
        assert exc_info.value.context["tenant_id"] == "t1"
        assert isinstance(exc_info.value.__cause__, TimeoutError)


@pytest.mark.unit
class TestContributions:
    def test_middleware_priority_bounds(self) -> None:
        with pytest.raises(ValueError, match="between 0 and 499"):
            MiddlewareContribution(object, priority=500)

    def test_lifespan_default_priority(self) -> None:
        contribution = LifespanContribution(hook=lambda app: app)

        assert contribution.priority == 500
