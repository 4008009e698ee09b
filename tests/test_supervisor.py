"""Tests for shutdown coordination and worker startup."""

import asyncio

import pytest

from conductor import main
from conductor.core.models import Config
from conductor.supervisor import ShutdownCoordinator


class StubServer:
    """Minimal uvicorn.Server stand-in: serves until should_exit is set."""

    def __init__(self, in_flight=None):
        self.should_exit = False
        self.in_flight = in_flight
        self.drained = False

    async def serve(self):
        while not self.should_exit:
            await asyncio.sleep(0.005)
        if self.in_flight is not None:
            await self.in_flight.wait()
        self.drained = True


class TestShutdownCoordinator:
    @pytest.mark.asyncio
    async def test_stop_event_ends_every_worker(self):
        coordinator = ShutdownCoordinator()
        stopped = []

        async def worker(name):
            await coordinator.stop_event.wait()
            stopped.append(name)

        coordinator.spawn("a", worker("a"))
        coordinator.spawn("b", worker("b"))
        server = StubServer()
        coordinator.attach_server(server)

        coordinator.request_shutdown("by test")
        failures = await asyncio.wait_for(coordinator.wait(), timeout=1)

        assert failures == {}
        assert sorted(stopped) == ["a", "b"]
        assert server.should_exit is True
        assert coordinator.names == ["a", "b", "http"]

    @pytest.mark.asyncio
    async def test_server_drains_in_flight_requests(self):
        coordinator = ShutdownCoordinator()
        in_flight = asyncio.Event()
        server = StubServer(in_flight)
        coordinator.attach_server(server)

        coordinator.request_shutdown()
        waiter = asyncio.create_task(coordinator.wait())
        await asyncio.sleep(0.02)
        assert not waiter.done()

        in_flight.set()
        await asyncio.wait_for(waiter, timeout=1)
        assert server.drained is True

    @pytest.mark.asyncio
    async def test_failed_worker_is_reported_without_blocking_others(self, log_messages):
        coordinator = ShutdownCoordinator()
        finished = asyncio.Event()

        async def broken():
            await coordinator.stop_event.wait()
            raise RuntimeError("worker blew up")

        async def healthy():
            await coordinator.stop_event.wait()
            await asyncio.sleep(0.01)
            finished.set()

        coordinator.spawn("broken", broken())
        coordinator.spawn("healthy", healthy())
        coordinator.request_shutdown()
        failures = await asyncio.wait_for(coordinator.wait(), timeout=1)

        assert list(failures) == ["broken"]
        assert finished.is_set()
        assert any("Error on shutdown in broken" in m for m in log_messages)

    @pytest.mark.asyncio
    async def test_server_exit_requests_shutdown(self):
        coordinator = ShutdownCoordinator()
        server = StubServer()
        server.should_exit = True  # exits immediately, e.g. after a startup failure

        coordinator.attach_server(server)
        await asyncio.wait_for(coordinator.wait(), timeout=1)

        assert coordinator.stop_event.is_set()

    def test_request_shutdown_is_idempotent(self, log_messages):
        coordinator = ShutdownCoordinator()
        coordinator.request_shutdown()
        coordinator.request_shutdown()

        assert coordinator.stop_event.is_set()
        assert len([m for m in log_messages if "Shutdown" in m]) == 1


class TestStartWorkers:
    @pytest.mark.asyncio
    async def test_disabled_intervals_start_nothing(self, config, fake_runner):
        coordinator = ShutdownCoordinator()

        main.start_workers(config, fake_runner, coordinator)

        assert coordinator.names == []

    @pytest.mark.asyncio
    async def test_enabled_intervals_start_both_loops(self, registry, fake_runner):
        config = Config(token="t", compositions=registry, force_update_interval=3600, prune_interval=3600)
        coordinator = ShutdownCoordinator()

        main.start_workers(config, fake_runner, coordinator)
        await asyncio.sleep(0.01)
        coordinator.request_shutdown()
        failures = await asyncio.wait_for(coordinator.wait(), timeout=1)

        assert coordinator.names == ["force_update", "gc_prune"]
        assert failures == {}
        # Both loops fire their first tick immediately.
        assert sorted(map(str, fake_runner.work_directories)) == ["/srv/cache", "/srv/db", "/srv/web", "None"]

    @pytest.mark.asyncio
    async def test_only_prune_enabled(self, registry, fake_runner):
        config = Config(token="t", compositions=registry, prune_interval=60)
        coordinator = ShutdownCoordinator()

        main.start_workers(config, fake_runner, coordinator)
        coordinator.request_shutdown()
        await coordinator.wait()

        assert coordinator.names == ["gc_prune"]
        assert all(call[2] is None for call in fake_runner.calls)


class TestCli:
    def test_bad_config_exits_before_starting(self, tmp_path, monkeypatch):
        started = []
        monkeypatch.setattr(main, "serve", lambda config: started.append(config))

        with pytest.raises(SystemExit) as exc_info:
            main.cli([str(tmp_path / "missing.toml")])

        assert exc_info.value.code == 1
        assert started == []

    def test_loads_config_and_serves(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('token = "abc"\n\n[web]\nwork = "/srv/web"\n')
        served = []

        async def fake_serve(config):
            served.append(config)

        monkeypatch.setattr(main, "serve", fake_serve)
        main.cli([str(path)])

        assert served[0].compositions.names() == ["web"]

    def test_dry_run_selects_dry_run_runner(self, monkeypatch):
        monkeypatch.setattr("conductor.core.config.DRY_RUN", True)
        assert type(main.build_runner()).__name__ == "DryRunRunner"

        monkeypatch.setattr("conductor.core.config.DRY_RUN", False)
        assert type(main.build_runner()).__name__ == "SubprocessRunner"
