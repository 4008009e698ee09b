"""
supervisor.py
- Coordinates graceful shutdown of the HTTP server and every periodic runner.
- One asyncio.Event is the shutdown signal; runners observe it at their tick-wait point.
- In-flight requests, sweeps and docker processes are allowed to finish.
"""

import asyncio
import contextlib
import signal

import uvicorn
from loguru import logger


class Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the ShutdownCoordinator."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield

    def install_signal_handlers(self):
        pass


class ShutdownCoordinator:
    def __init__(self):
        self.stop_event = asyncio.Event()
        self._tasks = {}

    @property
    def names(self):
        return list(self._tasks)

    def request_shutdown(self, reason="requested"):
        if self.stop_event.is_set():
            return
        logger.info(f"[supervisor] Shutdown {reason}: no new work will be accepted, draining in-flight work...")
        self.stop_event.set()

    def install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.request_shutdown, f"signal {sig.name}")

    def spawn(self, name, coro):
        task = asyncio.create_task(coro, name=name)
        self._tasks[name] = task
        return task

    def attach_server(self, server, name="http"):
        """
        Serve HTTP until shutdown is requested.
        If the server exits on its own, shutdown is requested for everything else.
        """

        async def serve():
            watcher = asyncio.create_task(self._stop_server_on_shutdown(server))
            try:
                await server.serve()
            finally:
                watcher.cancel()
                self.request_shutdown(f"after {name} server exit")

        return self.spawn(name, serve())

    async def _stop_server_on_shutdown(self, server):
        await self.stop_event.wait()
        server.should_exit = True

    async def wait(self):
        """
        Wait for every component to terminate.

        Returns:
            dict: component name -> exception for components that failed.
        """
        names = list(self._tasks)
        results = await asyncio.gather(*self._tasks.values(), return_exceptions=True)

        failures = {}
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(f"[supervisor] Error on shutdown in {name}: {result!r}")
                failures[name] = result
        return failures
