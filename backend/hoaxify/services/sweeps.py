from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable

from sqlalchemy.orm import Session

from hoaxify.core.database import SessionLocal

logger = logging.getLogger(__name__)

SweepJob = Callable[[Session], int]


class PeriodicSweep:
    """
    Owns one background asyncio task that runs ``job`` every ``interval_seconds``.

    Runs are single-flight: the next interval only starts counting after the
    previous run has finished, and ``run_once`` is serialized by a lock, so a
    slow sweep delays the schedule instead of overlapping with itself.
    Failures are logged and never stop the loop.
    """

    def __init__(
        self,
        name: str,
        job: SweepJob,
        interval_seconds: float,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        self.name = name
        self.job = job
        self.interval_seconds = float(interval_seconds)
        self.session_factory = session_factory
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _run_sync(self) -> int | None:
        db = self.session_factory()
        try:
            return self.job(db)
        except Exception:  # noqa: BLE001
            logger.exception("Sweep %s failed", self.name)
            db.rollback()
            return None
        finally:
            db.close()

    async def run_once(self) -> int | None:
        async with self._lock:
            return await asyncio.to_thread(self._run_sync)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting sweep %s every %ss", self.name, self.interval_seconds)
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=f"sweep:{self.name}")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Stopped sweep %s", self.name)
