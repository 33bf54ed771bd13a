import asyncio
import contextlib
import logging
from typing import Optional

from api_checker.core.metrics_sink import MetricsSink
from api_checker.core.pipeline import Pipeline

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Drives the pipeline on a fixed interval, never running two pipeline runs
    at once. A tick that fires while a run is in progress is skipped.
    """

    def __init__(
        self,
        pipeline: Pipeline,
        interval: float,
        metrics: Optional[MetricsSink] = None,
    ):
        """
        Initialize the Scheduler.

        Args:
            pipeline (Pipeline): The pipeline to run on every tick.
            interval (float): Seconds between ticks.
            metrics (Optional[MetricsSink]): Sink used to count skipped ticks.
        """
        self.pipeline = pipeline
        self.interval = interval
        self.metrics = metrics
        self._task: Optional[asyncio.Task] = None
        self._run_task: Optional[asyncio.Task] = None
        self._running = False
        self.skipped_ticks = 0

    async def start(self):
        """
        Start the tick loop as an asynchronous task.
        """
        self._running = True
        self._task = asyncio.create_task(self._tick_loop())
        logger.info(f"Scheduler started, running pipeline every {self.interval}s.")

    async def stop(self):
        """
        Stop the tick loop and cancel any in-flight pipeline run.
        """
        self._running = False
        for task in (self._task, self._run_task):
            if task and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        logger.info("Scheduler stopped.")

    def tick(self) -> bool:
        """
        Start a pipeline run unless the previous one is still executing.

        Returns:
            bool: True if a run was started, False if the tick was skipped.
        """
        if self._run_task is not None and not self._run_task.done():
            self.skipped_ticks += 1
            if self.metrics:
                self.metrics.record_skipped_tick()
            logger.warning(
                "Skipping tick: previous pipeline run is still executing "
                f"(probe={getattr(self.pipeline.current_probe, 'name', None)})"
            )
            return False
        self._run_task = asyncio.create_task(self._guarded_run())
        return True

    async def _guarded_run(self):
        try:
            await self.pipeline.run_once()
        except Exception:
            logger.exception("Pipeline run failed")

    async def _tick_loop(self):
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while self._running:
            self.tick()
            next_tick += self.interval
            # Drop ticks missed during a stall instead of replaying them.
            if next_tick < loop.time():
                next_tick = loop.time()
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
