"""
Periodic refresh scheduling.

Each job runs in its own asyncio task: sleep for the interval, run the job to
completion, repeat. Runs of the same job therefore never overlap, while
different jobs are not synchronised with each other.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import structlog

from ..config.defaults import ScheduleParams
from ..dashboard.service import DashboardService
from ..utils.time import time_elapsed_seconds, utc_now
from .base import EVENT_NEW_SIGNALS, EVENT_PORTFOLIO_UPDATE
from .broadcaster import EventBroadcaster

logger = structlog.get_logger(__name__)

JobFunc = Callable[[], Awaitable[None]]


@dataclass
class ScheduledJob:
    """A named coroutine function run on a fixed interval."""
    name: str
    interval_seconds: float
    func: JobFunc
    run_count: int = 0
    error_count: int = 0


class RefreshScheduler:
    """Runs independent periodic jobs on the running event loop."""

    def __init__(self) -> None:
        self.jobs: dict[str, ScheduledJob] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def add_job(self, name: str, interval_seconds: float, func: JobFunc) -> ScheduledJob:
        if interval_seconds <= 0:
            raise ValueError(f"Interval for {name} must be positive")
        if name in self.jobs:
            raise ValueError(f"Job {name} already registered")

        job = ScheduledJob(name=name, interval_seconds=interval_seconds, func=func)
        self.jobs[name] = job
        return job

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    def start(self) -> None:
        """Start every registered job. Must be called from a running loop."""
        for name, job in self.jobs.items():
            if name in self._tasks and not self._tasks[name].done():
                continue
            self._tasks[name] = asyncio.create_task(self._run_forever(job), name=f"job:{name}")

        logger.info(
            "Scheduler started",
            jobs={name: job.interval_seconds for name, job in self.jobs.items()}
        )

    async def stop(self) -> None:
        """Cancel all jobs and wait for them to finish."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

        logger.info("Scheduler stopped")

    async def run_once(self, name: str) -> None:
        """Run a job immediately, outside its interval."""
        await self._run_job(self.jobs[name])

    async def _run_forever(self, job: ScheduledJob) -> None:
        while True:
            await asyncio.sleep(job.interval_seconds)
            await self._run_job(job)

    async def _run_job(self, job: ScheduledJob) -> None:
        started = utc_now()
        try:
            await job.func()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            job.error_count += 1
            logger.error(
                "Scheduled job failed",
                job=job.name,
                error=str(e),
                exc_info=True
            )
        else:
            job.run_count += 1
            logger.debug(
                "Scheduled job completed",
                job=job.name,
                duration_seconds=round(time_elapsed_seconds(started), 3)
            )


def register_dashboard_jobs(
    scheduler: RefreshScheduler,
    service: DashboardService,
    broadcaster: EventBroadcaster,
    params: Optional[ScheduleParams] = None,
) -> None:
    """Register the signal, portfolio and health refresh jobs."""
    params = params or ScheduleParams()

    async def refresh_signals() -> None:
        logger.info("Generating new trading signals")
        new_signals = await asyncio.to_thread(service.generate)

        if new_signals:
            await broadcaster.publish(EVENT_NEW_SIGNALS, [s.to_dict() for s in new_signals])
            logger.info("Emitted new signals", count=len(new_signals))

    async def refresh_portfolio() -> None:
        snapshot = await asyncio.to_thread(service.tick_portfolio)
        await broadcaster.publish(EVENT_PORTFOLIO_UPDATE, snapshot.to_dict())
        logger.info("Portfolio data updated")

    async def report_health() -> None:
        health = service.health()
        logger.info(
            "Server health check - Running OK",
            health=health,
            deliveries=broadcaster.get_stats()
        )

    scheduler.add_job("signals", params.signal_interval_seconds, refresh_signals)
    scheduler.add_job("portfolio", params.portfolio_interval_seconds, refresh_portfolio)
    scheduler.add_job("health", params.health_interval_seconds, report_health)
