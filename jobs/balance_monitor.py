"""AEZA referral balance monitoring job.

Polls every configured AEZA realm on a fixed interval (hourly by default)
and posts a message to the subscriber channel whenever a referral balance
changes. The first fetch after start only records the baseline.

States:
- STOPPED: no timer armed
- RUNNING: interval job registered with the scheduler

Cycles are serialized: a tick that fires while the previous one is still
running is skipped, so the balance history is only ever touched by one
cycle at a time.
"""

import asyncio
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from logger import logger
from domains.aeza.detector import BalanceHistory, detect_changes
from domains.aeza.fetcher import BalanceFetcher
from domains.aeza.formatting import render_change
from domains.aeza.models import CycleReport
from domains.aeza.realms import AccountRealm

DEFAULT_INTERVAL_SECONDS = 3600
DEFAULT_JOB_ID = "aeza_balance_monitor"

SendFunc = Callable[[int, str], Awaitable[bool]]


class MonitorState(str, Enum):
    """Monitor lifecycle states."""
    STOPPED = "stopped"
    RUNNING = "running"


class BalanceMonitor:
    """Poll-detect-notify loop for one subscriber channel."""

    def __init__(
        self,
        scheduler: AsyncIOScheduler,
        fetcher: BalanceFetcher,
        send: SendFunc,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        announce_first_observation: bool = False,
        job_id: str = DEFAULT_JOB_ID,
    ):
        """Initialize monitor.

        Args:
            scheduler: APScheduler instance that owns the interval job
            fetcher: Balance fetcher for the configured realms
            send: async send(channel_id, text) -> bool
            interval_seconds: Seconds between polls
            announce_first_observation: Notify when a realm that had no baseline
                is seen for the first time (priming never notifies)
            job_id: Scheduler job ID, unique per monitor instance
        """
        self.scheduler = scheduler
        self.fetcher = fetcher
        self.send = send
        self.interval_seconds = interval_seconds
        self.announce_first_observation = announce_first_observation
        self.job_id = job_id

        self._state = MonitorState.STOPPED
        self._channel_id: Optional[int] = None
        self._history: BalanceHistory = {}
        self._cycle_lock = asyncio.Lock()
        self._generation = 0  # bumped on every start, detects stop() during priming

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == MonitorState.RUNNING

    @property
    def channel_id(self) -> Optional[int]:
        return self._channel_id

    @property
    def history(self) -> dict[AccountRealm, Decimal]:
        """Copy of the last known referral balances."""
        return dict(self._history)

    async def start(self, channel_id: int) -> bool:
        """Start monitoring for a channel.

        Records the current balances as baseline, then arms the interval job.

        Returns:
            True if the monitor was started, False if it was already running
        """
        if self._state == MonitorState.RUNNING:
            logger.info(f"Balance monitor already running (channel {self._channel_id})")
            return False

        self._state = MonitorState.RUNNING
        self._channel_id = channel_id
        self._generation += 1
        generation = self._generation

        await self._prime()

        if self._state != MonitorState.RUNNING or self._generation != generation:
            logger.info("Balance monitor stopped while priming - timer not armed")
            return False

        self.scheduler.add_job(
            self.run_cycle,
            'interval',
            seconds=self.interval_seconds,
            id=self.job_id,
            name="AEZA referral balance monitor",
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        logger.info(
            f"Balance monitor started for channel {channel_id} "
            f"(every {self.interval_seconds}s, job {self.job_id})"
        )
        return True

    def stop(self) -> bool:
        """Stop monitoring. A cycle already in flight is allowed to finish.

        Returns:
            True if the monitor was running
        """
        if self._state == MonitorState.STOPPED:
            return False

        self._state = MonitorState.STOPPED
        try:
            self.scheduler.remove_job(self.job_id)
        except JobLookupError:
            # Stopped during priming, before the job was armed
            pass
        logger.info("Balance monitor stopped")
        return True

    async def _prime(self) -> None:
        """Fetch once and record baselines without notifying."""
        async with self._cycle_lock:
            logger.info("Initializing referral balance history...")
            try:
                snapshots = await self.fetcher.fetch_all()
                _, self._history = detect_changes(snapshots, self._history)
            except Exception as e:
                logger.error(f"Balance history initialization failed: {e}")
                return

            for realm, amount in self._history.items():
                logger.info(f"{realm.value} referral balance initialized: {amount}")

    async def run_cycle(self) -> CycleReport:
        """Run one poll-detect-notify cycle. Never raises."""
        if self._cycle_lock.locked():
            logger.warning("Previous balance check still running - skipping this tick")
            return CycleReport(skipped=True)

        async with self._cycle_lock:
            report = CycleReport()
            try:
                await self._run_cycle(report)
            except Exception as e:
                logger.error(f"Balance monitor cycle failed: {type(e).__name__}: {e}")
                report.error = str(e) or type(e).__name__
            return report

    async def _run_cycle(self, report: CycleReport) -> None:
        logger.info("Checking referral balance changes...")
        snapshots = await self.fetcher.fetch_all()
        report.failed_realms = [realm for realm, snapshot in snapshots.items() if not snapshot.ok]

        notifications, self._history = detect_changes(
            snapshots, self._history, self.announce_first_observation
        )
        report.notifications = notifications

        if not notifications:
            logger.info("No referral balance changes")
            return

        logger.info(f"Found {len(notifications)} referral balance change(s)")
        for notification in notifications:
            if await self._deliver(render_change(notification)):
                report.delivered += 1
                logger.info(f"Change notification sent ({notification.realm.value})")
            else:
                report.failed_deliveries += 1
                logger.error(f"Change notification not delivered ({notification.realm.value})")

    async def _deliver(self, text: str) -> bool:
        if self._channel_id is None:
            logger.error("No subscriber channel captured - cannot deliver notification")
            return False
        try:
            return bool(await self.send(self._channel_id, text))
        except Exception as e:
            logger.error(f"Notification delivery raised: {e}")
            return False

    def get_status(self) -> dict:
        """Monitor status for the status command."""
        job = self.scheduler.get_job(self.job_id)
        return {
            "state": self._state.value,
            "channel_id": self._channel_id,
            "interval_seconds": self.interval_seconds,
            "next_run_time": getattr(job, "next_run_time", None) if job else None,
            "history": {realm.value: amount for realm, amount in self._history.items()},
        }
