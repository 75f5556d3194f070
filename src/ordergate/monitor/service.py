from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from loguru import logger

from ordergate.hours.evaluator import EvaluationResult, get_restaurant_status
from ordergate.settings.models import RestaurantSettings

SettingsProvider = Callable[[], Awaitable[RestaurantSettings]]
ChangeCallback = Callable[["StatusSnapshot | None", "StatusSnapshot"], Awaitable[None]]

DEFAULT_INTERVAL_SEC = 60


@dataclass(frozen=True)
class StatusSnapshot:
    result: EvaluationResult
    effective_open: bool
    is_busy: bool

    def signature(self) -> tuple[bool, bool, bool, bool, bool]:
        return (
            self.effective_open,
            self.result.is_ordering_open,
            self.result.is_pickup_open,
            self.result.is_delivery_open,
            self.is_busy,
        )


def build_snapshot(
    settings: RestaurantSettings,
    now: datetime | None = None,
    tz: str | ZoneInfo | None = None,
) -> StatusSnapshot:
    result = get_restaurant_status(settings, now, tz)
    effective = result.is_open if settings.is_open_override is None else settings.is_open_override
    return StatusSnapshot(result=result, effective_open=effective, is_busy=settings.is_busy)


class AvailabilityMonitor:
    """Re-evaluates the restaurant status on a fixed interval.

    ``check_now`` can also be called on demand, e.g. right before checkout.
    ``stop`` cancels the polling task; nothing keeps running afterwards.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        *,
        interval: float = DEFAULT_INTERVAL_SEC,
        on_change: ChangeCallback | None = None,
        tz: str | ZoneInfo | None = None,
        clock: Callable[[], datetime | None] = lambda: None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._provider = settings_provider
        self._interval = interval
        self._on_change = on_change
        self._tz = tz
        self._clock = clock
        self._last: StatusSnapshot | None = None
        # Last snapshot handed to on_change; unchanged ticks do not replace it.
        self._reported: StatusSnapshot | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def last(self) -> StatusSnapshot | None:
        return self._last

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check_now(self) -> StatusSnapshot:
        settings = await self._provider()
        snapshot = build_snapshot(settings, self._clock(), self._tz)
        previous = self._reported
        self._last = snapshot
        if previous is None or previous.signature() != snapshot.signature():
            self._reported = snapshot
            logger.info(
                "Restaurant status: open={} ordering={} pickup={} delivery={} busy={}",
                *snapshot.signature(),
            )
            if self._on_change:
                await self._on_change(previous, snapshot)
        return snapshot

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="availability-monitor")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self) -> None:
        while True:
            try:
                await self.check_now()
            except Exception as exc:  # noqa: BLE001
                logger.exception("Availability check failed: {}", exc)
            await asyncio.sleep(self._interval)
