from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from hyclock.core import clock as hlc
from hyclock.core.clock import Clock, MAX_COUNTER
from hyclock.core.exception import ClockDriftError, MalformedClockError
from hyclock.core.types_ import NowMillis

if TYPE_CHECKING:
    from hyclock.bootstrap.config.settings import ClockSettings


def now_millis() -> int:
    """Return current system time in milliseconds."""
    return int(time.time() * 1000)


class ClockCell:
    """
    Owner of one node's current clock.

    Clock values are immutable, so a node that wants a single coherent
    lineage must read the current value, compute the next one and store
    it as one step. ClockCell does this under a lock for both local
    events (tick) and received clocks (receive).

    The time source is injectable; it must return integer milliseconds.
    """

    def __init__(
        self,
        node_id: str,
        *,
        now: NowMillis = now_millis,
        initial: Clock | None = None,
        max_drift_ms: int = 0,
        counter_warning: int = 90_000_000,
    ) -> None:
        self._node_id = node_id
        self._now = now
        self._max_drift_ms = max_drift_ms
        self._counter_warning = counter_warning
        self._lock = threading.Lock()
        self._current = initial if initial is not None else hlc.create(node_id, now())
        self._logger = logging.getLogger("hyclock.core.cell")

    @classmethod
    def from_settings(
        cls,
        settings: ClockSettings,
        *,
        now: NowMillis = now_millis,
        initial: Clock | None = None,
    ) -> ClockCell:
        return cls(
            settings.node_id,
            now=now,
            initial=initial,
            max_drift_ms=settings.max_drift_ms,
            counter_warning=settings.counter_warning,
        )

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def current(self) -> Clock:
        with self._lock:
            return self._current

    def tick(self) -> Clock:
        """Advance the clock for a local event and return the new value."""
        with self._lock:
            now = self._now()
            if now <= self._current.physical:
                self._logger.debug(
                    "Wall clock %d is not ahead of %d, advancing counter",
                    now, self._current.physical,
                )
            previous = self._current
            self._current = hlc.local(self._node_id, now, previous)
            self._check_counter(previous)
            return self._current

    def receive(self, remote_clock: Clock) -> Clock:
        """
        Merge a clock received from another node and return the new value.

        If a drift bound is configured, a remote clock further ahead of the
        local wall time than the bound is rejected and the state is unchanged.
        """
        with self._lock:
            now = self._now()
            drift = remote_clock.physical - now
            if self._max_drift_ms > 0 and drift > self._max_drift_ms:
                self._logger.warning(
                    "Rejecting clock from %r: %d ms ahead (max %d ms)",
                    remote_clock.id, drift, self._max_drift_ms,
                )
                raise ClockDriftError(
                    f"Remote clock {remote_clock.id!r} is {drift} ms ahead of local time "
                    f"(max {self._max_drift_ms} ms)"
                )
            previous = self._current
            self._current = hlc.remote(self._node_id, previous, remote_clock, now)
            self._check_counter(previous)
            return self._current

    def receive_string(self, text: str) -> Clock:
        remote_clock = hlc.from_string(text)
        if remote_clock is None:
            raise MalformedClockError(f"Malformed clock string: {text!r}")
        return self.receive(remote_clock)

    def _check_counter(self, previous: Clock) -> None:
        # warn once per crossing of the threshold
        counter = self._current.counter
        if counter >= self._counter_warning > previous.counter:
            self._logger.warning(
                "Clock counter at %d (encoding limit %d), wall clock may be stalled",
                counter, MAX_COUNTER,
            )
