"""Polling loop that runs update passes around the broadcast schedule."""

import datetime
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from castlog.config.schema import ScheduleConfig
from castlog.pipeline.schedule import BroadcastSchedule, poll_interval
from castlog.pipeline.updater import UpdateOutcome
from castlog.utils.errors import CastlogError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_UPDATE = 3


class PollMode(str, Enum):
    """How many passes the scheduler runs."""

    ONCE = "once"  # one pass; "no update" is reported with its own exit code
    POLL = "poll"  # poll forever
    POLL_ONE = "poll-one"  # poll until an update is produced
    SINGLE = "single"  # one pass, success whatever its outcome


class SchedulerState(str, Enum):
    POLLING = "polling"
    SLEEPING = "sleeping"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SchedulerResult:
    """Final state of a scheduler run."""

    state: SchedulerState
    exit_code: int
    passes: int
    error: Exception | None = None


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class PollScheduler:
    """Run update passes until the mode says to stop.

    Between passes the scheduler sleeps for a fraction of the time left
    until the next broadcast. The schedule is rebuilt from the clock before
    every sleep, so the start hour follows daylight saving changes in a
    long-running process.

    Usage:
        scheduler = PollScheduler(PollMode.POLL, run_pass=updater.check_for_update)
        result = scheduler.run()
        sys.exit(result.exit_code)
    """

    def __init__(
        self,
        mode: PollMode,
        run_pass: Callable[[], UpdateOutcome],
        clock: Callable[[], datetime.datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
        schedule_factory: Callable[[datetime.datetime], BroadcastSchedule] | None = None,
        config: ScheduleConfig | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            mode: Polling mode
            run_pass: Runs one update pass
            clock: Returns the current time (timezone-aware)
            sleep: Sleeps for the given number of seconds
            schedule_factory: Builds the schedule in effect at a given time.
                Defaults to one derived from config.
            config: Schedule settings
        """
        self.mode = mode
        self.run_pass = run_pass
        self.clock = clock
        self.sleep = sleep
        self.config = config or ScheduleConfig()
        if schedule_factory is None:
            schedule_factory = self._schedule_from_config
        self.schedule_factory = schedule_factory

        self.state = SchedulerState.POLLING
        self.passes = 0
        self._exit_code = EXIT_OK
        self._error: Exception | None = None
        self._outcome: UpdateOutcome | None = None

    def _schedule_from_config(self, now: datetime.datetime) -> BroadcastSchedule:
        return BroadcastSchedule.from_config(self.config, now)

    def run(self) -> SchedulerResult:
        """Run until DONE or FAILED and report how it ended."""
        while self.state not in (SchedulerState.DONE, SchedulerState.FAILED):
            if self.state is SchedulerState.POLLING:
                self.state = self._poll()
            else:
                self.state = self._sleep()

        exit_code = EXIT_FAILED if self.state is SchedulerState.FAILED else self._exit_code
        return SchedulerResult(
            state=self.state,
            exit_code=exit_code,
            passes=self.passes,
            error=self._error,
        )

    def _poll(self) -> SchedulerState:
        self.passes += 1
        try:
            outcome = self.run_pass()
        except CastlogError as e:
            logger.error(f"Update pass failed: {e}")
            self._error = e
            return SchedulerState.FAILED
        except Exception as e:
            logger.error(f"Update pass failed unexpectedly: {e}", exc_info=True)
            self._error = e
            return SchedulerState.FAILED
        self._outcome = outcome

        if self.mode is PollMode.ONCE:
            self._exit_code = EXIT_OK if outcome.updated else EXIT_NO_UPDATE
            return SchedulerState.DONE
        if self.mode is PollMode.SINGLE:
            return SchedulerState.DONE
        if self.mode is PollMode.POLL_ONE and outcome.updated:
            return SchedulerState.DONE
        return SchedulerState.SLEEPING

    def _sleep(self) -> SchedulerState:
        now = self.clock()
        schedule = self.schedule_factory(now)
        latest = self._outcome.latest_date if self._outcome else None
        start = schedule.next_start(now, latest)
        wait = poll_interval(
            now,
            start,
            divisor=self.config.divisor,
            floor=datetime.timedelta(minutes=self.config.min_poll_minutes),
            ceiling=datetime.timedelta(minutes=self.config.max_poll_minutes),
        )
        wake = now + wait
        logger.info(
            f"Next episode is on {start:%Y-%m-%d} (in {start - now}); "
            f"sleeping for {wait} (until {wake:%H:%M} UTC)"
        )
        self.sleep(wait.total_seconds())
        return SchedulerState.POLLING
