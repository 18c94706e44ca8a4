"""Tests for the polling state machine, with a fake clock and sleep."""

import datetime

import pytest

from castlog.config.schema import ScheduleConfig
from castlog.pipeline.schedule import BroadcastSchedule
from castlog.pipeline.scheduler import (
    EXIT_FAILED,
    EXIT_NO_UPDATE,
    EXIT_OK,
    PollMode,
    PollScheduler,
    SchedulerState,
)
from castlog.pipeline.updater import UpdateOutcome
from castlog.utils.errors import NetworkError

UTC = datetime.timezone.utc
LATEST = datetime.date(2023, 6, 9)


class FakeClock:
    """A clock that only moves when the scheduler sleeps."""

    def __init__(self, now: datetime.datetime) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> datetime.datetime:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += datetime.timedelta(seconds=seconds)


class ScriptedPass:
    """Returns canned outcomes (or raises canned errors) in order."""

    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    def __call__(self) -> UpdateOutcome:
        result = self.results[self.calls]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


def updated(flag: bool) -> UpdateOutcome:
    return UpdateOutcome(latest_date=LATEST, updated=flag)


@pytest.fixture
def clock() -> FakeClock:
    # Monday 2023-06-12, 14:00 UTC; the broadcast starts at 21:00
    return FakeClock(datetime.datetime(2023, 6, 12, 14, 0, tzinfo=UTC))


def make(mode: PollMode, run_pass, clock: FakeClock, **kwargs) -> PollScheduler:
    return PollScheduler(
        mode,
        run_pass=run_pass,
        clock=clock,
        sleep=clock.sleep,
        schedule_factory=lambda now: BroadcastSchedule(start_hour_utc=21),
        **kwargs,
    )


class TestOnceMode:
    def test_update_exits_ok(self, clock):
        result = make(PollMode.ONCE, ScriptedPass(updated(True)), clock).run()

        assert result.state is SchedulerState.DONE
        assert result.exit_code == EXIT_OK
        assert result.passes == 1
        assert clock.sleeps == []

    def test_no_update_exits_3(self, clock):
        result = make(PollMode.ONCE, ScriptedPass(updated(False)), clock).run()

        assert result.state is SchedulerState.DONE
        assert result.exit_code == EXIT_NO_UPDATE

    def test_error_fails(self, clock):
        error = NetworkError("site down")
        result = make(PollMode.ONCE, ScriptedPass(error), clock).run()

        assert result.state is SchedulerState.FAILED
        assert result.exit_code == EXIT_FAILED
        assert result.error is error

    def test_unexpected_error_fails(self, clock):
        error = ValueError("unexpected")
        result = make(PollMode.ONCE, ScriptedPass(error), clock).run()

        assert result.state is SchedulerState.FAILED
        assert result.exit_code == EXIT_FAILED
        assert result.error is error


class TestSingleMode:
    @pytest.mark.parametrize("flag", [True, False])
    def test_one_pass_regardless_of_outcome(self, clock, flag):
        run_pass = ScriptedPass(updated(flag))
        result = make(PollMode.SINGLE, run_pass, clock).run()

        assert result.state is SchedulerState.DONE
        assert result.exit_code == EXIT_OK
        assert run_pass.calls == 1


class TestPollOneMode:
    def test_polls_until_update(self, clock):
        run_pass = ScriptedPass(updated(False), updated(False), updated(True))
        result = make(PollMode.POLL_ONE, run_pass, clock).run()

        assert result.state is SchedulerState.DONE
        assert result.exit_code == EXIT_OK
        assert result.passes == 3
        # 7 hours to go: a seventh of that, then a bit less
        assert clock.sleeps[0] == 3600
        assert len(clock.sleeps) == 2
        assert clock.sleeps[1] < 3600


class TestPollMode:
    def test_never_exits_3_and_fails_on_error(self, clock):
        run_pass = ScriptedPass(updated(True), updated(False), NetworkError("boom"))
        result = make(PollMode.POLL, run_pass, clock).run()

        assert result.state is SchedulerState.FAILED
        assert result.exit_code == EXIT_FAILED
        assert result.passes == 3
        assert len(clock.sleeps) == 2

    def test_sleep_bounded(self, clock):
        # Sunday: the next broadcast is more than a day away
        clock.now = datetime.datetime(2023, 6, 11, 3, 0, tzinfo=UTC)
        run_pass = ScriptedPass(updated(False), NetworkError("stop"))
        make(PollMode.POLL, run_pass, clock).run()

        assert clock.sleeps == [90 * 60]

    def test_uses_config_bounds(self, clock):
        clock.now = datetime.datetime(2023, 6, 11, 3, 0, tzinfo=UTC)
        run_pass = ScriptedPass(updated(False), NetworkError("stop"))
        config = ScheduleConfig(max_poll_minutes=30)
        make(PollMode.POLL, run_pass, clock, config=config).run()

        assert clock.sleeps == [30 * 60]

    def test_latest_date_today_waits_for_next_broadcast(self, clock):
        outcome = UpdateOutcome(latest_date=datetime.date(2023, 6, 12), updated=True)
        run_pass = ScriptedPass(outcome, NetworkError("stop"))
        make(PollMode.POLL, run_pass, clock).run()

        # Next start is Wednesday 21:00, far enough out to hit the ceiling
        assert clock.sleeps == [90 * 60]

    def test_schedule_rebuilt_each_sleep(self, clock):
        seen = []

        def factory(now):
            seen.append(now)
            return BroadcastSchedule(start_hour_utc=21)

        run_pass = ScriptedPass(updated(False), updated(False), NetworkError("stop"))
        PollScheduler(
            PollMode.POLL,
            run_pass=run_pass,
            clock=clock,
            sleep=clock.sleep,
            schedule_factory=factory,
        ).run()

        assert len(seen) == 2
        assert seen[1] > seen[0]


class TestDefaultSchedule:
    def test_from_config(self, clock):
        run_pass = ScriptedPass(updated(False), NetworkError("stop"))
        PollScheduler(PollMode.POLL, run_pass=run_pass, clock=clock, sleep=clock.sleep).run()

        # June: 21:00 UTC start, seven hours away
        assert clock.sleeps == [3600]
