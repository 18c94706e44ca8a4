"""The weekly broadcast schedule and poll interval computation.

The show airs on fixed weekdays at 17:00 in New York. The start hour is
kept in UTC, so it moves by an hour when New York enters or leaves daylight
saving time. All computations take "now" as an argument so that they can be
checked against concrete calendar dates.
"""

import datetime
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from castlog.config.schema import ScheduleConfig

UTC = datetime.timezone.utc


@dataclass(frozen=True)
class BroadcastSchedule:
    """When broadcasts start.

    Attributes:
        start_hour_utc: Hour of day (UTC) at which a broadcast starts
        broadcast_days: Weekdays with a broadcast, Monday=0
        grace: How long after the start a broadcast still counts as today's
    """

    start_hour_utc: int = 22
    broadcast_days: tuple[int, ...] = (0, 2, 4)
    grace: datetime.timedelta = datetime.timedelta(hours=1)

    @classmethod
    def for_timezone(
        cls,
        tz_name: str,
        now: datetime.datetime,
        dst_hour: int = 21,
        std_hour: int = 22,
        broadcast_days: tuple[int, ...] = (0, 2, 4),
        grace: datetime.timedelta = datetime.timedelta(hours=1),
    ) -> "BroadcastSchedule":
        """Build the schedule in effect at now.

        Args:
            tz_name: IANA name of the show's home timezone
            now: Current time (timezone-aware)
            dst_hour: UTC start hour while tz_name observes DST
            std_hour: UTC start hour otherwise
            broadcast_days: Weekdays with a broadcast, Monday=0
            grace: Grace period after the start

        Returns:
            The schedule
        """
        local = now.astimezone(ZoneInfo(tz_name))
        in_dst = bool(local.dst())
        return cls(
            start_hour_utc=dst_hour if in_dst else std_hour,
            broadcast_days=tuple(broadcast_days),
            grace=grace,
        )

    @classmethod
    def from_config(cls, config: ScheduleConfig, now: datetime.datetime) -> "BroadcastSchedule":
        return cls.for_timezone(
            config.timezone,
            now,
            dst_hour=config.dst_start_hour,
            std_hour=config.std_start_hour,
            broadcast_days=tuple(config.broadcast_days),
            grace=datetime.timedelta(minutes=config.grace_minutes),
        )

    def _start_on(self, day: datetime.date) -> datetime.datetime:
        return datetime.datetime.combine(
            day, datetime.time(hour=self.start_hour_utc), tzinfo=UTC
        )

    def is_broadcast_day(self, day: datetime.date) -> bool:
        return day.weekday() in self.broadcast_days

    def next_start_after(self, now: datetime.datetime) -> datetime.datetime:
        """Return the start of the first broadcast on a day after today.

        From Friday or the weekend this is the following Monday; from a
        broadcast day the non-broadcast day after it is skipped.
        """
        day = now.astimezone(UTC).date()
        for offset in range(1, 8):
            candidate = day + datetime.timedelta(days=offset)
            if self.is_broadcast_day(candidate):
                return self._start_on(candidate)
        raise ValueError("schedule has no broadcast days")

    def today_start(self, now: datetime.datetime) -> datetime.datetime:
        """Return today's broadcast start, or the next one.

        Today counts only if it is a broadcast day and the start has not
        passed by more than the grace period.
        """
        now = now.astimezone(UTC)
        if self.is_broadcast_day(now.date()):
            start = self._start_on(now.date())
            if now - start <= self.grace:
                return start
        return self.next_start_after(now)

    def next_start(
        self,
        now: datetime.datetime,
        latest_air_date: datetime.date | None = None,
    ) -> datetime.datetime:
        """Return the start of the next broadcast not yet recorded.

        Args:
            now: Current time (timezone-aware)
            latest_air_date: Air date of the latest known episode

        Returns:
            Start time (UTC) of the broadcast to wait for
        """
        now = now.astimezone(UTC)
        start = self.today_start(now)
        aired_today = latest_air_date is not None and latest_air_date >= now.date()
        if aired_today or now > start + self.grace:
            start = self.next_start_after(now)
        return start


def poll_interval(
    now: datetime.datetime,
    start: datetime.datetime,
    divisor: int = 7,
    floor: datetime.timedelta = datetime.timedelta(minutes=1),
    ceiling: datetime.timedelta = datetime.timedelta(minutes=90),
) -> datetime.timedelta:
    """Return how long to sleep before polling again.

    The wait is a fraction of the time remaining until start, so polling
    speeds up as the broadcast approaches, bounded by floor and ceiling.

    Examples:
        >>> now = datetime.datetime(2023, 6, 12, 12, tzinfo=UTC)
        >>> poll_interval(now, now + datetime.timedelta(hours=7))
        datetime.timedelta(seconds=3600)
    """
    wait = (start - now) / divisor
    if wait > ceiling:
        return ceiling
    if wait < floor:
        return floor
    return wait
