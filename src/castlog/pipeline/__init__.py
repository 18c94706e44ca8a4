"""The update pipeline and its poll scheduler."""

from castlog.pipeline.schedule import BroadcastSchedule, poll_interval
from castlog.pipeline.scheduler import PollMode, PollScheduler, SchedulerResult, SchedulerState
from castlog.pipeline.synthesizer import synthesize_episode
from castlog.pipeline.updater import EpisodeUpdater, PipelineOptions, UpdateOutcome, parse_override

__all__ = [
    "BroadcastSchedule",
    "EpisodeUpdater",
    "PipelineOptions",
    "PollMode",
    "PollScheduler",
    "SchedulerResult",
    "SchedulerState",
    "UpdateOutcome",
    "parse_override",
    "poll_interval",
    "synthesize_episode",
]
