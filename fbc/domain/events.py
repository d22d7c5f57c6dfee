"""Domain events for the batch compression pipeline.

Events represent state changes and notifications that flow through the EventBus,
decoupling the pipeline from whatever reports progress (console, counters, nothing
at all in quiet mode).

See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from datetime import timedelta
from pathlib import Path
from pydantic import BaseModel
from .models import CompressionJob, JobStatus


class Event(BaseModel):
    """Base class for all domain events.

    Events are validated Pydantic models. They are not frozen by default.
    """

    pass


class JobEvent(Event):
    """Base class for events related to a specific compression job."""

    job: CompressionJob


class JobStarted(JobEvent):
    """Emitted when a job opens its encode stream."""

    status: JobStatus = JobStatus.RUNNING


class JobCompleted(JobEvent):
    """Emitted when a job finishes writing its output."""

    duration_seconds: float = 0.0


class JobFailed(JobEvent):
    """Emitted when a job fails; sibling jobs are unaffected."""

    error_message: str


class DiscoveryStarted(Event):
    """Emitted when the walk of an input directory begins."""

    directory: Path


class DiscoveryFinished(Event):
    """Emitted after all explicit files and directories have been enumerated."""

    files_found: int


class PlanningFinished(Event):
    jobs_planned: int


class PlanningFailed(Event):
    """Emitted when discovery or planning aborts the run before any job executes."""

    message: str


class ProcessingFinished(Event):
    """Emitted once, after every job has settled."""

    elapsed: timedelta
    succeeded: int = 0
    failed: int = 0
