from rich.console import Console
from rich.markup import escape
from rich.table import Table
from fbc.infrastructure.event_bus import EventBus
from fbc.ui.state import RunState
from fbc.domain.events import (
    DiscoveryFinished, PlanningFinished, PlanningFailed,
    JobStarted, JobCompleted, JobFailed, ProcessingFinished,
)


class ConsoleReporter:
    """Subscribes to EventBus, prints progress lines and keeps RunState current.

    Quiet mode simply never constructs one, so nothing is printed at all.
    """

    def __init__(self, bus: EventBus, state: RunState, console: Console = None):
        self.bus = bus
        self.state = state
        self.console = console or Console(highlight=False, soft_wrap=True)
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(DiscoveryFinished, self.on_discovery_finished)
        self.bus.subscribe(PlanningFinished, self.on_planning_finished)
        self.bus.subscribe(PlanningFailed, self.on_planning_failed)
        self.bus.subscribe(JobStarted, self.on_job_started)
        self.bus.subscribe(JobCompleted, self.on_job_completed)
        self.bus.subscribe(JobFailed, self.on_job_failed)
        self.bus.subscribe(ProcessingFinished, self.on_processing_finished)

    def on_discovery_finished(self, event: DiscoveryFinished):
        with self.state._lock:
            self.state.files_found = event.files_found

    def on_planning_finished(self, event: PlanningFinished):
        with self.state._lock:
            self.state.jobs_planned = event.jobs_planned

    def on_planning_failed(self, event: PlanningFailed):
        with self.state._lock:
            self.state.planning_error = event.message
        self.console.print(f"[red]Error:[/red] {escape(event.message)}", markup=True)

    def on_job_started(self, event: JobStarted):
        self.state.job_started()
        self.console.print(f"Compressing: {event.job.output_path}", markup=False)

    def on_job_completed(self, event: JobCompleted):
        self.state.job_completed()

    def on_job_failed(self, event: JobFailed):
        self.state.job_failed(f"{event.job.input_path}: {event.error_message}")
        self.console.print(f"[red]Error:[/red] {escape(str(event.job.input_path))}", markup=True)
        self.console.print(f"  {event.error_message}", markup=False)

    def on_processing_finished(self, event: ProcessingFinished):
        with self.state._lock:
            self.state.elapsed = event.elapsed
            self.state.finished = True
        self.console.print(f"Done: {event.elapsed}", markup=False)

    def print_summary(self):
        """Per-run counter table (shown in debug runs)."""
        table = Table(title="FBC summary", show_header=False)
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        with self.state._lock:
            table.add_row("Files found", str(self.state.files_found))
            table.add_row("Jobs planned", str(self.state.jobs_planned))
            table.add_row("Compressed", str(self.state.completed_count))
            table.add_row("Failed", str(self.state.failed_count))
            table.add_row("Peak concurrency", str(self.state.peak_active_count))
            if self.state.elapsed is not None:
                table.add_row("Elapsed", str(self.state.elapsed))
        self.console.print(table)
