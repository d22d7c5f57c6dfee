"""Pipeline orchestrator: discovery → planning → bounded parallel execution.

Discovery and planning are sequential and finish before anything is dispatched.
A PlanningError at either stage aborts the run with zero jobs executed and is
reported on the event bus. Per-job failures never surface here; they come back
as FAILED results from the worker pool.
"""

import logging
from typing import Optional
from fbc.config.models import AppConfig
from fbc.domain.errors import PlanningError
from fbc.domain.events import PlanningFailed
from fbc.domain.models import RunSummary
from fbc.infrastructure.codecs import CodecAdapter
from fbc.infrastructure.event_bus import EventBus
from fbc.infrastructure.file_scanner import PathResolver
from fbc.pipeline.planner import JobPlanner
from fbc.pipeline.worker_pool import WorkerPool


class Orchestrator:
    """Runs one batch for a validated AppConfig.

    Args:
        config: The run configuration; not mutated.
        event_bus: Reporting sink shared by every stage.
        path_resolver: Optional override (tests); defaults to PathResolver.
        job_planner: Optional override; defaults to JobPlanner.
        codec_adapter: Optional override; defaults to CodecAdapter.
    """

    def __init__(
        self,
        config: AppConfig,
        event_bus: EventBus,
        path_resolver: Optional[PathResolver] = None,
        job_planner: Optional[JobPlanner] = None,
        codec_adapter: Optional[CodecAdapter] = None,
    ):
        self.config = config
        self.event_bus = event_bus
        self.path_resolver = path_resolver or PathResolver(event_bus=event_bus)
        self.job_planner = job_planner or JobPlanner(event_bus=event_bus)
        self.codec_adapter = codec_adapter or CodecAdapter()
        self.logger = logging.getLogger(__name__)

    def run(self) -> RunSummary:
        summary = RunSummary()
        try:
            files = self.path_resolver.resolve(self.config)
            summary.files_found = len(files)
            jobs = self.job_planner.plan(self.config, files)
        except PlanningError as e:
            self.logger.error(f"Planning aborted: {e}")
            summary.planning_error = str(e)
            self.event_bus.publish(PlanningFailed(message=str(e)))
            return summary

        summary.jobs_planned = len(jobs)
        if not jobs:
            self.logger.info("No files to process, exiting")
            return summary

        self.logger.info(f"Dispatching {len(jobs)} jobs on {self.config.max_workers} threads")
        pool = WorkerPool(self.codec_adapter, threads=self.config.threads, event_bus=self.event_bus)
        summary.results, summary.elapsed = pool.execute_all(jobs)
        return summary
