"""Bounded thread pool that runs compression jobs.

Each job runs exactly once on one worker thread. A failing job is turned into a
FAILED JobResult inside that thread and never affects its siblings. Jobs that
share a destination (flattened outputs with the same name) are serialized on a
per-destination lock, so the file always holds one complete stream: whichever
job wrote last. The pool blocks until every job has settled and measures the
whole batch with a single monotonic timer.
"""

import concurrent.futures
import logging
import threading
import time
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
from fbc.domain.events import JobCompleted, JobFailed, JobStarted, ProcessingFinished
from fbc.domain.models import CompressionJob, JobResult, JobStatus
from fbc.infrastructure.codecs import CodecAdapter
from fbc.infrastructure.event_bus import EventBus


class WorkerPool:
    """Runs a finalized job list with at most max(threads, 1) jobs in flight.

    Args:
        codec_adapter: Performs the actual encode for one job.
        threads: Concurrency limit; values below 1 mean 1.
        event_bus: Optional sink for job lifecycle events (None in quiet mode).
    """

    def __init__(self, codec_adapter: CodecAdapter, threads: int = 1, event_bus: Optional[EventBus] = None):
        self.codec_adapter = codec_adapter
        self.max_workers = max(threads, 1)
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

        # job index -> PENDING | RUNNING | SUCCEEDED | FAILED
        self.job_states: Dict[int, JobStatus] = {}
        self._state_lock = threading.Lock()
        self._destination_locks: Dict[Path, threading.Lock] = {}
        self._destination_guard = threading.Lock()

    def _publish(self, event):
        if self.event_bus is not None:
            self.event_bus.publish(event)

    def _set_state(self, job: CompressionJob, status: JobStatus):
        with self._state_lock:
            self.job_states[job.index] = status

    def _destination_lock(self, output_path: Path) -> threading.Lock:
        with self._destination_guard:
            return self._destination_locks.setdefault(output_path, threading.Lock())

    def _run_job(self, job: CompressionJob) -> JobResult:
        """Runs one job: PENDING -> RUNNING -> SUCCEEDED | FAILED."""
        start = time.monotonic()

        # Unknown formats are a silent no-op: no output, no progress line, no error
        if not self.codec_adapter.supports(job.format):
            self.logger.debug(f"PROCESS_SKIP: {job.input_path} (format {job.format!r} not recognized)")
            self._set_state(job, JobStatus.SUCCEEDED)
            return JobResult(job=job, status=JobStatus.SUCCEEDED, written=False, duration_seconds=0.0)

        with self._destination_lock(job.output_path):
            self._set_state(job, JobStatus.RUNNING)
            self.logger.debug(f"PROCESS_START: {job.input_path} (thread {threading.get_ident()})")
            self._publish(JobStarted(job=job, status=JobStatus.RUNNING))

            try:
                written = self.codec_adapter.compress(job.input_path, job.output_path, job.format, job.level)
            except Exception as e:
                elapsed = time.monotonic() - start
                error_message = f"{type(e).__name__}: {e}"
                self.logger.error(f"Compression failed for {job.input_path}: {error_message}")
                self._set_state(job, JobStatus.FAILED)
                self._publish(JobFailed(job=job, error_message=error_message))
                return JobResult(
                    job=job,
                    status=JobStatus.FAILED,
                    error_message=error_message,
                    duration_seconds=elapsed,
                )

        elapsed = time.monotonic() - start
        self.logger.debug(f"PROCESS_END: {job.input_path} status=succeeded elapsed={elapsed:.2f}s")
        self._set_state(job, JobStatus.SUCCEEDED)
        self._publish(JobCompleted(job=job, duration_seconds=elapsed))
        return JobResult(job=job, status=JobStatus.SUCCEEDED, written=written, duration_seconds=elapsed)

    def execute_all(self, jobs: Sequence[CompressionJob]) -> Tuple[List[JobResult], timedelta]:
        """Runs every job and blocks until all have settled.

        Returns results in job-list order and the wall time of the whole batch.
        """
        jobs = tuple(jobs)
        results: List[Optional[JobResult]] = [None] * len(jobs)
        with self._state_lock:
            self.job_states = {job.index: JobStatus.PENDING for job in jobs}

        start = time.monotonic()
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self._run_job, job): position for position, job in enumerate(jobs)}
            for future in concurrent.futures.as_completed(futures):
                results[futures[future]] = future.result()
        elapsed = timedelta(seconds=time.monotonic() - start)

        succeeded = sum(1 for r in results if r.status == JobStatus.SUCCEEDED)
        failed = len(results) - succeeded
        self.logger.info(f"All jobs settled: succeeded={succeeded} failed={failed} elapsed={elapsed}")
        self._publish(ProcessingFinished(elapsed=elapsed, succeeded=succeeded, failed=failed))
        return results, elapsed
