import threading
from datetime import timedelta
from typing import List, Optional

class RunState:
    """Thread-safe counters for one batch, fed by bus events from worker threads."""

    def __init__(self):
        self._lock = threading.RLock()

        self.files_found = 0
        self.jobs_planned = 0
        self.started_count = 0
        self.completed_count = 0
        self.failed_count = 0
        self.active_count = 0
        self.peak_active_count = 0

        self.errors: List[str] = []
        self.planning_error: Optional[str] = None
        self.elapsed: Optional[timedelta] = None
        self.finished = False

    def job_started(self):
        with self._lock:
            self.started_count += 1
            self.active_count += 1
            self.peak_active_count = max(self.peak_active_count, self.active_count)

    def job_completed(self):
        with self._lock:
            self.completed_count += 1
            self.active_count -= 1

    def job_failed(self, message: str):
        with self._lock:
            self.failed_count += 1
            self.active_count -= 1
            self.errors.append(message)
