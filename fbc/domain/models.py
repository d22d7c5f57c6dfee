from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CompressionLevel(str, Enum):
    OPTIMAL = "Optimal"
    FASTEST = "Fastest"
    NO_COMPRESSION = "NoCompression"
    SMALLEST_SIZE = "SmallestSize"

    @classmethod
    def _missing_(cls, value):
        # Accept "fastest", "smallestsize", etc.
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class JobStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class DiscoveredFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    index: int


class CompressionJob(BaseModel):
    """One input-to-output compression task bound to a fixed format and level."""
    model_config = ConfigDict(frozen=True)

    index: int
    input_path: Path
    output_path: Path
    format: str
    level: CompressionLevel = CompressionLevel.SMALLEST_SIZE


class JobResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    job: CompressionJob
    status: JobStatus
    written: bool = False  # False for unrecognized formats
    error_message: Optional[str] = None
    duration_seconds: Optional[float] = None

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.SUCCEEDED


class RunSummary(BaseModel):
    files_found: int = 0
    jobs_planned: int = 0
    results: List[JobResult] = Field(default_factory=list)
    elapsed: Optional[timedelta] = None
    planning_error: Optional[str] = None

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.status == JobStatus.SUCCEEDED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == JobStatus.FAILED)

    @property
    def ok(self) -> bool:
        return self.planning_error is None and self.failed == 0

    def exit_code(self, fail_on_error: bool = False) -> int:
        """Process exit status. Always 0 unless failures were asked to be fatal."""
        if fail_on_error and not self.ok:
            return 1
        return 0
