from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from fbc.domain.models import CompressionLevel

DEFAULT_PATTERN = "*"
DEFAULT_FORMAT = "br"


class AppConfig(BaseModel):
    input_files: Optional[List[Path]] = None
    input_dirs: List[Path] = Field(default_factory=list)
    output_files: Optional[List[Path]] = None
    output_dir: Optional[Path] = None
    # May be emptied on purpose; discovery rejects it when a directory is set
    patterns: List[str] = Field(default_factory=lambda: [DEFAULT_PATTERN])
    format: str = DEFAULT_FORMAT
    level: CompressionLevel = CompressionLevel.SMALLEST_SIZE
    # Any int; values below 1 run a single worker
    threads: int = 1
    recursive: bool = True
    quiet: bool = False
    debug: bool = False
    log_path: Optional[Path] = None
    fail_on_error: bool = False

    @field_validator("input_dirs", mode="before")
    @classmethod
    def accept_single_dir(cls, v):
        # `input_dir: foo` in YAML is the common single-directory case
        if isinstance(v, (str, Path)):
            return [v]
        return v

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("The format can not be null or empty.")
        return v

    @property
    def max_workers(self) -> int:
        return max(self.threads, 1)
