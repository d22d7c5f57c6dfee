import logging
import os
from pathlib import Path
from typing import List, Optional
from fbc.config.models import AppConfig
from fbc.domain.errors import OutputCountMismatchError
from fbc.domain.events import PlanningFinished
from fbc.domain.models import CompressionJob, DiscoveredFile
from fbc.infrastructure.event_bus import EventBus


class JobPlanner:
    """Pairs each discovered file with its destination path.

    Destination rules, in order:
    - explicit output files: ``output_files[i]``; the list must be exactly as long
      as a non-empty discovered list, otherwise nothing is planned at all
    - otherwise ``<input>.<format>``, lowercased format
    - with an output directory, only the file name of that path is kept
      (``output_dir / name``), so same-named inputs from different
      subdirectories share one destination and the last writer wins
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    def destination_for(self, config: AppConfig, input_path: Path) -> Path:
        output_path = Path(f"{input_path}.{config.format.lower()}")
        if config.output_dir is not None:
            output_path = Path(os.path.abspath(config.output_dir)) / output_path.name
        return output_path

    def plan(self, config: AppConfig, files: List[DiscoveredFile]) -> List[CompressionJob]:
        output_files = config.output_files
        # An empty discovery has nothing to pair, whatever the output list holds
        if output_files is not None and files and len(output_files) != len(files):
            raise OutputCountMismatchError(len(output_files), len(files))

        jobs: List[CompressionJob] = []
        for i, discovered in enumerate(files):
            if output_files is not None:
                output_path = Path(os.path.abspath(output_files[i]))
            else:
                output_path = self.destination_for(config, discovered.path)
            jobs.append(CompressionJob(
                index=i,
                input_path=discovered.path,
                output_path=output_path,
                format=config.format,
                level=config.level,
            ))

        # Only side effect of planning, after validation has passed
        if config.output_dir is not None:
            Path(config.output_dir).mkdir(parents=True, exist_ok=True)

        self.logger.info(f"Planning finished: jobs={len(jobs)} format={config.format} level={config.level.value}")
        if self.event_bus is not None:
            self.event_bus.publish(PlanningFinished(jobs_planned=len(jobs)))
        return jobs
