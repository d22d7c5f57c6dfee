import fnmatch
import logging
import os
from pathlib import Path
from typing import Generator, List, Optional
from fbc.config.models import AppConfig
from fbc.domain.errors import EmptyPatternError
from fbc.domain.events import DiscoveryStarted, DiscoveryFinished
from fbc.domain.models import DiscoveredFile
from fbc.infrastructure.event_bus import EventBus


def _absolute(path: Path) -> Path:
    return Path(os.path.abspath(os.path.expanduser(str(path))))


class PathResolver:
    """Builds the ordered input list from explicit files and pattern-matched directory walks.

    Explicit files come first, in the order given. Each input directory is then
    walked once per pattern, depth-first, in OS enumeration order. A file matching
    two patterns is listed twice.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    def resolve(self, config: AppConfig) -> List[DiscoveredFile]:
        if config.input_dirs and not config.patterns:
            raise EmptyPatternError()

        paths: List[Path] = [_absolute(p) for p in (config.input_files or [])]

        for input_dir in config.input_dirs:
            self._publish(DiscoveryStarted(directory=input_dir))
            self.logger.info(f"DISCOVERY_START: scanning {input_dir} patterns={config.patterns} recursive={config.recursive}")
            for pattern in config.patterns:
                paths.extend(self.scan(input_dir, pattern, recursive=config.recursive))

        files = [DiscoveredFile(path=path, index=i) for i, path in enumerate(paths)]
        self.logger.info(f"Discovery finished: found={len(files)}")
        self._publish(DiscoveryFinished(files_found=len(files)))
        return files

    def scan(self, root_dir: Path, pattern: str, recursive: bool = True) -> Generator[Path, None, None]:
        """Yields files under root_dir whose name matches pattern."""
        for root, dirs, files in os.walk(str(_absolute(root_dir)), onerror=self._on_walk_error):
            if not recursive:
                dirs[:] = []  # stop after the top level

            root_path = Path(root)
            for file_name in files:
                if fnmatch.fnmatch(file_name, pattern):
                    yield root_path / file_name

    def _on_walk_error(self, error: OSError):
        # Missing or unreadable directories are skipped, not fatal
        self.logger.warning(f"Cannot scan {error.filename}: {error.strerror}")

    def _publish(self, event):
        if self.event_bus is not None:
            self.event_bus.publish(event)
