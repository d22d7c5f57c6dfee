import pytest
import yaml
from pathlib import Path
from fbc.config.models import AppConfig
from fbc.domain.models import CompressionLevel
from fbc.infrastructure.event_bus import EventBus

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config(test_input_dir, test_output_dir):
    """Returns a sample AppConfig object for testing."""
    return AppConfig(
        input_dirs=[test_input_dir],
        output_dir=test_output_dir,
        patterns=["*.txt"],
        format="gz",
        level=CompressionLevel.FASTEST,
        threads=2,
        recursive=True,
    )

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "fbc.yaml"

    content = {
        'input_dirs': ['../input'],
        'output_dir': '../input_out',
        'patterns': ['*.txt', '*.json'],
        'format': 'zlib',
        'level': 'Fastest',
        'threads': 3,
        'recursive': False,
        'quiet': False,
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

@pytest.fixture
def recorded_events(event_bus):
    """Subscribes to every published event type used by the pipeline."""
    from fbc.domain import events as ev

    received = []
    for event_type in (
        ev.DiscoveryStarted, ev.DiscoveryFinished, ev.PlanningFinished, ev.PlanningFailed,
        ev.JobStarted, ev.JobCompleted, ev.JobFailed, ev.ProcessingFinished,
    ):
        event_bus.subscribe(event_type, received.append)
    return received

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def test_input_dir(tmp_path):
    """Creates a test input directory."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir

@pytest.fixture
def test_output_dir(tmp_path):
    """Output directory path (not created; planning creates it)."""
    return tmp_path / "input_out"

@pytest.fixture
def text_files(test_input_dir):
    """Creates text files in the input directory and one subdirectory."""
    files = []

    for i in range(3):
        f = test_input_dir / f"file{i}.txt"
        f.write_bytes(b"lorem ipsum dolor sit amet " * 200)
        files.append(f)

    (test_input_dir / "notes.log").write_text("not matched by *.txt")

    subdir = test_input_dir / "sub"
    subdir.mkdir()
    f = subdir / "nested.txt"
    f.write_bytes(b"nested content " * 100)
    files.append(f)

    return files
