import yaml
from pathlib import Path
from .models import AppConfig

def load_config(config_path: Path) -> AppConfig:
    """Loads YAML config and parses it into AppConfig Pydantic model."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    # Singular spelling for the one-directory case
    if "input_dir" in data and "input_dirs" not in data:
        data["input_dirs"] = data.pop("input_dir")

    # Relative paths in the file are relative to the file itself
    base = config_path.parent
    for key in ("input_files", "input_dirs", "output_files"):
        entries = data.get(key)
        if isinstance(entries, list):
            data[key] = [_anchor(base, entry) for entry in entries]
        elif isinstance(entries, str):
            data[key] = [_anchor(base, entries)]
    if data.get("output_dir"):
        data["output_dir"] = _anchor(base, data["output_dir"])

    return AppConfig(**data)

def _anchor(base: Path, entry) -> Path:
    path = Path(str(entry)).expanduser()
    return path if path.is_absolute() else base / path
