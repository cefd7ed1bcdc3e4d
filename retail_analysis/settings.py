from pathlib import Path
from typing import Any, Optional

import yaml

from retail_analysis.logger import resolve_level

CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(path: Optional[str | Path] = None) -> dict[str, Any]:
    """
    Load the YAML run configuration (the packaged config.yaml by default).
    Missing sections come back as empty mappings.
    """
    config_path = Path(path) if path is not None else CONFIG_PATH
    with open(config_path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    for section in ("data", "ranking", "logging", "queries"):
        config[section] = config.get(section) or {}

    level = config["logging"].get("level", "INFO")
    try:
        resolve_level(level)
    except ValueError as e:
        raise ValueError(f"Invalid logging.level in {config_path}: {level!r}") from e
    return config
