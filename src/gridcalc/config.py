"""Project-level configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "gridcalc.yaml"

DEFAULT_CONFIG = {
    "max_iterations": 1000,
    "detect_cycles": True,
    "formula_marker": "=",
    "columns": "F",  # last column letter of a new sheet
    "rows": 19,
    "logging_dir": None,  # relative paths resolve against the project dir
    "logging_fsync": False,
}

DEMO_CONFIG = """\
# gridcalc configuration
# max_iterations: 1000   # rewrite passes before giving up
# detect_cycles: true    # reject circular cell references up front
# columns: F             # sheet width A..F (at most J)
# rows: 19               # sheet height (at most 99)
# logging_dir: logs      # write events.ndjson here
"""


def load_config(project_dir: Path) -> dict[str, Any]:
    """Load configuration from ``gridcalc.yaml``, with defaults.

    Args:
        project_dir: Directory that may contain ``gridcalc.yaml``.

    Returns:
        Merged configuration dict.  ``logging_dir`` is made absolute.

    Raises:
        ValueError: If the file is not a YAML mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{config_path} must contain a mapping")
        config.update(user_config)

    if config.get("logging_dir") is not None:
        log_dir = Path(config["logging_dir"])
        if not log_dir.is_absolute():
            log_dir = project_dir / log_dir
        config["logging_dir"] = str(log_dir)
    return config
