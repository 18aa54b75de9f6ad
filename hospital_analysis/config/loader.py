import inspect
import yaml
import copy
from pathlib import Path
from typing import Any, Dict

from hospital_analysis.reporting.registry import REPORTS

from .defaults import DEFAULT_CONFIG


# -------------------------------------------------
# MAIN CONFIG LOADER
# -------------------------------------------------
def load_config(path: str | None) -> dict:
    """
    Load and merge user config with defaults.

    Rules:
    - Defaults win for every field the user omits
    - Sections are merged one level deep, min_group_size two levels
    - output_dir MUST always exist
    """

    user_config = {}

    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

        if not isinstance(user_config, dict):
            raise ValueError("Config file must contain a YAML dictionary")

    config = copy.deepcopy(DEFAULT_CONFIG)

    for key, value in user_config.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            for sub_key, sub_value in value.items():
                current = config[key].get(sub_key)
                if isinstance(sub_value, dict) and isinstance(current, dict):
                    current.update(sub_value)
                else:
                    config[key][sub_key] = sub_value
        else:
            config[key] = value

    config.setdefault("output_dir", "runs")
    config.setdefault("metadata", {})

    return config


def _reports_with_min_count() -> list:
    return [
        name for name, spec in REPORTS.items()
        if "min_count" in inspect.signature(spec.func).parameters
    ]


def report_options(config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Translate the `reports` config section into per-report keyword options.

    Raises ValueError for a min_group_size entry naming a report that has
    no group-size threshold.
    """
    section = (config or {}).get("reports", {}) or {}
    options: Dict[str, Dict[str, Any]] = {}
    allowed = _reports_with_min_count()

    for name, size in (section.get("min_group_size") or {}).items():
        if name not in allowed:
            raise ValueError(
                f"reports.min_group_size.{name} is not supported "
                f"(allowed: {', '.join(allowed)})"
            )
        options.setdefault(name, {})["min_count"] = int(size)

    if section.get("high_cost_limit") is not None:
        options.setdefault("high_cost_patients", {})["limit"] = int(
            section["high_cost_limit"]
        )

    return options
