from .loader import load_config, report_options
from .defaults import DEFAULT_CONFIG

__all__ = [
    "load_config",
    "report_options",
    "DEFAULT_CONFIG",
]
