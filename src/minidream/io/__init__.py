"""minidream IO — measurement tables, analysis config and YAML records."""

from minidream.io.config import AnalysisConfig
from minidream.io.loader import DEFAULT_COLUMNS, load_table, measurements_from_table

__all__ = [
    "AnalysisConfig",
    "DEFAULT_COLUMNS",
    "load_table",
    "measurements_from_table",
]
