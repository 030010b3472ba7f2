"""Load measurement tables and unpack them into Measurement records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import pandas as pd

from minidream.core.exceptions import ConfigError
from minidream.core.models import Condition, Measurement
from minidream.measure.metrics import MetricRegistry

logger = logging.getLogger(__name__)

# Logical field -> default column name in the source table
DEFAULT_COLUMNS: dict[str, str] = {
    "sample_id": "sample_id",
    "cell_line": "cell_line",
    "surface": "surface",
    "stiffness": "stiffness",
    "diagnosis": "diagnosis",
    "metric": "metric",
    "value": "value",
}

_REQUIRED = ("sample_id", "cell_line", "surface")
_OPTIONAL = ("stiffness", "diagnosis")
_TAB_SUFFIXES = frozenset({".tsv", ".tab", ".txt"})


def load_table(source: str | Path | pd.DataFrame) -> pd.DataFrame:
    """Read a measurement table from disk.

    CSV is assumed unless the suffix marks a tab-separated file. A DataFrame
    is returned as a copy so callers never share the loaded snapshot.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if isinstance(source, pd.DataFrame):
        return source.copy()

    path = Path(source).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Measurement table not found: {path}")
    sep = "\t" if path.suffix.lower() in _TAB_SUFFIXES else ","
    frame = pd.read_csv(path, sep=sep)
    logger.info("Loaded %d row(s) from %s", len(frame), path)
    return frame


def resolve_columns(columns: Mapping[str, str] | None) -> dict[str, str]:
    """Merge a user column remap over the defaults.

    Raises:
        ConfigError: If the remap names an unknown logical field.
    """
    resolved = dict(DEFAULT_COLUMNS)
    for key, column in (columns or {}).items():
        if key not in DEFAULT_COLUMNS:
            raise ConfigError(
                f"Unknown column mapping {key!r}. Available: {sorted(DEFAULT_COLUMNS)}",
                field=key,
            )
        resolved[key] = column
    return resolved


def _cell(row: Mapping, column: str | None) -> object | None:
    """Value of a table cell, or None when the column is missing or empty."""
    if column is None:
        return None
    value = row[column]
    if pd.isna(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _text(value: object) -> str:
    """Identifier text; integral floats from blank-holding columns lose the ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _required(row: Mapping, column: str, index: int) -> str:
    value = _cell(row, column)
    if value is None:
        raise ConfigError(f"Row {index} has no value in column {column!r}", field=column)
    return _text(value)


def _as_float(value: object | None, column: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(
            f"Column {column!r} holds a non-numeric value: {value!r}", field=column,
        ) from None


def _build(record_type: type, index: int, column: str, **kwargs: object):
    """Construct a record, reporting a rejected value by row and column."""
    try:
        return record_type(**kwargs)
    except ValueError as e:
        raise ConfigError(f"Row {index}, column {column!r}: {e}", field=column) from None


def measurements_from_table(
    frame: pd.DataFrame,
    columns: Mapping[str, str] | None = None,
    registry: MetricRegistry | None = None,
) -> list[Measurement]:
    """Unpack a long or wide measurement table into Measurement records.

    A long table has one row per (sample, metric) with ``metric`` and
    ``value`` columns. A wide table has one row per sample and one column
    per registered metric; metrics are emitted in registry order.

    Args:
        frame: Table as returned by ``load_table``.
        columns: Logical field -> column name remap.
        registry: Allowed metrics. Uses built-ins if not provided.

    Returns:
        Measurements in table row order.

    Raises:
        ConfigError: If a required column is absent, a metric is not
            registered, a numeric column holds text, or a value is
            negative.
    """
    registry = registry or MetricRegistry()
    cols = resolve_columns(columns)

    missing = [cols[key] for key in _REQUIRED if cols[key] not in frame.columns]
    if missing:
        raise ConfigError(
            f"Measurement table is missing column(s): {', '.join(missing)}",
            field=missing[0],
        )
    optional = {key: cols[key] if cols[key] in frame.columns else None for key in _OPTIONAL}

    long_format = cols["metric"] in frame.columns and cols["value"] in frame.columns
    if long_format:
        unknown = sorted(set(frame[cols["metric"]].dropna().astype(str)) - set(registry))
        if unknown:
            raise ConfigError(
                f"Unknown metric(s) in table: {', '.join(unknown)}. "
                f"Available: {registry.list_metrics()}",
                field=unknown[0],
            )
        metric_columns: list[str] = []
    else:
        metric_columns = [m for m in registry if m in frame.columns]
        if not metric_columns:
            raise ConfigError(
                "Measurement table has neither metric/value columns nor any "
                f"registered metric column. Available: {registry.list_metrics()}",
            )

    measurements: list[Measurement] = []
    for index, row in enumerate(frame.to_dict(orient="records")):
        condition = _build(
            Condition, index, cols["stiffness"],
            surface=_required(row, cols["surface"], index),
            stiffness=_as_float(_cell(row, optional["stiffness"]), cols["stiffness"]),
        )
        diagnosis = _cell(row, optional["diagnosis"])
        base = {
            "sample_id": _required(row, cols["sample_id"], index),
            "cell_line": _required(row, cols["cell_line"], index),
            "condition": condition,
            "diagnosis": None if diagnosis is None else _text(diagnosis),
        }
        if long_format:
            measurements.append(_build(
                Measurement, index, cols["value"],
                metric=_required(row, cols["metric"], index),
                value=_as_float(_cell(row, cols["value"]), cols["value"]),
                **base,
            ))
        else:
            for metric in metric_columns:
                measurements.append(_build(
                    Measurement, index, metric,
                    metric=metric,
                    value=_as_float(_cell(row, metric), metric),
                    **base,
                ))
    return measurements
