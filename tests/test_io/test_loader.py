"""Tests for minidream.io.loader."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from minidream.core.exceptions import ConfigError
from minidream.core.models import Condition
from minidream.io.loader import load_table, measurements_from_table, resolve_columns
from minidream.measure.metrics import MetricRegistry
from tests.test_io.conftest import WIDE_COLUMNS


class TestLoadTable:
    def test_load_csv(self, motility_csv: Path):
        frame = load_table(motility_csv)
        assert len(frame) == 10
        assert "metric" in frame.columns

    def test_load_tsv_by_suffix(self, tmp_path: Path):
        path = tmp_path / "data.tsv"
        path.write_text("sample_id\tcell_line\tsurface\tspeed\nx\tT-47D\tGlass\t3\n")
        frame = load_table(path)
        assert list(frame.columns) == ["sample_id", "cell_line", "surface", "speed"]

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_table(tmp_path / "nope.csv")

    def test_dataframe_is_copied(self, wide_frame: pd.DataFrame):
        loaded = load_table(wide_frame)
        loaded.loc[0, "speed"] = 999.0
        assert wide_frame.loc[0, "speed"] == 10.0


class TestResolveColumns:
    def test_defaults(self):
        assert resolve_columns(None)["sample_id"] == "sample_id"

    def test_remap(self):
        assert resolve_columns({"sample_id": "Sample"})["sample_id"] == "Sample"

    def test_unknown_key_raises(self):
        with pytest.raises(ConfigError, match="viscosity"):
            resolve_columns({"viscosity": "Visc"})


class TestMeasurementsFromTable:
    def test_long_format(self, motility_csv: Path):
        measurements = measurements_from_table(load_table(motility_csv))
        assert len(measurements) == 10
        first = measurements[0]
        assert first.sample_id == "a1"
        assert first.cell_line == "T-47D"
        assert first.condition == Condition("Glass", 50.0)
        assert first.metric == "speed"
        assert first.value == 10.0
        assert first.diagnosis == "Breast Cancer"

    def test_long_format_blank_cells_become_none(self, motility_csv: Path):
        measurements = measurements_from_table(load_table(motility_csv))
        ha = [m for m in measurements if m.condition.surface == "HyaluronicAcid"]
        assert all(m.condition.stiffness is None for m in ha)
        assert measurements[-1].value is None

    def test_wide_format_in_registry_order(self, wide_frame: pd.DataFrame):
        measurements = measurements_from_table(wide_frame, WIDE_COLUMNS)
        assert [(m.sample_id, m.metric) for m in measurements] == [
            ("w1", "speed"), ("w1", "distance"), ("w2", "speed"), ("w2", "distance"),
        ]
        assert measurements[3].value is None
        assert measurements[2].condition.stiffness is None
        assert measurements[0].diagnosis is None

    def test_missing_required_column_raises(self, wide_frame: pd.DataFrame):
        with pytest.raises(ConfigError, match="Sample"):
            measurements_from_table(wide_frame.drop(columns=["Sample"]), WIDE_COLUMNS)

    def test_unknown_metric_raises(self):
        frame = pd.DataFrame({
            "sample_id": ["x"], "cell_line": ["c"], "surface": ["Glass"],
            "metric": ["wobble"], "value": [1.0],
        })
        with pytest.raises(ConfigError, match="wobble"):
            measurements_from_table(frame)

    def test_custom_metric_registered(self):
        frame = pd.DataFrame({
            "sample_id": ["x"], "cell_line": ["c"], "surface": ["Glass"],
            "metric": ["wobble"], "value": [1.0],
        })
        registry = MetricRegistry()
        registry.register("wobble")
        measurements = measurements_from_table(frame, registry=registry)
        assert measurements[0].metric == "wobble"

    def test_no_metric_columns_raises(self):
        frame = pd.DataFrame({"sample_id": ["x"], "cell_line": ["c"], "surface": ["Glass"]})
        with pytest.raises(ConfigError, match="metric"):
            measurements_from_table(frame)

    def test_non_numeric_value_raises(self):
        frame = pd.DataFrame({
            "sample_id": ["x"], "cell_line": ["c"], "surface": ["Glass"],
            "speed": ["fast"],
        })
        with pytest.raises(ConfigError, match="non-numeric"):
            measurements_from_table(frame)

    def test_row_without_sample_id_raises(self):
        frame = pd.DataFrame({
            "sample_id": [None], "cell_line": ["c"], "surface": ["Glass"], "speed": [1.0],
        })
        with pytest.raises(ConfigError, match="sample_id"):
            measurements_from_table(frame)

    def test_negative_value_raises_with_row_and_column(self):
        frame = pd.DataFrame({
            "sample_id": ["x", "y"], "cell_line": ["c", "c"], "surface": ["Glass", "Glass"],
            "metric": ["speed", "speed"], "value": [1.0, -2.0],
        })
        with pytest.raises(ConfigError, match=r"Row 1, column 'value'") as exc_info:
            measurements_from_table(frame)
        assert exc_info.value.field == "value"

    def test_negative_wide_value_names_metric_column(self):
        frame = pd.DataFrame({
            "sample_id": ["x"], "cell_line": ["c"], "surface": ["Glass"], "distance": [-1.0],
        })
        with pytest.raises(ConfigError, match="distance") as exc_info:
            measurements_from_table(frame)
        assert exc_info.value.field == "distance"

    def test_negative_stiffness_raises(self):
        frame = pd.DataFrame({
            "sample_id": ["x"], "cell_line": ["c"], "surface": ["Glass"],
            "stiffness": [-5.0], "speed": [1.0],
        })
        with pytest.raises(ConfigError, match="stiffness"):
            measurements_from_table(frame)

    def test_numeric_ids_with_blanks_keep_integer_text(self, tmp_path: Path):
        path = tmp_path / "numeric_ids.csv"
        path.write_text(
            "sample_id,cell_line,surface,speed\n"
            "1,231,Glass,2.0\n"
            ",231,Glass,3.0\n"
        )
        frame = load_table(path)
        frame = frame[frame["sample_id"].notna()]
        result = measurements_from_table(frame)
        assert result[0].sample_id == "1"
        assert result[0].cell_line == "231"

    def test_empty_table_yields_nothing(self):
        frame = pd.DataFrame(columns=["sample_id", "cell_line", "surface", "speed"])
        assert measurements_from_table(frame) == []
