"""Shared fixtures for IO module tests."""

from __future__ import annotations

import pandas as pd
import pytest


@pytest.fixture
def wide_frame() -> pd.DataFrame:
    """One row per sample with a column per metric and custom column names."""
    return pd.DataFrame({
        "Sample": ["w1", "w2"],
        "CellLine": ["T-47D", "T-47D"],
        "Surface": ["Glass", "HyaluronicAcid"],
        "Stiffness": [50.0, None],
        "speed": [10.0, 20.0],
        "distance": [100.0, None],
    })


WIDE_COLUMNS = {
    "sample_id": "Sample",
    "cell_line": "CellLine",
    "surface": "Surface",
    "stiffness": "Stiffness",
}
