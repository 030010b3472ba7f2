"""Shared test fixtures for minidream."""

from __future__ import annotations

from pathlib import Path

import pytest

from minidream.core.models import Condition, Measurement


def make_measurement(
    sample_id: str,
    metric: str,
    value: float | None,
    cell_line: str = "T-47D",
    surface: str = "Glass",
    stiffness: float | None = 1.0,
    diagnosis: str | None = "Breast Cancer",
) -> Measurement:
    """Build a Measurement with sensible defaults for tests."""
    return Measurement(
        sample_id=sample_id,
        cell_line=cell_line,
        condition=Condition(surface=surface, stiffness=stiffness),
        metric=metric,
        value=value,
        diagnosis=diagnosis,
    )


@pytest.fixture
def three_sample_measurements() -> list[Measurement]:
    """3 samples x 2 metrics, one cell line.

    speed: [10, 20, 5], distance: [100, 50, 0]
    """
    speeds = {"s1": 10.0, "s2": 20.0, "s3": 5.0}
    distances = {"s1": 100.0, "s2": 50.0, "s3": 0.0}
    rows = []
    for sid in ("s1", "s2", "s3"):
        rows.append(make_measurement(sid, "speed", speeds[sid]))
        rows.append(make_measurement(sid, "distance", distances[sid]))
    return rows


@pytest.fixture
def motility_csv(tmp_path: Path) -> Path:
    """A long-format motility table on disk.

    Two cell lines, three surfaces; HyaluronicAcid has no stiffness.
    """
    path = tmp_path / "motility.csv"
    path.write_text(
        "sample_id,cell_line,diagnosis,surface,stiffness,metric,value\n"
        "a1,T-47D,Breast Cancer,Glass,50,speed,10\n"
        "a1,T-47D,Breast Cancer,Glass,50,distance,100\n"
        "a2,T-47D,Breast Cancer,HyaluronicAcid,,speed,20\n"
        "a2,T-47D,Breast Cancer,HyaluronicAcid,,distance,50\n"
        "a3,T-47D,Breast Cancer,Collagen,0.5,speed,5\n"
        "a3,T-47D,Breast Cancer,Collagen,0.5,distance,0\n"
        "b1,MCF-10A,Normal,Glass,50,speed,4\n"
        "b1,MCF-10A,Normal,Glass,50,distance,40\n"
        "b2,MCF-10A,Normal,HyaluronicAcid,,speed,8\n"
        "b2,MCF-10A,Normal,HyaluronicAcid,,distance,\n"
    )
    return path
