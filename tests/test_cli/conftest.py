"""Shared fixtures for CLI module tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def config_yaml(tmp_path: Path) -> Path:
    """Config with a stiffness override and Synapse IDs."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "module: motility\n"
        "overrides:\n"
        "  HyaluronicAcid: 0.5\n"
        "evaluation_id: '9614112'\n"
        "parent_id: syn1234567\n"
        "team: Team Motility\n"
    )
    return path


@pytest.fixture
def record_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "motility_submission.yml"
    path.write_text(
        "module: motility\n"
        "high_group: HyaluronicAcid\n"
        "match: 'yes'\n"
        "explanation: Cells on the softest surface moved furthest.\n"
    )
    return path
