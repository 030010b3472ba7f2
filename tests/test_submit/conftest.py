"""Shared fixtures for submission tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from minidream.core.models import PredictionRecord


@pytest.fixture
def motility_answers() -> dict[str, Any]:
    return {
        "high_group": "HyaluronicAcid",
        "match": "yes",
        "explanation": "Cells on the softest surface moved furthest.",
    }


@pytest.fixture
def motility_record(motility_answers) -> PredictionRecord:
    return PredictionRecord("motility", motility_answers)


@pytest.fixture
def synapse_client() -> MagicMock:
    """A stand-in for a logged-in synapseclient.Synapse."""
    client = MagicMock()
    client.store.side_effect = lambda entity: entity
    client.submit.return_value = {"id": "9700001"}
    return client
