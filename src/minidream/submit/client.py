"""Submitters that hand a PredictionRecord to the challenge platform."""

from __future__ import annotations

import logging
import tempfile
import uuid
from pathlib import Path
from typing import Any, Protocol

from minidream.core.exceptions import SubmissionError
from minidream.core.models import PredictionRecord

logger = logging.getLogger(__name__)


def _require_synapseclient() -> Any:
    """Import and return the synapseclient module, or raise a helpful error."""
    try:
        import synapseclient

        return synapseclient
    except ImportError:
        raise ImportError(
            "synapseclient is required for challenge submission. "
            "Install it with: pip install synapseclient"
        ) from None


def submission_filename(record: PredictionRecord) -> str:
    """File name the scorer expects for a module's submission."""
    return f"{record.module}_submission.yml"


class Submitter(Protocol):
    """Anything that can submit a record and return its submission id."""

    def submit(self, record: PredictionRecord) -> str:
        ...


class SynapseSubmitter:
    """Submit prediction records to a Synapse evaluation queue.

    The record is written as a YAML file, stored as a Synapse File under
    ``parent_id`` and submitted to ``evaluation_id``. Failures are wrapped
    in SubmissionError and never retried.

    Args:
        evaluation_id: Evaluation queue ID for the challenge module.
        parent_id: Synapse project or folder ID the file is stored under.
        client: Logged-in ``synapseclient.Synapse``. Created on first use
            if not provided.
        auth_token: Personal access token used when creating the client.
            Falls back to the client's cached ``~/.synapseConfig`` login.
        team: Optional team name recorded with the submission.
    """

    def __init__(
        self,
        evaluation_id: str,
        parent_id: str,
        client: Any | None = None,
        auth_token: str | None = None,
        team: str | None = None,
    ) -> None:
        self.evaluation_id = evaluation_id
        self.parent_id = parent_id
        self.team = team
        self._client = client
        self._auth_token = auth_token

    def _get_client(self) -> Any:
        if self._client is None:
            synapseclient = _require_synapseclient()
            client = synapseclient.Synapse(silent=True)
            if self._auth_token:
                client.login(authToken=self._auth_token, silent=True)
            else:
                client.login(silent=True)
            self._client = client
        return self._client

    def submit(self, record: PredictionRecord) -> str:
        """Upload and submit a record.

        Returns:
            The Synapse submission ID.

        Raises:
            SubmissionError: On any transport, auth or service failure.
        """
        try:
            client = self._get_client()
            synapseclient = _require_synapseclient()
            with tempfile.TemporaryDirectory() as tmp:
                path = Path(tmp) / submission_filename(record)
                record.to_yaml(path)
                entity = client.store(synapseclient.File(str(path), parent=self.parent_id))
                submission = client.submit(
                    evaluation=self.evaluation_id,
                    entity=entity,
                    name=f"{record.module} submission",
                    team=self.team,
                )
        except Exception as exc:
            logger.error(
                "Submission of %s to %s failed: %s", record.module, self.evaluation_id, exc,
            )
            raise SubmissionError(
                f"Submission of {record.module!r} to evaluation "
                f"{self.evaluation_id} failed: {exc}",
                cause=exc,
            ) from exc

        submission_id = str(submission["id"])
        logger.info("Submitted %s as %s", record.module, submission_id)
        return submission_id


class DryRunSubmitter:
    """Write the submission file locally instead of submitting it.

    Args:
        output_dir: Directory the YAML submission file is written to.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.submitted: list[Path] = []

    def submit(self, record: PredictionRecord) -> str:
        """Write the record and return a local submission identifier.

        Raises:
            SubmissionError: If the output directory is not writable.
        """
        path = self.output_dir / submission_filename(record)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            record.to_yaml(path)
        except OSError as exc:
            raise SubmissionError(f"Could not write {path}: {exc}", cause=exc) from exc
        self.submitted.append(path)
        logger.info("Dry run: wrote %s", path)
        return f"dryrun-{uuid.uuid4().hex[:8]}"
