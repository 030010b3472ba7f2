"""Tests for the Synapse and dry-run submitters."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from minidream.core.exceptions import SubmissionError
from minidream.submit.client import DryRunSubmitter, SynapseSubmitter, submission_filename


class TestSubmissionFilename:
    def test_named_after_module(self, motility_record):
        assert submission_filename(motility_record) == "motility_submission.yml"


class TestSynapseSubmitter:
    def test_submit_returns_submission_id(self, motility_record, synapse_client: MagicMock):
        submitter = SynapseSubmitter("9614112", "syn1234567", client=synapse_client, team="Team A")
        assert submitter.submit(motility_record) == "9700001"

        stored = synapse_client.store.call_args.args[0]
        assert stored.parentId == "syn1234567"

        kwargs = synapse_client.submit.call_args.kwargs
        assert kwargs["evaluation"] == "9614112"
        assert kwargs["team"] == "Team A"
        assert kwargs["entity"] is stored

    def test_uploaded_file_holds_record_yaml(self, motility_record, synapse_client: MagicMock):
        contents = {}

        def capture(entity):
            contents.update(yaml.safe_load(Path(entity.path).read_text()))
            return entity

        synapse_client.store.side_effect = capture
        SynapseSubmitter("9614112", "syn1", client=synapse_client).submit(motility_record)
        assert contents == motility_record.to_dict()

    def test_failure_wrapped_and_not_retried(self, motility_record, synapse_client: MagicMock):
        synapse_client.submit.side_effect = ConnectionError("service unavailable")
        submitter = SynapseSubmitter("9614112", "syn1", client=synapse_client)

        with pytest.raises(SubmissionError, match="service unavailable") as excinfo:
            submitter.submit(motility_record)

        assert isinstance(excinfo.value.cause, ConnectionError)
        assert synapse_client.submit.call_count == 1

    def test_store_failure_skips_submit(self, motility_record, synapse_client: MagicMock):
        synapse_client.store.side_effect = PermissionError("403 Forbidden")
        with pytest.raises(SubmissionError, match="403"):
            SynapseSubmitter("9614112", "syn1", client=synapse_client).submit(motility_record)
        synapse_client.submit.assert_not_called()


class TestDryRunSubmitter:
    def test_writes_submission_file(self, motility_record, tmp_path: Path):
        submitter = DryRunSubmitter(tmp_path / "out")
        submission_id = submitter.submit(motility_record)

        assert submission_id.startswith("dryrun-")
        path = tmp_path / "out" / "motility_submission.yml"
        assert submitter.submitted == [path]
        assert yaml.safe_load(path.read_text())["match"] == "yes"

    def test_unwritable_directory_raises(self, motility_record, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(SubmissionError):
            DryRunSubmitter(blocker / "sub").submit(motility_record)
