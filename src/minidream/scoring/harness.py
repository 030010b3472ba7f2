"""Drive the external challenge scoring script (``challenge.py``).

The scoring logic itself lives with the challenge infrastructure; this
module only reproduces how course staff invoke it: validate or score all
submissions, optionally messaging participants, with output appended to
``log/score.log``.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from minidream.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

VALID_ACTIONS = ("validate", "score")
LOG_FILENAME = "score.log"


@dataclass(frozen=True)
class ScoringCommand:
    """One invocation of the challenge scoring driver."""

    script: Path
    user: str
    action: str = "score"
    send_messages: bool = True
    notifications: bool = True
    all_submissions: bool = True
    python: str = sys.executable

    def __post_init__(self) -> None:
        if self.action not in VALID_ACTIONS:
            raise ConfigError(
                f"Invalid scoring action: {self.action!r}. "
                f"Must be one of {list(VALID_ACTIONS)}",
                field="action",
            )
        if not self.user:
            raise ConfigError("A Synapse user name is required for scoring", field="user")

    def argv(self) -> list[str]:
        """Command line for the driver, global flags before the subcommand."""
        args = [self.python, str(self.script), "-u", self.user]
        if self.send_messages:
            args.append("--send-messages")
        if self.notifications:
            args.append("--notifications")
        args.append(self.action)
        if self.all_submissions:
            args.append("--all")
        return args


def run_scoring(command: ScoringCommand, log_dir: Path) -> int:
    """Run the scoring driver, appending its output to ``log_dir/score.log``.

    Args:
        command: The driver invocation.
        log_dir: Directory for the score log. Created if missing.

    Returns:
        The driver's exit code (0 on success).

    Raises:
        FileNotFoundError: If the driver script does not exist.
    """
    script = Path(command.script)
    if not script.exists():
        raise FileNotFoundError(f"Scoring script not found: {script}")

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME

    argv = command.argv()
    logger.info("Running %s (log: %s)", " ".join(argv), log_path)
    with open(log_path, "a") as log:
        log.write(f"# {datetime.now().isoformat()} {command.action} as {command.user}\n")
        log.flush()
        completed = subprocess.run(
            argv, stdout=log, stderr=subprocess.STDOUT, check=False,
        )

    if completed.returncode != 0:
        logger.warning(
            "Scoring driver exited with code %d; see %s", completed.returncode, log_path,
        )
    return completed.returncode
