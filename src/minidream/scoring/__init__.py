"""minidream scoring — wrapper around the external challenge scoring driver."""

from minidream.scoring.harness import ScoringCommand, run_scoring

__all__ = ["ScoringCommand", "run_scoring"]
