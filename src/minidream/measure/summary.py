"""Per-condition summaries of composite motility scores."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from minidream.core.models import CompositeScore
from minidream.measure.filters import check_fields, get_field

SUMMARY_COLUMNS = ["mean", "std", "n"]


def scores_to_frame(scores: Sequence[CompositeScore]) -> pd.DataFrame:
    """Flatten composite scores into a DataFrame, one row per sample."""
    columns = ["sample_id", "cell_line", "surface", "stiffness", "diagnosis", "n_metrics", "score"]
    rows = [
        {
            "sample_id": s.sample_id,
            "cell_line": s.cell_line,
            "surface": s.condition.surface,
            "stiffness": s.condition.stiffness,
            "diagnosis": s.diagnosis,
            "n_metrics": s.n_metrics,
            "score": s.score,
        }
        for s in scores
    ]
    return pd.DataFrame(rows, columns=columns)


def summarize_scores(
    scores: Sequence[CompositeScore],
    by: Sequence[str] | str = ("cell_line", "surface"),
) -> pd.DataFrame:
    """Mean, standard deviation and count of scores per group.

    Args:
        scores: Composite scores to summarize.
        by: Field name(s) to group by; Condition fields are allowed.

    Returns:
        DataFrame with the grouping columns plus ``mean``, ``std`` and ``n``,
        sorted by descending mean.

    Raises:
        ConfigError: If a grouping field is unknown.
    """
    keys = [by] if isinstance(by, str) else list(by)
    check_fields(CompositeScore, keys)

    if not scores:
        return pd.DataFrame(columns=keys + SUMMARY_COLUMNS)

    frame = pd.DataFrame({
        **{k: [get_field(s, k) for s in scores] for k in keys},
        "score": [s.score for s in scores],
    })
    summary = (
        frame.groupby(keys, sort=False, dropna=False)["score"]
        .agg(mean="mean", std="std", n="count")
        .reset_index()
    )
    return summary.sort_values("mean", ascending=False, kind="stable").reset_index(drop=True)


def highest_group(scores: Sequence[CompositeScore], by: str = "surface") -> str | None:
    """Label of the group with the highest mean composite score.

    Returns None when there are no scores.
    """
    summary = summarize_scores(scores, by=by)
    if summary.empty:
        return None
    return str(summary.at[0, by])
