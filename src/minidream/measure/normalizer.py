"""Per-group max scaling and composite motility scores."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from minidream.core.exceptions import ConfigError
from minidream.core.models import (
    CONDITION_FIELDS,
    CompositeScore,
    Condition,
    ConditionOverride,
    Measurement,
    NormalizedMetric,
)

logger = logging.getLogger(__name__)

GROUP_KEYS = ("metric", "cell_line")

Overrides = Union[Sequence[ConditionOverride], Mapping[str, float]]


def as_override_rules(
    overrides: Overrides | None,
    attribute: str = "stiffness",
    match_field: str = "surface",
) -> list[ConditionOverride]:
    """Normalize override configuration to a validated list of rules.

    A mapping ``{"HyaluronicAcid": 0.5}`` is read as rules setting
    ``attribute`` on every record whose ``match_field`` equals the key.

    Raises:
        ConfigError: If a rule names an attribute that Condition lacks,
            or sets a value that attribute cannot hold.
    """
    if not overrides:
        return []
    if isinstance(overrides, Mapping):
        rules = [
            ConditionOverride(attribute=attribute, match=key, value=value, match_field=match_field)
            for key, value in overrides.items()
        ]
    else:
        rules = list(overrides)

    for rule in rules:
        for name in (rule.attribute, rule.match_field):
            if name not in CONDITION_FIELDS:
                raise ConfigError(
                    f"Override for {rule.match!r} references unknown condition "
                    f"attribute {name!r}. Available: {sorted(CONDITION_FIELDS)}",
                    field=name,
                )
    return [_checked_rule(rule) for rule in rules]


def _checked_rule(rule: ConditionOverride) -> ConditionOverride:
    """Coerce a rule's value to its attribute's type and check it on a Condition."""
    value = rule.value
    if rule.attribute == "stiffness":
        try:
            if isinstance(value, bool):
                raise ValueError(value)
            value = float(value)
        except (TypeError, ValueError):
            raise ConfigError(
                f"Override for {rule.match!r} sets stiffness to a non-numeric "
                f"value: {rule.value!r}",
                field=str(rule.match),
            ) from None
    else:
        value = str(value)
    try:
        Condition(**{"surface": "override", rule.attribute: value})
    except ValueError as e:
        raise ConfigError(
            f"Invalid override for {rule.match!r}: {e}", field=str(rule.match),
        ) from None
    return dataclasses.replace(rule, value=value)


def apply_overrides(
    measurements: Iterable[Measurement],
    overrides: Overrides | None,
) -> list[Measurement]:
    """Replace condition properties on records matched by an override rule.

    Rules are applied in order, so a later rule wins over an earlier one.
    Unmatched records are passed through unchanged.

    Raises:
        ConfigError: If a rule names an attribute that Condition lacks.
    """
    rules = as_override_rules(overrides)
    measurements = list(measurements)
    if not rules:
        return measurements

    result: list[Measurement] = []
    n_overridden = 0
    for m in measurements:
        condition = m.condition
        for rule in rules:
            if getattr(condition, rule.match_field) == rule.match:
                condition = dataclasses.replace(condition, **{rule.attribute: rule.value})
        if condition is m.condition:
            result.append(m)
        else:
            result.append(dataclasses.replace(m, condition=condition))
            n_overridden += 1

    logger.info("Applied %d override rule(s) to %d measurement(s)", len(rules), n_overridden)
    return result


class Normalizer:
    """Turn raw per-metric measurements into comparable composite scores.

    Each value is divided by the maximum of its (metric, cell line) group,
    then the normalized values of a sample are averaged, unweighted, into
    one CompositeScore. Holds no state beyond its override configuration,
    so repeated calls on the same input give the same output.

    Args:
        overrides: Override rules, or a ``{surface: stiffness}`` mapping.
    """

    def __init__(self, overrides: Overrides | None = None) -> None:
        self._overrides = as_override_rules(overrides)

    @property
    def overrides(self) -> list[ConditionOverride]:
        return list(self._overrides)

    def normalize(self, measurements: Sequence[Measurement]) -> list[NormalizedMetric]:
        """Apply overrides, then scale every value by its group maximum.

        A group whose maximum is zero or absent yields None for every member
        instead of dividing by zero.

        Args:
            measurements: Raw measurements in any order.

        Returns:
            One NormalizedMetric per input measurement, in input order.

        Raises:
            ConfigError: If an override rule names an unknown attribute.
        """
        records = apply_overrides(measurements, self._overrides)
        if not records:
            return []
        self._warn_unresolved(records)

        frame = pd.DataFrame({
            "metric": [m.metric for m in records],
            "cell_line": [m.cell_line for m in records],
            "value": np.array(
                [np.nan if m.value is None else m.value for m in records],
                dtype=np.float64,
            ),
        })
        group_max = frame.groupby(list(GROUP_KEYS), sort=False)["value"].transform("max")
        group_max = group_max.where(group_max > 0)

        undefined = frame.loc[group_max.isna(), list(GROUP_KEYS)].drop_duplicates()
        for metric, cell_line in undefined.itertuples(index=False):
            logger.warning(
                "No positive values for metric %r in cell line %r; normalized values left absent",
                metric, cell_line,
            )

        normalized = (frame["value"] / group_max).tolist()
        return [
            NormalizedMetric(
                sample_id=m.sample_id,
                cell_line=m.cell_line,
                condition=m.condition,
                metric=m.metric,
                raw_value=m.value,
                normalized_value=None if pd.isna(v) else float(v),
                diagnosis=m.diagnosis,
            )
            for m, v in zip(records, normalized)
        ]

    def score(self, measurements: Sequence[Measurement]) -> list[CompositeScore]:
        """Compute one composite score per sample.

        The score is the mean of the sample's present normalized values.
        Samples with no present value are dropped, not zero-filled.

        Args:
            measurements: Raw measurements in any order.

        Returns:
            CompositeScores in first-seen sample order.

        Raises:
            ConfigError: If an override rule names an unknown attribute.
        """
        normalized = self.normalize(measurements)
        return aggregate(normalized)

    @staticmethod
    def _warn_unresolved(records: Sequence[Measurement]) -> None:
        missing = sorted({m.condition.surface for m in records if m.condition.stiffness is None})
        if missing:
            logger.warning(
                "Surfaces without a stiffness value (add an override): %s",
                ", ".join(missing),
            )


def aggregate(normalized: Sequence[NormalizedMetric]) -> list[CompositeScore]:
    """Average normalized values per sample, ignoring absent values."""
    if not normalized:
        return []

    first_seen: dict[str, NormalizedMetric] = {}
    for n in normalized:
        first_seen.setdefault(n.sample_id, n)

    frame = pd.DataFrame({
        "sample_id": [n.sample_id for n in normalized],
        "value": np.array(
            [np.nan if n.normalized_value is None else n.normalized_value for n in normalized],
            dtype=np.float64,
        ),
    })
    stats = frame.groupby("sample_id", sort=False)["value"].agg(["mean", "count"])

    scores: list[CompositeScore] = []
    dropped: list[str] = []
    for sample_id in first_seen:
        count = int(stats.at[sample_id, "count"])
        if count == 0:
            dropped.append(sample_id)
            continue
        ref = first_seen[sample_id]
        scores.append(CompositeScore(
            sample_id=sample_id,
            cell_line=ref.cell_line,
            condition=ref.condition,
            score=float(stats.at[sample_id, "mean"]),
            n_metrics=count,
            diagnosis=ref.diagnosis,
        ))

    if dropped:
        logger.warning(
            "Dropped %d sample(s) with no normalized metrics: %s",
            len(dropped), ", ".join(dropped),
        )
    return scores
