"""Predicate filter stage: select the analysis subset by exact field match."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Iterable, Mapping, Sequence, TypeVar

from minidream.core.exceptions import ConfigError
from minidream.core.models import CONDITION_FIELDS

T = TypeVar("T")


def record_fields(record_type: type) -> set[str]:
    """Field names a record of this type can be filtered or grouped by.

    Top-level dataclass fields plus the fields of the nested Condition.
    """
    names = {f.name for f in fields(record_type)}
    if "condition" in names:
        names |= CONDITION_FIELDS
    return names


def get_field(record: Any, name: str) -> Any:
    """Read a top-level field, falling back to the record's Condition."""
    if name in CONDITION_FIELDS and not hasattr(record, name):
        return getattr(record.condition, name)
    return getattr(record, name)


def check_fields(record_type: type, names: Iterable[str]) -> None:
    """Raise ConfigError if any name is not a field of record_type."""
    if not is_dataclass(record_type):
        raise TypeError(f"{record_type!r} is not a record type")
    known = record_fields(record_type)
    for name in names:
        if name not in known:
            raise ConfigError(
                f"Unknown field {name!r} for {record_type.__name__}. "
                f"Available: {sorted(known)}",
                field=name,
            )


def filter_records(
    records: Sequence[T],
    criteria: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> list[T]:
    """Keep records whose fields equal every criterion exactly.

    Matching is case-sensitive equality with no partial matching. A
    criterion that matches nothing yields an empty list; a criterion that
    names an unknown field raises ConfigError.

    Args:
        records: Measurement or CompositeScore records, all of one type.
        criteria: Field name to required value.
        **kwargs: Additional criteria, merged over ``criteria``.

    Returns:
        Matching records in input order.

    Raises:
        ConfigError: If a criterion names a field the records do not have.
    """
    wanted = {**(criteria or {}), **kwargs}
    if not records or not wanted:
        return list(records)

    check_fields(type(records[0]), wanted)
    return [
        r for r in records
        if all(get_field(r, name) == value for name, value in wanted.items())
    ]
