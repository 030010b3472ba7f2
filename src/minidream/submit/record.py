"""Answer schemas and the prediction record builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from minidream.core.exceptions import ConfigError, ValidationError
from minidream.core.models import PredictionRecord

logger = logging.getLogger(__name__)

_VALID_TYPES = frozenset({"str", "int", "float", "choice"})


@dataclass(frozen=True)
class AnswerField:
    """One named answer a challenge module expects.

    ``default`` is the placeholder learners start from; submitting it
    unchanged counts as a missing answer.
    """

    name: str
    type: str  # "str", "int", "float", "choice"
    choices: tuple[str, ...] | None = None
    required: bool = True
    default: Any = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.type not in _VALID_TYPES:
            raise ValueError(
                f"Invalid answer type: {self.type!r}. "
                f"Must be one of {sorted(_VALID_TYPES)}"
            )
        if self.type == "choice" and not self.choices:
            raise ValueError(f"choices are required for choice answer {self.name!r}")

    def coerce(self, value: Any) -> Any:
        """Convert a raw answer to this field's type.

        Raises:
            ValidationError: If the value cannot be converted or is not
                one of the allowed choices.
        """
        if self.type == "str":
            return str(value).strip()
        if self.type == "choice":
            # YAML 1.1 reads an unquoted yes/no as a bool
            if isinstance(value, bool) and {"yes", "no"} <= set(self.choices or ()):
                value = "yes" if value else "no"
            text = str(value).strip()
            if text not in self.choices:  # type: ignore[operator]
                raise ValidationError(
                    self.name, f"{text!r} is not one of {list(self.choices or ())}",
                )
            return text
        try:
            if self.type == "int":
                if isinstance(value, bool):
                    raise ValueError(value)
                if isinstance(value, float):
                    if not value.is_integer():
                        raise ValueError(value)
                    return int(value)
                return int(str(value).strip())
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError(self.name, f"expected {self.type}, got {value!r}") from None


def is_empty(value: Any) -> bool:
    """True for None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


@dataclass(frozen=True)
class ModuleSchema:
    """The answers a challenge module's scorer expects."""

    module: str
    fields: tuple[AnswerField, ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def required(self) -> list[str]:
        return [f.name for f in self.fields if f.required]


MODULE_SCHEMAS: dict[str, ModuleSchema] = {}


def register_schema(schema: ModuleSchema) -> ModuleSchema:
    """Add (or replace) a module schema in the global registry."""
    MODULE_SCHEMAS[schema.module] = schema
    return schema


def get_schema(module: str) -> ModuleSchema:
    """Look up a module schema by name.

    Raises:
        ConfigError: If the module is not registered.
    """
    if module not in MODULE_SCHEMAS:
        raise ConfigError(
            f"Unknown challenge module {module!r}. "
            f"Registered modules: {sorted(MODULE_SCHEMAS)}",
            field="module",
        )
    return MODULE_SCHEMAS[module]


register_schema(ModuleSchema(
    module="motility",
    fields=(
        AnswerField("high_group", "str",
                    description="Surface (or cell line) with the highest composite motility"),
        AnswerField("match", "choice", choices=("yes", "no"),
                    description="Does the high-motility group match the expression result?"),
        AnswerField("explanation", "str", description="Free-text rationale"),
    ),
))

register_schema(ModuleSchema(
    module="expression",
    fields=(
        AnswerField("gene_count", "int",
                    description="Number of genes passing the expression filter"),
        AnswerField("high_group", "str",
                    description="Cell line with the highest mean expression"),
        AnswerField("explanation", "str", description="Free-text rationale"),
        AnswerField("pathway", "str", required=False,
                    description="KEGG pathway the selected genes fall in"),
    ),
))


class RecordBuilder:
    """Validate a module's answers and assemble a PredictionRecord.

    No network access happens here; the built record is handed to a
    Submitter separately.

    Args:
        schema: ModuleSchema, or the name of a registered module.
    """

    def __init__(self, schema: ModuleSchema | str) -> None:
        self.schema = get_schema(schema) if isinstance(schema, str) else schema

    def build(self, answers: Mapping[str, Any]) -> PredictionRecord:
        """Check and coerce answers, then build the record.

        Args:
            answers: Answer name to raw value.

        Returns:
            A PredictionRecord holding coerced answers in schema order.

        Raises:
            ValidationError: Naming the first answer that is missing,
                empty, left at its placeholder, malformed, or not part of
                the module.
        """
        known = set(self.schema.field_names)
        for name in answers:
            if name not in known:
                raise ValidationError(
                    name, f"not an answer of module {self.schema.module!r}",
                )

        coerced: dict[str, Any] = {}
        for answer in self.schema.fields:
            value = answers.get(answer.name)
            if is_empty(value) or (answer.default is not None and value == answer.default):
                if answer.required:
                    raise ValidationError(answer.name)
                continue
            coerced[answer.name] = answer.coerce(value)

        logger.info(
            "Built %s record with %d answer(s)", self.schema.module, len(coerced),
        )
        return PredictionRecord(module=self.schema.module, answers=coerced)
