"""YAML serialization for AnalysisConfig and PredictionRecord.

Requires pyyaml. Raises ImportError with clear install instructions
if pyyaml is not available.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from minidream.core.exceptions import ConfigError
from minidream.core.models import ConditionOverride, PredictionRecord

if TYPE_CHECKING:
    from minidream.io.config import AnalysisConfig


def _require_yaml() -> Any:
    """Import and return the yaml module, or raise a helpful error."""
    try:
        import yaml

        return yaml
    except ImportError:
        raise ImportError(
            "pyyaml is required for config and record serialization. "
            "Install it with: pip install pyyaml"
        ) from None


def _read_mapping(path: Path, what: str) -> dict[str, Any]:
    yaml = _require_yaml()

    path = Path(path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid {what} YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid {what} YAML: expected a mapping, got {type(data).__name__}"
        )
    return data


def _write_mapping(data: dict[str, Any], path: Path) -> None:
    yaml = _require_yaml()

    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def config_to_yaml(config: AnalysisConfig, path: Path) -> None:
    """Serialize an AnalysisConfig to a YAML file."""
    data: dict[str, Any] = {"module": config.module}
    if config.source is not None:
        data["source"] = str(config.source)
    if config.columns:
        data["columns"] = dict(config.columns)
    if config.filters:
        data["filters"] = dict(config.filters)
    if config.overrides:
        data["overrides"] = []
        for rule in config.overrides:
            entry: dict[str, Any] = {
                "attribute": rule.attribute,
                "match": rule.match,
                "value": rule.value,
            }
            if rule.match_field != "surface":
                entry["match_field"] = rule.match_field
            data["overrides"].append(entry)
    for key in ("evaluation_id", "parent_id", "team"):
        value = getattr(config, key)
        if value is not None:
            data[key] = value

    _write_mapping(data, path)


def _parse_overrides(raw: Any) -> list[ConditionOverride]:
    """Accept either a list of rule mappings or a ``{surface: stiffness}`` mapping."""
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [
            ConditionOverride(attribute="stiffness", match=str(k), value=v)
            for k, v in raw.items()
        ]
    if not isinstance(raw, list):
        raise ConfigError("Invalid config YAML: 'overrides' must be a list or mapping")

    rules = []
    for entry in raw:
        for key in ("attribute", "match", "value"):
            if not isinstance(entry, dict) or key not in entry:
                raise ConfigError(
                    f"Invalid config YAML: override entry missing required key '{key}'",
                    field=key,
                )
        rules.append(ConditionOverride(
            attribute=entry["attribute"],
            match=str(entry["match"]),
            value=entry["value"],
            match_field=entry.get("match_field", "surface"),
        ))
    return rules


def config_from_yaml(path: Path) -> AnalysisConfig:
    """Deserialize an AnalysisConfig from a YAML file.

    Raises:
        FileNotFoundError: If the YAML file doesn't exist.
        ConfigError: If the YAML is invalid or missing required fields.
    """
    from minidream.io.config import AnalysisConfig
    from minidream.measure.normalizer import as_override_rules

    data = _read_mapping(path, "config")
    if "module" not in data:
        raise ConfigError("Invalid config YAML: missing required key 'module'", field="module")

    for key in ("columns", "filters"):
        if not isinstance(data.get(key) or {}, dict):
            raise ConfigError(f"Invalid config YAML: '{key}' must be a mapping", field=key)

    return AnalysisConfig(
        module=str(data["module"]),
        source=Path(data["source"]) if data.get("source") else None,
        columns=data.get("columns") or {},
        filters=data.get("filters") or {},
        overrides=as_override_rules(_parse_overrides(data.get("overrides"))),
        evaluation_id=data.get("evaluation_id"),
        parent_id=data.get("parent_id"),
        team=data.get("team"),
    )


def record_to_yaml(record: PredictionRecord, path: Path) -> None:
    """Write a prediction record as a YAML submission file."""
    _write_mapping(record.to_dict(), path)


def record_from_yaml(path: Path) -> PredictionRecord:
    """Read a prediction record from a YAML submission file.

    Raises:
        FileNotFoundError: If the YAML file doesn't exist.
        ConfigError: If the file has no ``module`` key.
    """
    data = _read_mapping(path, "record")
    if "module" not in data:
        raise ConfigError("Invalid record YAML: missing required key 'module'", field="module")
    module = str(data.pop("module"))
    return PredictionRecord(module=module, answers=data)
