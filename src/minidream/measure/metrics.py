"""Motility metric vocabulary and metric registry."""

from __future__ import annotations

_BUILTIN_METRICS: dict[str, str] = {
    "speed": "Mean instantaneous speed along the track (um/min)",
    "distance": "Total path length travelled (um)",
    "end_to_end_distance": "Straight-line displacement from first to last position (um)",
    "persistence": "Ratio of end-to-end distance to total path length",
}


class MetricRegistry:
    """Registry of motility metrics a measurement table may contain.

    Comes pre-loaded with 4 built-in metrics. Custom metrics can be
    registered via ``register()``. Iteration follows registration order,
    which is also the order wide tables are unpacked in.
    """

    def __init__(self) -> None:
        self._metrics: dict[str, str] = dict(_BUILTIN_METRICS)

    def register(self, name: str, description: str = "") -> None:
        """Register a custom metric.

        Args:
            name: Metric name as it appears in measurement tables.
            description: Human-readable description.

        Raises:
            ValueError: If name is empty.
        """
        if not name:
            raise ValueError("Metric name must not be empty")
        self._metrics[name] = description

    def describe(self, name: str) -> str:
        """Return the description of a registered metric.

        Raises:
            KeyError: If metric name is not registered.
        """
        if name not in self._metrics:
            raise KeyError(
                f"Unknown metric {name!r}. "
                f"Available: {sorted(self._metrics)}"
            )
        return self._metrics[name]

    def list_metrics(self) -> list[str]:
        """Return sorted list of all registered metric names."""
        return sorted(self._metrics)

    def __iter__(self):
        return iter(self._metrics)

    def __contains__(self, name: str) -> bool:
        return name in self._metrics

    def __len__(self) -> int:
        return len(self._metrics)
