"""In-memory implementations of the storage collaborators."""

from radar_alerts.stores.memory import (
    InMemoryAlertStore,
    InMemoryCaseProvider,
    InMemoryMetricsProvider,
    MetricReading,
)

__all__ = [
    "InMemoryAlertStore",
    "InMemoryCaseProvider",
    "InMemoryMetricsProvider",
    "MetricReading",
]
