"""LineageHub output publishers."""

from .base import Publisher
from .chart_payload import ChartPayloadPublisher, DominantLineageSummaryPublisher

__all__ = [
    "Publisher",
    "ChartPayloadPublisher",
    "DominantLineageSummaryPublisher",
]
