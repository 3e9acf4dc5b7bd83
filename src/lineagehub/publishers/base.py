"""Publisher interface for LineageHub outputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from lineagehub.models import Observation


class Publisher(ABC):
    """Publishes validated observations into consumer-facing artifacts."""

    @abstractmethod
    def publish(self, records: Sequence[Observation]) -> None:
        """Publish records into output targets."""
