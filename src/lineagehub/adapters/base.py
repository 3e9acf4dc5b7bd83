"""Base interface for all LineageHub ingestion adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from lineagehub.models import RawObservation


class ObservationAdapter(ABC):
    """Adapter that converts a source dataset into raw observations."""

    name: str

    @abstractmethod
    def read(self) -> Iterable[RawObservation]:
        """Yield raw observations from the adapter source."""
