"""Base class for observation record stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from lineagehub.models import Observation, RawObservation


class RecordStore(ABC):
    """Holds validated observations and answers selection queries.

    Stores are scoped resources: open them once at startup, hand them to the
    service, and ``close()`` them (or use ``with``) on shutdown.
    """

    @abstractmethod
    def persist(self, records: Sequence[Observation]) -> None:
        """Persist records in backend-specific format."""

    @abstractmethod
    def fetch(self, waves: Sequence[int], prefecture: str | None = None) -> list[RawObservation]:
        """Return every stored row for ``waves``, optionally for one prefecture.

        Rows carry the stored week text in ``raw_week``; callers normalize it.
        """

    def prefectures(self, waves: Sequence[int]) -> list[str]:
        """Sorted prefectures with at least one row in ``waves``."""

        return sorted({str(row.prefecture) for row in self.fetch(waves)})

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> RecordStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
