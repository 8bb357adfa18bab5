"""Data types for the purger library.

Defines the read-only report produced before a purge and the per-collection
outcome of the execute phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from cris_api.core.exceptions import PartialPurgeFailure, PurgeFailure


@dataclass(frozen=True)
class CollectionCount:
    """Number of documents held by one collection at report time."""

    name: str
    count: int


@dataclass(frozen=True)
class PurgeReport:
    """Collection → document count table from the report phase.

    Attributes:
        collections: Counts in the order collections will be purged.
    """

    collections: tuple[CollectionCount, ...]

    @property
    def total(self) -> int:
        """Sum of document counts across all collections."""
        return sum(c.count for c in self.collections)

    def count_for(self, name: str) -> int | None:
        """Return the reported count for ``name``, or None if not reported."""
        for c in self.collections:
            if c.name == name:
                return c.count
        return None


class PurgeStatus(StrEnum):
    """Overall outcome of an execute phase."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class PurgeResult:
    """Outcome of the execute phase.

    Attributes:
        deleted: Documents deleted, keyed by collection that purged cleanly.
        failed: Error message keyed by collection whose purge failed.
    """

    deleted: dict[str, int] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total_deleted(self) -> int:
        """Grand total of deleted documents."""
        return sum(self.deleted.values())

    @property
    def status(self) -> PurgeStatus:
        """SUCCESS when nothing failed, FAILED when nothing succeeded, PARTIAL otherwise."""
        if not self.failed:
            return PurgeStatus.SUCCESS
        if not self.deleted:
            return PurgeStatus.FAILED
        return PurgeStatus.PARTIAL

    @property
    def success(self) -> bool:
        return self.status is PurgeStatus.SUCCESS

    def raise_for_status(self) -> None:
        """Raise if any collection failed.

        Raises:
            PartialPurgeFailure: If some, but not all, collections failed.
            PurgeFailure: If every collection failed.
        """
        status = self.status
        if status is PurgeStatus.PARTIAL:
            raise PartialPurgeFailure(self.failed, succeeded=list(self.deleted))
        if status is PurgeStatus.FAILED:
            raise PurgeFailure(self.failed)
