"""Purger library: guarded bulk removal of all stored documents.

Public API for reporting collection sizes and emptying every collection
of a store that implements :class:`CollectionStore`.
"""

from cris_api.lib.purger.purger import build_report, execute_purge
from cris_api.lib.purger.store import CollectionStore, SqlAlchemyCollectionStore
from cris_api.lib.purger.types import CollectionCount, PurgeReport, PurgeResult, PurgeStatus

__all__ = [
    "CollectionCount",
    "CollectionStore",
    "PurgeReport",
    "PurgeResult",
    "PurgeStatus",
    "SqlAlchemyCollectionStore",
    "build_report",
    "execute_purge",
]
