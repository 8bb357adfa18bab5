"""Two-phase purge: report every collection, then empty them on request.

The report phase never mutates. The execute phase deletes each collection's
documents independently; a collection that fails is recorded and the rest
are still attempted. Collections themselves are left in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from cris_api.lib.purger.types import CollectionCount, PurgeReport, PurgeResult

if TYPE_CHECKING:
    from cris_api.lib.purger.store import CollectionStore


async def build_report(store: CollectionStore) -> PurgeReport:
    """Count the documents in every collection.

    Args:
        store: The collection store to inspect.

    Returns:
        Collection counts in purge order.
    """
    counts = []
    for name in await store.list_collections():
        counts.append(CollectionCount(name=name, count=await store.count_documents(name)))
    report = PurgeReport(collections=tuple(counts))
    logger.info(f"Purge report: {len(report.collections)} collection(s), {report.total} document(s)")
    return report


async def execute_purge(store: CollectionStore, report: PurgeReport) -> PurgeResult:
    """Delete all documents from every collection in ``report``.

    Args:
        store: The collection store to purge.
        report: Report produced by :func:`build_report` for the same store.

    Returns:
        Per-collection deleted counts and failures.
    """
    result = PurgeResult()
    for entry in report.collections:
        try:
            deleted = await store.delete_all(entry.name)
        except Exception as e:  # noqa: BLE001
            result.failed[entry.name] = str(e) or type(e).__name__
            logger.error(f"Failed to purge collection '{entry.name}': {e!r}")
            continue
        result.deleted[entry.name] = deleted
        if deleted != entry.count:
            logger.warning(f"Collection '{entry.name}': reported {entry.count} document(s) but deleted {deleted}")
        else:
            logger.info(f"Purged collection '{entry.name}' ({deleted} document(s))")
    logger.info(f"Purge finished with status '{result.status}': {result.total_deleted} document(s) deleted")
    return result
