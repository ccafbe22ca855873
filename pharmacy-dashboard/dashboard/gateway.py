"""
gateway.py
==========
Deletes tickets at the feed and reflects the result in the local snapshot.
"""

from .errors import DeleteFailure
from .snapshot import SnapshotStore


class MutationGateway:
    """
    Write-through deletes. The snapshot only changes after the feed has
    confirmed the delete, so a failed delete never hides a ticket.
    """

    def __init__(self, feed, store: SnapshotStore):
        self._feed = feed
        self._store = store

    async def delete(self, record_id) -> int:
        """
        Delete one ticket remotely, then drop it locally.
        Raises DeleteFailure and leaves the snapshot untouched on failure.
        """
        if record_id is None or record_id == "":
            raise DeleteFailure(record_id, "Cannot delete a ticket without patientrecord_id")

        await self._feed.delete(record_id)
        removed = self._store.remove(record_id)
        print(f"🗑️ Ticket {record_id} deleted ({removed} removed locally)")
        return removed
