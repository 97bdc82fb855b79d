from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

Record = dict[str, Any]


class RecordStore(Protocol):
    """Remote record store holding classes, students, teachers and attendance.

    Every call is a suspension point. Implementations raise
    ``RemoteStoreError`` when the store cannot complete a call.
    """

    async def get_records(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Sequence[str] = (),
    ) -> Sequence[Record]:
        """Rows matching every equality filter."""

        raise NotImplementedError

    async def insert_record(self, collection: str, record: Mapping[str, Any]) -> Record:
        """Insert one row; returns it with its generated id."""

        raise NotImplementedError

    async def upsert_batch(self, collection: str, records: Sequence[Mapping[str, Any]]) -> None:
        """Insert-or-replace every row by the collection's unique key, as one batch."""

        raise NotImplementedError

    async def update_record(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    async def delete_record(self, collection: str, record_id: str) -> None:
        raise NotImplementedError
