from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.constants import CLASSES
from ..store.repository import RecordStore
from .model import ClassEntity


class ClassRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    async def list_all(self) -> Sequence[ClassEntity]:
        rows = await self._store.get_records(CLASSES, order_by=("name",))
        return [ClassEntity.from_record(r) for r in rows]

    async def get_by_id(self, class_id: str) -> Optional[ClassEntity]:
        rows = await self._store.get_records(CLASSES, {"id": class_id})
        return ClassEntity.from_record(rows[0]) if rows else None

    async def update(self, class_id: str, fields: Mapping[str, Any]) -> None:
        await self._store.update_record(CLASSES, class_id, fields)

    async def delete(self, class_id: str) -> None:
        await self._store.delete_record(CLASSES, class_id)
