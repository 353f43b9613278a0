import copy
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId

from common.repository.crud_repository import CrudRepository, DESCENDING

logger = logging.getLogger(__name__)


def _matches(entity: Dict[str, Any], criteria: Optional[Dict[str, Any]]) -> bool:
    if not criteria:
        return True
    for field, expected in criteria.items():
        actual = entity.get(field)
        if isinstance(expected, (list, tuple, set)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryRepository(CrudRepository):
    """
    Dict-backed repository with the same contract as the Mongo one.
    Records are copied on the way in and out so callers never share state with the store.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._collections = {}
        return cls._instance

    async def connect(self) -> None:
        logger.info("Using in-memory entity repository")

    async def close(self) -> None:
        pass

    def clear(self) -> None:
        self._collections.clear()

    def _collection(self, meta) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(meta["entity_model"], {})

    async def save(self, meta, entity: Dict[str, Any]) -> str:
        technical_id = str(ObjectId())
        record = copy.deepcopy(entity)
        record["id"] = technical_id
        self._collection(meta)[technical_id] = record
        return technical_id

    async def find_by_id(self, meta, technical_id: Any) -> Optional[Dict[str, Any]]:
        record = self._collection(meta).get(str(technical_id))
        return copy.deepcopy(record) if record is not None else None

    async def find_all(self, meta, criteria: Optional[Dict[str, Any]] = None,
                       sort: Optional[Sequence[Tuple[str, int]]] = None) -> List[Dict[str, Any]]:
        entities = [copy.deepcopy(e) for e in self._collection(meta).values() if _matches(e, criteria)]
        # Apply the least significant key first so earlier keys win.
        for field, direction in reversed(list(sort or [])):
            entities.sort(key=lambda e: (e.get(field) is not None, e.get(field)), reverse=direction == DESCENDING)
        return entities

    async def update(self, meta, technical_id: Any, entity: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = self._collection(meta).get(str(technical_id))
        if record is None:
            return None
        record.update(copy.deepcopy({k: v for k, v in entity.items() if k != "id"}))
        return copy.deepcopy(record)

    async def delete_by_id(self, meta, technical_id: Any) -> Optional[Dict[str, Any]]:
        return self._collection(meta).pop(str(technical_id), None)

    async def count(self, meta, criteria: Optional[Dict[str, Any]] = None) -> int:
        return sum(1 for e in self._collection(meta).values() if _matches(e, criteria))

    async def sum(self, meta, field: str) -> float:
        total = 0
        for entity in self._collection(meta).values():
            total += entity.get(field) or 0
        return total
