import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

ASCENDING = 1
DESCENDING = -1


@dataclass(frozen=True)
class Join:
    """
    Describes how a stored reference is expanded into the referenced record.

    field: name of the attribute holding an id (or a list of ids)
    entity_model: model the id belongs to
    fields: subset of attributes to keep on the joined record ("id" is always kept)
    joins: nested joins applied to the joined record
    """
    field: str
    entity_model: str
    fields: Optional[Tuple[str, ...]] = None
    joins: Tuple["Join", ...] = ()


class CrudRepository(ABC):
    """
    Async storage contract shared by every backend.
    `meta` is a dict carrying at least the `entity_model` the call targets.
    Records are plain dicts whose identifier is stored under "id".
    """

    async def get_meta(self, entity_model: str) -> Dict[str, Any]:
        return {"entity_model": entity_model}

    @abstractmethod
    async def save(self, meta, entity: Dict[str, Any]) -> str:
        """Insert a new record and return its generated id."""

    @abstractmethod
    async def find_by_id(self, meta, technical_id: Any) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def find_all(self, meta, criteria: Optional[Dict[str, Any]] = None,
                       sort: Optional[Sequence[Tuple[str, int]]] = None) -> List[Dict[str, Any]]:
        """
        Criteria map a field to an exact value, or to a list of accepted values.
        Sort is a sequence of (field, ASCENDING | DESCENDING) pairs.
        """

    @abstractmethod
    async def update(self, meta, technical_id: Any, entity: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Set the given fields and return the updated record, or None when it does not exist."""

    @abstractmethod
    async def delete_by_id(self, meta, technical_id: Any) -> Optional[Dict[str, Any]]:
        """Remove the record and return it, or None when it does not exist."""

    @abstractmethod
    async def count(self, meta, criteria: Optional[Dict[str, Any]] = None) -> int:
        pass

    @abstractmethod
    async def sum(self, meta, field: str) -> float:
        """Sum a numeric field over all records; 0 when there are none."""

    async def find_one_by_criteria(self, meta, criteria: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        entities = await self.find_all(meta, criteria)
        return entities[0] if entities else None

    async def find_by_id_with_joins(self, meta, technical_id: Any,
                                    joins: Sequence[Join]) -> Optional[Dict[str, Any]]:
        entity = await self.find_by_id(meta, technical_id)
        if entity is None:
            return None
        return await self.populate(entity, joins)

    async def find_all_with_joins(self, meta, joins: Sequence[Join],
                                  criteria: Optional[Dict[str, Any]] = None,
                                  sort: Optional[Sequence[Tuple[str, int]]] = None) -> List[Dict[str, Any]]:
        entities = await self.find_all(meta, criteria, sort)
        return list(await asyncio.gather(*(self.populate(entity, joins) for entity in entities)))

    async def populate(self, entity: Dict[str, Any], joins: Sequence[Join]) -> Dict[str, Any]:
        """
        Replace referenced ids with the referenced records, recursively.
        A reference that no longer resolves becomes None.
        """
        for join in joins:
            value = entity.get(join.field)
            if value is None:
                continue
            if isinstance(value, list):
                entity[join.field] = list(await asyncio.gather(*(self._resolve(join, ref) for ref in value)))
            else:
                entity[join.field] = await self._resolve(join, value)
        return entity

    async def _resolve(self, join: Join, reference: Any) -> Optional[Dict[str, Any]]:
        meta = await self.get_meta(join.entity_model)
        joined = await self.find_by_id(meta, reference)
        if joined is None:
            return None
        if join.fields is not None:
            joined = {key: joined.get(key) for key in ("id",) + tuple(join.fields)}
        if join.joins:
            joined = await self.populate(joined, join.joins)
        return joined
