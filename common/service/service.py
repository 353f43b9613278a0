import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from common.repository.crud_repository import CrudRepository, Join

logger = logging.getLogger(__name__)


class EntityServiceImpl:
    """
    Entity-model oriented facade over a CrudRepository.
    Routes and workflows address records by entity model name and id only.
    """

    def __init__(self, repository: CrudRepository):
        self._repository = repository

    async def add_item(self, entity_model: str, entity: Dict[str, Any]) -> str:
        meta = await self._repository.get_meta(entity_model)
        return await self._repository.save(meta, entity)

    async def get_item(self, entity_model: str, technical_id: Any,
                       joins: Sequence[Join] = ()) -> Optional[Dict[str, Any]]:
        meta = await self._repository.get_meta(entity_model)
        if joins:
            return await self._repository.find_by_id_with_joins(meta, technical_id, joins)
        return await self._repository.find_by_id(meta, technical_id)

    async def get_items(self, entity_model: str, condition: Optional[Dict[str, Any]] = None,
                        sort: Optional[Sequence[Tuple[str, int]]] = None,
                        joins: Sequence[Join] = ()) -> List[Dict[str, Any]]:
        meta = await self._repository.get_meta(entity_model)
        if joins:
            return await self._repository.find_all_with_joins(meta, joins, condition, sort)
        return await self._repository.find_all(meta, condition, sort)

    async def get_single_item_by_condition(self, entity_model: str,
                                           condition: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        meta = await self._repository.get_meta(entity_model)
        return await self._repository.find_one_by_criteria(meta, condition)

    async def update_item(self, entity_model: str, technical_id: Any,
                          entity: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        meta = await self._repository.get_meta(entity_model)
        return await self._repository.update(meta, technical_id, entity)

    async def delete_item(self, entity_model: str, technical_id: Any) -> Optional[Dict[str, Any]]:
        meta = await self._repository.get_meta(entity_model)
        return await self._repository.delete_by_id(meta, technical_id)

    async def count_items(self, entity_model: str, condition: Optional[Dict[str, Any]] = None) -> int:
        meta = await self._repository.get_meta(entity_model)
        return await self._repository.count(meta, condition)

    async def sum_field(self, entity_model: str, field: str) -> float:
        meta = await self._repository.get_meta(entity_model)
        return await self._repository.sum(meta, field)
