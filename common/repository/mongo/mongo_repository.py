import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from common.exception.exceptions import StorageException
from common.repository.crud_repository import CrudRepository

logger = logging.getLogger(__name__)


def _to_object_id(technical_id: Any) -> Optional[ObjectId]:
    if isinstance(technical_id, ObjectId):
        return technical_id
    if technical_id is None or not ObjectId.is_valid(str(technical_id)):
        return None
    return ObjectId(str(technical_id))


def _to_entity(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is None:
        return None
    entity = {**document}
    entity["id"] = str(entity.pop("_id"))
    return entity


def _to_filter(criteria: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    query = {}
    for field, expected in (criteria or {}).items():
        if isinstance(expected, (list, tuple, set)):
            query[field] = {"$in": list(expected)}
        else:
            query[field] = expected
    return query


class MongoRepository(CrudRepository):
    """
    Thread-safe singleton repository backed by a MongoDB database.
    One collection per entity model; ids are ObjectIds exposed as strings under "id".
    Driver errors are re-raised as StorageException.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls, mongo_uri: str, database_name: str):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._mongo_uri = mongo_uri
                cls._instance._database_name = database_name
                cls._instance._client = None
        return cls._instance

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = AsyncMongoClient(self._mongo_uri)
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise StorageException("Database connection failed") from e
        logger.info(f"Database connection is ready ({self._database_name})")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("Database connection closed")

    def _collection(self, meta):
        if self._client is None:
            raise StorageException("Database is not connected")
        return self._client[self._database_name][meta["entity_model"]]

    async def save(self, meta, entity: Dict[str, Any]) -> str:
        document = {k: v for k, v in entity.items() if k != "id"}
        try:
            result = await self._collection(meta).insert_one(document)
        except PyMongoError as e:
            raise StorageException(f"Failed to insert {meta['entity_model']}") from e
        return str(result.inserted_id)

    async def find_by_id(self, meta, technical_id: Any) -> Optional[Dict[str, Any]]:
        _id = _to_object_id(technical_id)
        if _id is None:
            return None
        try:
            document = await self._collection(meta).find_one({"_id": _id})
        except PyMongoError as e:
            raise StorageException(f"Failed to read {meta['entity_model']}") from e
        return _to_entity(document)

    async def find_all(self, meta, criteria: Optional[Dict[str, Any]] = None,
                       sort: Optional[Sequence[Tuple[str, int]]] = None) -> List[Dict[str, Any]]:
        try:
            cursor = self._collection(meta).find(_to_filter(criteria))
            if sort:
                cursor = cursor.sort(list(sort))
            return [_to_entity(document) async for document in cursor]
        except PyMongoError as e:
            raise StorageException(f"Failed to query {meta['entity_model']}") from e

    async def update(self, meta, technical_id: Any, entity: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        _id = _to_object_id(technical_id)
        if _id is None:
            return None
        fields = {k: v for k, v in entity.items() if k != "id"}
        try:
            document = await self._collection(meta).find_one_and_update(
                {"_id": _id}, {"$set": fields}, return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            raise StorageException(f"Failed to update {meta['entity_model']}") from e
        return _to_entity(document)

    async def delete_by_id(self, meta, technical_id: Any) -> Optional[Dict[str, Any]]:
        _id = _to_object_id(technical_id)
        if _id is None:
            return None
        try:
            document = await self._collection(meta).find_one_and_delete({"_id": _id})
        except PyMongoError as e:
            raise StorageException(f"Failed to delete {meta['entity_model']}") from e
        return _to_entity(document)

    async def count(self, meta, criteria: Optional[Dict[str, Any]] = None) -> int:
        try:
            return await self._collection(meta).count_documents(_to_filter(criteria))
        except PyMongoError as e:
            raise StorageException(f"Failed to count {meta['entity_model']}") from e

    async def sum(self, meta, field: str) -> float:
        pipeline = [{"$group": {"_id": None, "total": {"$sum": f"${field}"}}}]
        try:
            cursor = await self._collection(meta).aggregate(pipeline)
            results = await cursor.to_list()
        except PyMongoError as e:
            raise StorageException(f"Failed to aggregate {meta['entity_model']}") from e
        return results[0]["total"] if results else 0

    async def create_index(self, meta, keys: Sequence[Tuple[str, int]], unique: bool = False) -> str:
        try:
            return await self._collection(meta).create_index(list(keys), unique=unique)
        except PyMongoError as e:
            raise StorageException(f"Failed to create index on {meta['entity_model']}") from e
