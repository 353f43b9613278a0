import logging

from common.config.conts import ORDER_ENTITY, USER_ENTITY
from common.repository.crud_repository import ASCENDING, DESCENDING
from common.repository.mongo.mongo_repository import MongoRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# entity model -> list of (keys, unique)
INDEXES = {
    USER_ENTITY: [([("email", ASCENDING)], True)],
    ORDER_ENTITY: [
        ([("dateOrdered", DESCENDING)], False),
        ([("user", ASCENDING), ("dateOrdered", DESCENDING)], False),
    ],
}


class MongoInitService:
    def __init__(self, mongo_repository: MongoRepository):
        self.mongo_repository = mongo_repository

    async def initialize_service(self):
        await self.mongo_repository.connect()
        await self.init_indexes()

    async def init_indexes(self):
        for entity_model, indexes in INDEXES.items():
            meta = await self.mongo_repository.get_meta(entity_model)
            for keys, unique in indexes:
                name = await self.mongo_repository.create_index(meta, keys, unique=unique)
                logger.info(f"Ensured index {name} on {entity_model}")
