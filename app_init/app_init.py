import logging

from common.auth.auth_service import AuthService
from common.config.config import (
    DATABASE_NAME,
    ENTITY_REPOSITORY,
    JWT_ALGORITHM,
    JWT_EXPIRES_IN_SECONDS,
    JWT_SECRET,
    MONGO_URI,
    UPLOAD_DIR,
)
from common.repository.in_memory_db import InMemoryRepository
from common.repository.mongo.mongo_init import MongoInitService
from common.repository.mongo.mongo_repository import MongoRepository
from common.service.service import EntityServiceImpl
from common.service.upload_service import UploadService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

class BeanFactory:
    _instance = None
    _initialized = False

    def __new__(cls, config=None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config=None):
        # Only run the initialization logic a single time
        if self.__class__._initialized:
            return
        self.__class__._initialized = True

        self.config = {**self._load_default_config(), **(config or {})}

        try:
            self.auth_service = AuthService(
                secret=self.config["JWT_SECRET"],
                algorithm=JWT_ALGORITHM,
                expires_in=JWT_EXPIRES_IN_SECONDS,
            )
            self.entity_repository = self._create_repository(repo_type=self.config["ENTITY_REPOSITORY"])
            self.entity_service = EntityServiceImpl(repository=self.entity_repository)
            self.upload_service = UploadService(upload_dir=self.config["UPLOAD_DIR"])
            self.init_service = (
                MongoInitService(self.entity_repository)
                if isinstance(self.entity_repository, MongoRepository)
                else None
            )

        except Exception as e:
            logger.exception(f"Error during BeanFactory initialization: {e}")
            raise

    def _load_default_config(self):
        """
        Load default configuration values from the environment-backed config module.
        """
        return {
            "ENTITY_REPOSITORY": ENTITY_REPOSITORY,
            "JWT_SECRET": JWT_SECRET,
            "UPLOAD_DIR": UPLOAD_DIR,
        }

    def _create_repository(self, repo_type):
        """
        Create the appropriate repository based on configuration.
        """
        if repo_type.lower() == "mongo":
            return MongoRepository(mongo_uri=MONGO_URI, database_name=DATABASE_NAME)
        else:
            return InMemoryRepository()

    async def startup(self):
        """
        Open the storage connection; called once before the app starts serving.
        """
        if self.init_service is not None:
            await self.init_service.initialize_service()
        else:
            await self.entity_repository.connect()

    async def shutdown(self):
        await self.entity_repository.close()

    def get_services(self):
        """
        Retrieve a dictionary of all managed services for further use.
        """
        return {
            "auth_service": self.auth_service,
            "entity_repository": self.entity_repository,
            "entity_service": self.entity_service,
            "upload_service": self.upload_service,
        }
