import os
from dotenv import load_dotenv
load_dotenv()  # Loads the .env file automatically
# Lambda to get an environment variable or raise an Exception if not found
get_env = lambda key: os.getenv(key) or (_ for _ in ()).throw(Exception(f"{key} not found"))

API_URL = os.getenv("API_URL", "/api/v1")
JWT_SECRET = os.getenv("JWT_SECRET", "local-development-secret")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_IN_SECONDS = int(os.getenv("JWT_EXPIRES_IN_SECONDS", str(24 * 60 * 60)))
ENTITY_REPOSITORY = os.getenv("ENTITY_REPOSITORY", "inmemory")
MONGO_URI = get_env("MONGO_URI") if ENTITY_REPOSITORY.lower() == "mongo" else os.getenv("MONGO_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "eshop")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "public", "uploads"))
PORT = int(os.getenv("PORT", "3000"))
