import os
import tempfile

# Tests always run against the in-memory repository and a throwaway upload dir.
os.environ["ENTITY_REPOSITORY"] = "inmemory"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="eshop-uploads-")
