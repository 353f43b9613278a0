import logging
import os
import time
from urllib.parse import urljoin

from werkzeug.utils import secure_filename

from common.config.conts import FILE_TYPE_MAP, UPLOADS_URL_PATH
from common.exception.exceptions import ValidationException

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class UploadService:
    """
    Stores product images on local disk and builds their public URLs.
    """

    def __init__(self, upload_dir: str):
        self.upload_dir = upload_dir

    def build_filename(self, original_filename: str, mimetype: str) -> str:
        extension = FILE_TYPE_MAP.get(mimetype)
        if not extension:
            raise ValidationException("Invalid image type")
        base_name = "-".join((original_filename or "image").split(" "))
        file_name = secure_filename(f"{base_name}-{int(time.time() * 1000)}.{extension}")
        return file_name

    async def save_image(self, image_file) -> str:
        """
        Saves an uploaded image and returns the stored file name.
        """
        file_name = self.build_filename(image_file.filename, image_file.mimetype)
        os.makedirs(self.upload_dir, exist_ok=True)
        await image_file.save(os.path.join(self.upload_dir, file_name))
        logger.info(f"Stored product image {file_name}")
        return file_name

    @staticmethod
    def build_url(host_url: str, file_name: str) -> str:
        return urljoin(host_url, f"{UPLOADS_URL_PATH}/{file_name}")
