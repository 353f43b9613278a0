import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId

from common.config.conts import CATEGORY_ENTITY, PRODUCT_ENTITY
from common.exception.exceptions import ReferenceNotFoundException, ValidationException
from common.repository.crud_repository import Join
from common.service.service import EntityServiceImpl
from common.service.upload_service import UploadService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

CATEGORY_JOIN = Join("category", CATEGORY_ENTITY)

TEXT_FIELDS = ("name", "description", "richDescription", "brand", "category")
NUMBER_FIELDS = ("price", "rating")
INTEGER_FIELDS = ("countInStock", "numReviews")


def _to_number(field: str, value: str, cast):
    try:
        number = cast(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{field} must be a number")
    if not math.isfinite(number):
        raise ValidationException(f"{field} must be a finite number")
    if number < 0:
        raise ValidationException(f"{field} must not be negative")
    return number


def parse_product_form(form) -> Dict[str, Any]:
    """
    Converts multipart form values into a typed product record.
    Missing fields are left out of the record; callers decide which ones are required
    (create and update both require a category that resolves).
    """
    product = {}
    for field in TEXT_FIELDS:
        if form.get(field) is not None:
            product[field] = form.get(field)
    for field in NUMBER_FIELDS:
        if form.get(field) not in (None, ""):
            product[field] = _to_number(field, form.get(field), float)
    for field in INTEGER_FIELDS:
        if form.get(field) not in (None, ""):
            product[field] = _to_number(field, form.get(field), int)
    if form.get("isFeatured") is not None:
        product["isFeatured"] = str(form.get("isFeatured")).lower() in ("true", "1", "on", "yes")
    return product


async def ensure_category(entity_service: EntityServiceImpl, category_id: Optional[str]) -> None:
    if not category_id or await entity_service.get_item(CATEGORY_ENTITY, category_id) is None:
        raise ReferenceNotFoundException("Invalid Category")


async def list_products(entity_service: EntityServiceImpl, categories: Optional[str] = None) -> List[Dict[str, Any]]:
    condition = None
    if categories:
        condition = {"category": [c.strip() for c in categories.split(",") if c.strip()]}
    return await entity_service.get_items(PRODUCT_ENTITY, condition=condition, joins=[CATEGORY_JOIN])


async def create_product(entity_service: EntityServiceImpl, upload_service: UploadService,
                         form, image_file, host_url: str) -> Dict[str, Any]:
    product = parse_product_form(form)
    await ensure_category(entity_service, product.get("category"))
    if not image_file:
        raise ValidationException("No image in the request")
    if not product.get("name"):
        raise ValidationException("Product name is required")

    file_name = await upload_service.save_image(image_file)
    product.setdefault("price", 0.0)
    product.setdefault("countInStock", 0)
    product.setdefault("isFeatured", False)
    product["image"] = upload_service.build_url(host_url, file_name)
    product["dateCreated"] = datetime.now(timezone.utc).isoformat()
    product["id"] = await entity_service.add_item(PRODUCT_ENTITY, product)
    logger.info(f"Created product {product['id']}")
    return product


async def update_product(entity_service: EntityServiceImpl, upload_service: UploadService, product_id: str,
                         form, image_file, host_url: str) -> Dict[str, Any]:
    if not ObjectId.is_valid(product_id):
        raise ValidationException("Invalid Product Id")

    fields = parse_product_form(form)
    await ensure_category(entity_service, fields.get("category"))

    existing = await entity_service.get_item(PRODUCT_ENTITY, product_id)
    if existing is None:
        raise ValidationException("Invalid Product")

    if image_file:
        file_name = await upload_service.save_image(image_file)
        fields["image"] = upload_service.build_url(host_url, file_name)

    return await entity_service.update_item(PRODUCT_ENTITY, product_id, fields)
