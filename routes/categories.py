import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

from quart import Blueprint, jsonify
from quart_schema import validate_request

from app_init.app_init import BeanFactory
from common.config.config import API_URL
from common.config.conts import CATEGORY_ENTITY
from common.exception.exceptions import NotFoundException, ValidationException
from common.utils.token import auth_required

factory = BeanFactory()
entity_service = factory.get_services()["entity_service"]

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

categories_bp = Blueprint("categories", __name__, url_prefix=f"{API_URL}/categories")


@dataclass
class CategoryRequest:
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


@categories_bp.route("", methods=["GET"])
async def list_categories():
    return jsonify(await entity_service.get_items(CATEGORY_ENTITY))


@categories_bp.route("/<string:category_id>", methods=["GET"])
async def get_category(category_id):
    category = await entity_service.get_item(CATEGORY_ENTITY, category_id)
    if not category:
        raise NotFoundException("The category with the given ID was not found!")
    return jsonify(category)


@categories_bp.route("", methods=["POST"])
@auth_required(admin=True)
@validate_request(CategoryRequest)
async def create_category(data: CategoryRequest, claims):
    if not data.name.strip():
        raise ValidationException("Category name is required")
    category = dataclasses.asdict(data)
    category["id"] = await entity_service.add_item(CATEGORY_ENTITY, category)
    logger.info(f"Category {category['id']} created by {claims.get('userId')}")
    return jsonify(category), 201


@categories_bp.route("/<string:category_id>", methods=["PUT"])
@auth_required(admin=True)
@validate_request(CategoryRequest)
async def update_category(category_id, data: CategoryRequest, claims):
    category = await entity_service.update_item(CATEGORY_ENTITY, category_id, dataclasses.asdict(data))
    if not category:
        raise NotFoundException("The category cannot be updated!")
    return jsonify(category)


@categories_bp.route("/<string:category_id>", methods=["DELETE"])
@auth_required(admin=True)
async def delete_category(category_id, claims):
    if await entity_service.delete_item(CATEGORY_ENTITY, category_id):
        return jsonify({"success": True, "message": "The category has been deleted"}), 200
    return jsonify({"success": False, "message": "Category not found!"}), 404
