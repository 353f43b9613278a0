import logging

from quart import Blueprint, jsonify, request

from app_init.app_init import BeanFactory
from common.config.config import API_URL
from common.config.conts import PRODUCT_ENTITY
from common.exception.exceptions import NotFoundException
from common.utils.token import auth_required
from entity.product.workflow import CATEGORY_JOIN, create_product, list_products, update_product

factory = BeanFactory()
entity_service = factory.get_services()["entity_service"]
upload_service = factory.get_services()["upload_service"]

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

products_bp = Blueprint("products", __name__, url_prefix=f"{API_URL}/products")


@products_bp.route("", methods=["GET"])
async def get_products():
    return jsonify(await list_products(entity_service, request.args.get("categories")))


@products_bp.route("/<string:product_id>", methods=["GET"])
async def get_product(product_id):
    product = await entity_service.get_item(PRODUCT_ENTITY, product_id, joins=[CATEGORY_JOIN])
    if not product:
        raise NotFoundException("Product not found")
    return jsonify(product)


@products_bp.route("", methods=["POST"])
@auth_required(admin=True)
async def post_product(claims):
    form = await request.form
    files = await request.files
    product = await create_product(entity_service, upload_service, form, files.get("image"), request.host_url)
    return jsonify(product), 201


@products_bp.route("/<string:product_id>", methods=["PUT"])
@auth_required(admin=True)
async def put_product(product_id, claims):
    form = await request.form
    files = await request.files
    product = await update_product(
        entity_service, upload_service, product_id, form, files.get("image"), request.host_url
    )
    return jsonify(product)


@products_bp.route("/<string:product_id>", methods=["DELETE"])
@auth_required(admin=True)
async def delete_product(product_id, claims):
    if await entity_service.delete_item(PRODUCT_ENTITY, product_id):
        return jsonify({"success": True, "message": "The product is deleted"}), 200
    return jsonify({"success": False, "message": "Product not found"}), 404
