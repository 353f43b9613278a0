import dataclasses
import logging
from dataclasses import dataclass
from typing import List, Optional

from quart import Blueprint, jsonify
from quart_schema import validate_request

from app_init.app_init import BeanFactory
from common.config.config import API_URL
from entity.order import queries
from entity.order.workflow import delete_order, process_order

factory = BeanFactory()
entity_service = factory.get_services()["entity_service"]

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

orders_bp = Blueprint("orders", __name__, url_prefix=f"{API_URL}/orders")


@dataclass
class OrderItemRequest:
    product: str
    quantity: int


@dataclass
class OrderRequest:
    orderItems: List[OrderItemRequest]
    user: Optional[str] = None
    shippingAddress1: Optional[str] = None
    shippingAddress2: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None


@dataclass
class OrderStatusRequest:
    status: str


@orders_bp.route("", methods=["GET"])
async def list_orders():
    return jsonify(await queries.list_orders(entity_service))


@orders_bp.route("/<string:order_id>", methods=["GET"])
async def get_order(order_id):
    return jsonify(await queries.get_order(entity_service, order_id))


@orders_bp.route("", methods=["POST"])
@validate_request(OrderRequest)
async def create_order(data: OrderRequest):
    order = await process_order(entity_service, dataclasses.asdict(data))
    return jsonify(order), 201


@orders_bp.route("/<string:order_id>", methods=["PUT"])
@validate_request(OrderStatusRequest)
async def update_order(order_id, data: OrderStatusRequest):
    return jsonify(await queries.update_order_status(entity_service, order_id, data.status))


@orders_bp.route("/<string:order_id>", methods=["DELETE"])
async def remove_order(order_id):
    if await delete_order(entity_service, order_id):
        return jsonify({"success": True, "message": "The order has been deleted"}), 200
    return jsonify({"success": False, "message": "Order not found!"}), 404


@orders_bp.route("/get/totalsales", methods=["GET"])
async def get_total_sales():
    return jsonify({"totalSales": await queries.get_total_sales(entity_service)})


@orders_bp.route("/get/count", methods=["GET"])
async def get_order_count():
    return jsonify({"orderCount": await queries.count_orders(entity_service)})


@orders_bp.route("/get/usersorders/<string:user_id>", methods=["GET"])
async def get_user_orders(user_id):
    return jsonify(await queries.list_user_orders(entity_service, user_id))
