from typing import Any, Dict, List

from common.config.conts import CATEGORY_ENTITY, ORDER_ENTITY, ORDER_ITEM_ENTITY, PRODUCT_ENTITY, USER_ENTITY
from common.exception.exceptions import NotFoundException
from common.repository.crud_repository import DESCENDING, Join
from common.service.service import EntityServiceImpl

USER_NAME_JOIN = Join("user", USER_ENTITY, fields=("name",))
ORDER_ITEMS_JOIN = Join(
    "orderItems",
    ORDER_ITEM_ENTITY,
    joins=(Join("product", PRODUCT_ENTITY, joins=(Join("category", CATEGORY_ENTITY),)),),
)
NEWEST_FIRST = [("dateOrdered", DESCENDING)]


async def list_orders(entity_service: EntityServiceImpl) -> List[Dict[str, Any]]:
    return await entity_service.get_items(ORDER_ENTITY, sort=NEWEST_FIRST, joins=[USER_NAME_JOIN])


async def get_order(entity_service: EntityServiceImpl, order_id: str) -> Dict[str, Any]:
    order = await entity_service.get_item(ORDER_ENTITY, order_id, joins=[USER_NAME_JOIN, ORDER_ITEMS_JOIN])
    if order is None:
        raise NotFoundException("Order not found!")
    return order


async def list_user_orders(entity_service: EntityServiceImpl, user_id: str) -> List[Dict[str, Any]]:
    return await entity_service.get_items(
        ORDER_ENTITY, condition={"user": user_id}, sort=NEWEST_FIRST, joins=[ORDER_ITEMS_JOIN]
    )


async def get_total_sales(entity_service: EntityServiceImpl) -> float:
    return await entity_service.sum_field(ORDER_ENTITY, "totalPrice")


async def count_orders(entity_service: EntityServiceImpl) -> int:
    return await entity_service.count_items(ORDER_ENTITY)


async def update_order_status(entity_service: EntityServiceImpl, order_id: str, status: str) -> Dict[str, Any]:
    order = await entity_service.update_item(ORDER_ENTITY, order_id, {"status": status})
    if order is None:
        raise NotFoundException("Order not found!")
    return order
