import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from common.config.conts import DEFAULT_ORDER_STATUS, ORDER_ENTITY, ORDER_ITEM_ENTITY, PRODUCT_ENTITY
from common.exception.exceptions import ReferenceNotFoundException, ValidationException
from common.service.service import EntityServiceImpl

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SHIPPING_FIELDS = ("shippingAddress1", "shippingAddress2", "city", "zip", "country", "phone")


def validate_order_items(order_items: Any) -> None:
    if not isinstance(order_items, (list, tuple)) or not order_items:
        raise ValidationException("No order items provided!")
    for position, item in enumerate(order_items):
        if not isinstance(item, dict) or not item.get("product"):
            raise ValidationException(f"Order item {position} has no product")
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationException(f"Order item {position} quantity must be a positive integer")


async def get_product_price(entity_service: EntityServiceImpl, product_id: str) -> float:
    product = await entity_service.get_item(PRODUCT_ENTITY, product_id)
    if product is None:
        raise ReferenceNotFoundException(f"Product {product_id} not found")
    return product.get("price") or 0


async def discard_order_items(entity_service: EntityServiceImpl, order_item_ids: Sequence[str]) -> None:
    """
    Removes order items independently of one another. Failures are logged, never raised.
    """
    results = await asyncio.gather(
        *(entity_service.delete_item(ORDER_ITEM_ENTITY, order_item_id) for order_item_id in order_item_ids),
        return_exceptions=True,
    )
    for order_item_id, result in zip(order_item_ids, results):
        if isinstance(result, Exception):
            logger.error(f"Failed to remove order item {order_item_id}", exc_info=result)


async def materialize_order_items(entity_service: EntityServiceImpl,
                                  order_items: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Persists one order item per (product, quantity) pair, all inserts running concurrently.
    The returned ids follow the input order. If any insert fails the successful ones are removed.
    """
    results = await asyncio.gather(
        *(
            entity_service.add_item(ORDER_ITEM_ENTITY, {"quantity": item["quantity"], "product": item["product"]})
            for item in order_items
        ),
        return_exceptions=True,
    )
    failures = [result for result in results if isinstance(result, Exception)]
    if failures:
        await discard_order_items(entity_service, [r for r in results if not isinstance(r, Exception)])
        raise failures[0]
    return list(results)


async def _order_item_subtotal(entity_service: EntityServiceImpl, order_item_id: str) -> float:
    order_item = await entity_service.get_item(ORDER_ITEM_ENTITY, order_item_id)
    if order_item is None:
        raise ReferenceNotFoundException(f"Order item {order_item_id} not found")
    price = await get_product_price(entity_service, order_item.get("product"))
    return price * order_item["quantity"]


async def calculate_total_price(entity_service: EntityServiceImpl, order_item_ids: Sequence[str]) -> float:
    subtotals = await asyncio.gather(
        *(_order_item_subtotal(entity_service, order_item_id) for order_item_id in order_item_ids)
    )
    total = 0
    for subtotal in subtotals:
        total += subtotal
    return total


async def assemble_order(entity_service: EntityServiceImpl, order_data: Dict[str, Any],
                         order_item_ids: Sequence[str]) -> Dict[str, Any]:
    if not order_item_ids:
        raise ValidationException("No order items provided!")

    total_price = await calculate_total_price(entity_service, order_item_ids)

    order = {field: order_data.get(field) for field in SHIPPING_FIELDS}
    order.update({
        "orderItems": list(order_item_ids),
        "status": order_data.get("status") or DEFAULT_ORDER_STATUS,
        "totalPrice": total_price,
        "user": order_data.get("user"),
        "dateOrdered": datetime.now(timezone.utc).isoformat(),
    })
    order["id"] = await entity_service.add_item(ORDER_ENTITY, order)
    return order


async def process_order(entity_service: EntityServiceImpl, order_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Creates an order: materialize items, price them, then persist the parent order.
    Each stage waits for all of its tasks before the next one starts.
    Either the whole order is stored or, on failure, its items are removed again.
    """
    order_items = order_data.get("orderItems")
    validate_order_items(order_items)

    order_item_ids = await materialize_order_items(entity_service, order_items)
    try:
        order = await assemble_order(entity_service, order_data, order_item_ids)
    except Exception as e:
        logger.warning(f"Order creation failed, removing {len(order_item_ids)} order items: {e}")
        await discard_order_items(entity_service, order_item_ids)
        raise

    logger.info(f"Created order {order['id']} with {len(order_item_ids)} items, total {order['totalPrice']}")
    return order


async def delete_order(entity_service: EntityServiceImpl, order_id: str) -> bool:
    """
    Removes the order, then every order item it referenced.
    Returns False when no such order exists.
    """
    order = await entity_service.delete_item(ORDER_ENTITY, order_id)
    if order is None:
        return False
    await discard_order_items(entity_service, order.get("orderItems") or [])
    logger.info(f"Deleted order {order_id}")
    return True
