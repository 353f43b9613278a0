import unittest
from unittest.mock import patch

from app import app
from app_init.app_init import BeanFactory
from common.config.conts import ORDER_ENTITY, ORDER_ITEM_ENTITY, PRODUCT_ENTITY

BASE = "/api/v1/orders"
MISSING_ID = "0123456789abcdef01234567"


class OrdersApiTest(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        services = BeanFactory().get_services()
        services["entity_repository"].clear()
        self.entity_service = services["entity_service"]
        self.client = app.test_client()
        self.p1 = await self.entity_service.add_item(PRODUCT_ENTITY, {"name": "Shirt", "price": 10.00})
        self.p2 = await self.entity_service.add_item(PRODUCT_ENTITY, {"name": "Mug", "price": 5.50})

    async def create_order(self, order_items, user="5fd51bc7e39ba856244a3b44"):
        return await self.client.post(BASE, json={
            "orderItems": order_items,
            "shippingAddress1": "Flowers Street , 45",
            "shippingAddress2": "1-B",
            "city": "Prague",
            "zip": "00000",
            "country": "Czech Republic",
            "phone": "+420702241333",
            "user": user,
        })

    async def test_create_order_returns_201_with_server_side_total(self):
        response = await self.create_order([
            {"product": self.p1, "quantity": 2},
            {"product": self.p2, "quantity": 1},
        ])

        self.assertEqual(response.status_code, 201)
        order = await response.get_json()
        self.assertEqual(order["totalPrice"], 25.5)
        self.assertEqual(order["status"], "Pending")
        self.assertEqual(len(order["orderItems"]), 2)

    async def test_client_total_is_ignored(self):
        response = await self.client.post(BASE, json={
            "orderItems": [{"product": self.p1, "quantity": 1}],
            "totalPrice": 0.01,
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual((await response.get_json())["totalPrice"], 10.0)

    async def test_empty_items_is_a_validation_error(self):
        response = await self.create_order([])

        self.assertEqual(response.status_code, 400)
        self.assertEqual((await response.get_json())["error"], "VALIDATION")
        self.assertEqual(await self.entity_service.count_items(ORDER_ITEM_ENTITY), 0)

    async def test_missing_items_field_is_a_validation_error(self):
        response = await self.client.post(BASE, json={"city": "Prague"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual((await response.get_json())["error"], "VALIDATION")

    async def test_unknown_product_is_a_reference_error(self):
        response = await self.create_order([{"product": MISSING_ID, "quantity": 1}])

        self.assertEqual(response.status_code, 400)
        self.assertEqual((await response.get_json())["error"], "REFERENCE")
        self.assertEqual(await self.entity_service.count_items(ORDER_ENTITY), 0)
        self.assertEqual(await self.entity_service.count_items(ORDER_ITEM_ENTITY), 0)

    async def test_get_order_and_not_found(self):
        created = await (await self.create_order([{"product": self.p1, "quantity": 1}])).get_json()

        response = await self.client.get(f"{BASE}/{created['id']}")
        self.assertEqual(response.status_code, 200)
        order = await response.get_json()
        self.assertEqual(order["orderItems"][0]["product"]["name"], "Shirt")

        response = await self.client.get(f"{BASE}/{MISSING_ID}")
        self.assertEqual(response.status_code, 404)

    async def test_update_status(self):
        created = await (await self.create_order([{"product": self.p1, "quantity": 1}])).get_json()

        response = await self.client.put(f"{BASE}/{created['id']}", json={"status": "Shipped"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual((await response.get_json())["status"], "Shipped")
        response = await self.client.put(f"{BASE}/{MISSING_ID}", json={"status": "Shipped"})
        self.assertEqual(response.status_code, 404)

    async def test_delete_order(self):
        created = await (await self.create_order([{"product": self.p1, "quantity": 1}])).get_json()

        response = await self.client.delete(f"{BASE}/{created['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertTrue((await response.get_json())["success"])
        self.assertEqual(await self.entity_service.count_items(ORDER_ITEM_ENTITY), 0)

        response = await self.client.delete(f"{BASE}/{created['id']}")
        self.assertEqual(response.status_code, 404)
        self.assertFalse((await response.get_json())["success"])

    async def test_total_sales_and_count(self):
        response = await self.client.get(f"{BASE}/get/totalsales")
        self.assertEqual(await response.get_json(), {"totalSales": 0})

        await self.create_order([{"product": self.p1, "quantity": 2}, {"product": self.p2, "quantity": 1}])
        await self.create_order([{"product": self.p1, "quantity": 1}])

        response = await self.client.get(f"{BASE}/get/totalsales")
        self.assertEqual(await response.get_json(), {"totalSales": 35.5})
        response = await self.client.get(f"{BASE}/get/count")
        self.assertEqual(await response.get_json(), {"orderCount": 2})

    async def test_unexpected_error_returns_json_500(self):
        with patch("entity.order.queries.count_orders", side_effect=RuntimeError("boom")):
            response = await self.client.get(f"{BASE}/get/count")

        self.assertEqual(response.status_code, 500)
        body = await response.get_json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "INTERNAL")
        self.assertNotIn("boom", body["message"])

    async def test_unknown_route_returns_json_404(self):
        response = await self.client.get("/api/v1/nowhere")

        self.assertEqual(response.status_code, 404)
        body = await response.get_json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "NOT_FOUND")

    async def test_product_without_price_counts_as_zero(self):
        free = await self.entity_service.add_item(PRODUCT_ENTITY, {"name": "Sticker", "price": None})

        response = await self.create_order([{"product": free, "quantity": 3}, {"product": self.p2, "quantity": 1}])

        self.assertEqual(response.status_code, 201)
        self.assertEqual((await response.get_json())["totalPrice"], 5.5)

    async def test_users_orders(self):
        await self.create_order([{"product": self.p1, "quantity": 1}], user="user-a")

        response = await self.client.get(f"{BASE}/get/usersorders/user-a")
        self.assertEqual(len(await response.get_json()), 1)
        response = await self.client.get(f"{BASE}/get/usersorders/user-b")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(await response.get_json(), [])

    async def test_list_orders(self):
        await self.create_order([{"product": self.p1, "quantity": 1}])

        response = await self.client.get(BASE)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(await response.get_json()), 1)
        self.assertEqual(response.headers["Access-Control-Allow-Origin"], "*")


if __name__ == "__main__":
    unittest.main()
