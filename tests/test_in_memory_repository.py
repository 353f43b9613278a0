import unittest

from common.repository.crud_repository import ASCENDING, DESCENDING, Join
from common.repository.in_memory_db import InMemoryRepository


class InMemoryRepositoryTest(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.repository = InMemoryRepository()
        self.repository.clear()
        self.products = await self.repository.get_meta("product")
        self.categories = await self.repository.get_meta("category")

    async def test_save_returns_object_id_string(self):
        technical_id = await self.repository.save(self.products, {"name": "Mug"})
        self.assertEqual(len(technical_id), 24)
        record = await self.repository.find_by_id(self.products, technical_id)
        self.assertEqual(record, {"id": technical_id, "name": "Mug"})

    async def test_records_are_copies(self):
        entity = {"name": "Mug", "tags": ["a"]}
        technical_id = await self.repository.save(self.products, entity)
        entity["tags"].append("b")
        record = await self.repository.find_by_id(self.products, technical_id)
        record["name"] = "Changed"

        stored = await self.repository.find_by_id(self.products, technical_id)
        self.assertEqual(stored["tags"], ["a"])
        self.assertEqual(stored["name"], "Mug")

    async def test_criteria_and_sort(self):
        await self.repository.save(self.products, {"name": "a", "category": "c1", "price": 3})
        await self.repository.save(self.products, {"name": "b", "category": "c2", "price": 1})
        await self.repository.save(self.products, {"name": "c", "category": "c3", "price": 2})

        exact = await self.repository.find_all(self.products, {"category": "c2"})
        self.assertEqual([p["name"] for p in exact], ["b"])

        any_of = await self.repository.find_all(self.products, {"category": ["c1", "c3"]},
                                                sort=[("price", ASCENDING)])
        self.assertEqual([p["name"] for p in any_of], ["c", "a"])

        newest = await self.repository.find_all(self.products, sort=[("price", DESCENDING)])
        self.assertEqual([p["name"] for p in newest], ["a", "c", "b"])

    async def test_update_delete_count_sum(self):
        first = await self.repository.save(self.products, {"price": 2.5})
        await self.repository.save(self.products, {"price": 4})

        self.assertEqual(await self.repository.sum(self.products, "price"), 6.5)
        self.assertEqual(await self.repository.count(self.products), 2)

        updated = await self.repository.update(self.products, first, {"price": 1, "id": "ignored"})
        self.assertEqual(updated, {"id": first, "price": 1})

        removed = await self.repository.delete_by_id(self.products, first)
        self.assertEqual(removed["id"], first)
        self.assertIsNone(await self.repository.delete_by_id(self.products, first))
        self.assertIsNone(await self.repository.update(self.products, first, {"price": 9}))
        self.assertEqual(await self.repository.count(self.products), 1)

    async def test_joins_expand_references_and_keep_missing_as_none(self):
        category = await self.repository.save(self.categories, {"name": "Home", "color": "red"})
        product = await self.repository.save(self.products, {"name": "Mug", "category": category})
        orphan = await self.repository.save(self.products, {"name": "Lost", "category": "0123456789abcdef01234567"})

        joined = await self.repository.find_by_id_with_joins(
            self.products, product, [Join("category", "category", fields=("name",))]
        )
        self.assertEqual(joined["category"], {"id": category, "name": "Home"})

        lost = await self.repository.find_by_id_with_joins(self.products, orphan, [Join("category", "category")])
        self.assertIsNone(lost["category"])

    async def test_join_over_list_of_references(self):
        items = await self.repository.get_meta("order_item")
        first = await self.repository.save(items, {"quantity": 1})
        second = await self.repository.save(items, {"quantity": 2})
        orders = await self.repository.get_meta("order")
        order = await self.repository.save(orders, {"orderItems": [second, first]})

        joined = await self.repository.find_all_with_joins(orders, [Join("orderItems", "order_item")])

        self.assertEqual(joined[0]["id"], order)
        self.assertEqual([i["quantity"] for i in joined[0]["orderItems"]], [2, 1])


if __name__ == "__main__":
    unittest.main()
