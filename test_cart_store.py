#!/usr/bin/env python3
"""
Cart state manager tests
Line merging, quantity changes, exact totals and observer notification
"""

import unittest
from decimal import Decimal
from types import SimpleNamespace

from storefront.services.cart import CartLine, CartStore, MemoryCartStorage
from storefront.services.order_placement import OrderLine


def make_product(product_id, name='Mug', price='19.99', image_url=None):
    return SimpleNamespace(id=product_id, name=name, price=Decimal(price), image_url=image_url)


class TestCartStore(unittest.TestCase):
    def setUp(self):
        self.storage = MemoryCartStorage()
        self.cart = CartStore(self.storage)

    def test_add_same_product_twice_merges_lines(self):
        """Adding the same product twice gives one line with quantity 2"""
        product = make_product(1)
        self.cart.add_item(product)
        self.cart.add_item(product)

        self.assertEqual(len(self.cart.lines), 1)
        self.assertEqual(self.cart.lines[0].quantity, 2)
        self.assertEqual(self.cart.item_count, 2)

    def test_add_captures_product_snapshot(self):
        product = make_product(7, name='Teapot', price='25', image_url='/img/teapot.png')
        self.cart.add_item(product)

        # Later catalog changes do not reach the cart line
        product.name = 'Renamed'
        product.price = Decimal('99.00')

        line = self.cart.get_line(7)
        self.assertEqual(line.name, 'Teapot')
        self.assertEqual(line.price, '25.00')
        self.assertEqual(line.image_url, '/img/teapot.png')
        self.assertEqual(line.quantity, 1)

    def test_total_is_exact_decimal_sum(self):
        """[19.99 x 2, 5.00 x 1] totals 44.98"""
        mug = make_product(1, price='19.99')
        self.cart.add_item(mug)
        self.cart.add_item(mug)
        self.cart.add_item(make_product(2, name='Coaster', price='5.00'))

        self.assertEqual(self.cart.total(), Decimal('44.98'))
        self.assertEqual(str(self.cart.total()), '44.98')

    def test_total_is_idempotent(self):
        for product_id, price in ((1, '0.10'), (2, '0.20'), (3, '0.30')):
            self.cart.add_item(make_product(product_id, price=price))

        first = self.cart.total()
        second = self.cart.total()
        self.assertEqual(first, second)
        self.assertEqual(first, Decimal('0.60'))

    def test_change_quantity_adds_delta(self):
        self.cart.add_item(make_product(1))
        line = self.cart.change_quantity(1, 3)

        self.assertEqual(line.quantity, 4)
        self.assertEqual(self.cart.get_line(1).quantity, 4)

    def test_change_quantity_to_zero_removes_line(self):
        self.cart.add_item(make_product(1))
        result = self.cart.change_quantity(1, -1)

        self.assertIsNone(result)
        self.assertEqual(self.cart.lines, [])
        self.assertEqual(str(self.cart.total()), '0.00')

    def test_change_quantity_clamps_at_zero(self):
        product = make_product(1)
        self.cart.add_item(product)
        self.cart.add_item(product)
        self.cart.change_quantity(1, -10)

        self.assertIsNone(self.cart.get_line(1))
        self.assertEqual(len(self.cart.lines), 0)

    def test_change_quantity_unknown_line_keeps_cart(self):
        self.cart.add_item(make_product(1))
        self.assertIsNone(self.cart.change_quantity(42, 1))
        self.assertEqual(self.cart.item_count, 1)

    def test_remove_item(self):
        self.cart.add_item(make_product(1))
        self.cart.add_item(make_product(2))
        self.cart.remove_item(1)

        self.assertEqual([line.product_id for line in self.cart.lines], [2])

    def test_clear(self):
        self.cart.add_item(make_product(1))
        self.cart.add_item(make_product(2))
        self.cart.clear()

        self.assertEqual(self.cart.lines, [])
        self.assertEqual(self.storage.load(), [])
        self.assertEqual(self.cart.total(), Decimal('0.00'))

    def test_mutations_persist_to_storage(self):
        self.cart.add_item(make_product(3, name='Bowl', price='12.50'))

        self.assertEqual(self.storage.load(), [{
            'product_id': 3,
            'name': 'Bowl',
            'price': '12.50',
            'quantity': 1,
            'image_url': None,
        }])

    def test_stores_sharing_storage_see_the_same_cart(self):
        other_view = CartStore(self.storage)
        self.cart.add_item(make_product(1))

        self.assertEqual(other_view.item_count, 1)
        other_view.clear()
        self.assertEqual(self.cart.lines, [])

    def test_observers_notified_after_each_mutation(self):
        seen = []
        self.cart.subscribe(lambda cart: seen.append(cart.item_count))

        self.cart.add_item(make_product(1))
        self.cart.add_item(make_product(1))
        self.cart.change_quantity(1, -1)
        self.cart.remove_item(1)
        self.cart.clear()

        self.assertEqual(seen, [1, 2, 1, 0, 0])

    def test_unsubscribe_stops_notifications(self):
        seen = []
        unsubscribe = self.cart.subscribe(lambda cart: seen.append(cart.item_count))
        self.cart.add_item(make_product(1))
        unsubscribe()
        self.cart.add_item(make_product(1))

        self.assertEqual(seen, [1])

    def test_total_does_not_notify(self):
        seen = []
        self.cart.subscribe(lambda cart: seen.append(True))
        self.cart.total()
        self.assertEqual(seen, [])

    def test_to_order_lines(self):
        self.cart.add_item(make_product(1, price='25.00'))
        self.cart.change_quantity(1, 2)

        self.assertEqual(self.cart.to_order_lines(), [
            OrderLine(product_id=1, quantity=3, price=Decimal('25.00'))
        ])

    def test_to_json(self):
        self.cart.add_item(make_product(5, name='Spoon', price='3.5'))
        data = self.cart.to_json()

        self.assertEqual(data['total'], '3.50')
        self.assertEqual(data['itemCount'], 1)
        self.assertEqual(data['items'][0]['id'], 5)
        self.assertEqual(data['items'][0]['price'], '3.50')


class TestCartLine(unittest.TestCase):
    def test_subtotal_uses_decimal(self):
        line = CartLine(product_id=1, name='Mug', price='0.10', quantity=3)
        self.assertEqual(line.subtotal, Decimal('0.30'))

    def test_round_trip_through_storage_dict(self):
        line = CartLine(product_id=1, name='Mug', price='9.99', quantity=2, image_url='/m.png')
        self.assertEqual(CartLine.from_dict(line.to_dict()), line)


if __name__ == '__main__':
    unittest.main(verbosity=2)
