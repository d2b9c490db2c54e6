#!/usr/bin/env python3
"""
Session cart endpoint tests
The cart lives in the signed session cookie; checkout turns it into an order
"""

import unittest

from storefront import create_app, db
from storefront.models import Order, OrderItem, Product
from storefront.services.cart import CART_SESSION_KEY, CartStore, SessionCartStorage
from storefront.services.catalog_store import CatalogStore

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'LOG_LEVEL': 'WARNING',
}


class TestCartRoutes(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TEST_CONFIG)
        with self.app.app_context():
            db.create_all()
            catalog = CatalogStore()
            self.mug_id = catalog.create_product(name='Mug', price='19.99', quantity=5).id
            self.coaster_id = catalog.create_product(name='Coaster', price='5.00', quantity=1).id
            self.sold_out_id = catalog.create_product(name='Sold Out', price='1.00', quantity=0).id

        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def add(self, product_id):
        return self.client.post(f'/cart/add/{product_id}')

    def stock(self, product_id):
        with self.app.app_context():
            return db.session.get(Product, product_id).quantity

    def test_empty_cart(self):
        data = self.client.get('/cart/').get_json()
        self.assertEqual(data, {'items': [], 'itemCount': 0, 'total': '0.00'})

    def test_add_twice_merges(self):
        self.add(self.mug_id)
        response = self.add(self.mug_id)
        data = response.get_json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(data['items']), 1)
        self.assertEqual(data['items'][0]['quantity'], 2)
        self.assertEqual(data['total'], '39.98')

    def test_cart_persists_between_requests(self):
        self.add(self.mug_id)
        self.add(self.coaster_id)
        self.add(self.mug_id)

        data = self.client.get('/cart/').get_json()
        self.assertEqual(data['itemCount'], 3)
        self.assertEqual(data['total'], '44.98')

        with self.client.session_transaction() as session:
            self.assertEqual(len(session[CART_SESSION_KEY]), 2)

    def test_add_out_of_stock_rejected(self):
        response = self.add(self.sold_out_id)

        self.assertEqual(response.status_code, 400)
        self.assertIn('out of stock', response.get_json()['message'])
        self.assertEqual(self.client.get('/cart/').get_json()['items'], [])

    def test_add_unknown_product(self):
        response = self.add(999)
        self.assertEqual(response.status_code, 404)

    def test_change_quantity(self):
        self.add(self.mug_id)
        response = self.client.post(f'/cart/change/{self.mug_id}', json={'delta': 2})
        self.assertEqual(response.get_json()['items'][0]['quantity'], 3)

        response = self.client.post(f'/cart/change/{self.mug_id}', json={'delta': -3})
        self.assertEqual(response.get_json(), {'items': [], 'itemCount': 0, 'total': '0.00'})

    def test_change_quantity_requires_delta(self):
        self.add(self.mug_id)
        response = self.client.post(f'/cart/change/{self.mug_id}', json={})
        self.assertEqual(response.status_code, 400)

    def test_remove_and_clear(self):
        self.add(self.mug_id)
        self.add(self.coaster_id)

        data = self.client.post(f'/cart/remove/{self.mug_id}').get_json()
        self.assertEqual([item['id'] for item in data['items']], [self.coaster_id])

        data = self.client.post('/cart/clear').get_json()
        self.assertEqual(data['items'], [])

    def test_checkout_places_order_and_clears_cart(self):
        self.add(self.mug_id)
        self.add(self.mug_id)
        self.add(self.coaster_id)

        response = self.client.post('/cart/checkout', json={
            'customerName': 'Jane Doe',
            'customerEmail': 'jane@example.com'
        })
        order = response.get_json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(order['totalAmount'], '44.98')
        self.assertEqual(order['status'], 'pending')
        self.assertEqual(
            sorted((item['productId'], item['quantity'], item['price']) for item in order['items']),
            sorted([(self.mug_id, 2, '19.99'), (self.coaster_id, 1, '5.00')])
        )
        self.assertEqual(self.client.get('/cart/').get_json()['items'], [])
        self.assertEqual(self.stock(self.mug_id), 3)
        self.assertEqual(self.stock(self.coaster_id), 0)

    def test_checkout_empty_cart(self):
        response = self.client.post('/cart/checkout', json={
            'customerName': 'Jane Doe',
            'customerEmail': 'jane@example.com'
        })
        self.assertEqual(response.status_code, 400)

    def test_failed_checkout_keeps_cart(self):
        self.add(self.mug_id)

        response = self.client.post('/cart/checkout', json={'customerEmail': 'jane@example.com'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get('/cart/').get_json()['itemCount'], 1)
        with self.app.app_context():
            self.assertEqual(db.session.scalar(db.select(db.func.count()).select_from(Order)), 0)
            self.assertEqual(db.session.scalar(db.select(db.func.count()).select_from(OrderItem)), 0)


class TestSessionCartStorage(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TEST_CONFIG)

    def test_round_trip_within_request(self):
        with self.app.test_request_context('/cart/'):
            storage = SessionCartStorage()
            storage.save([{'product_id': 1, 'name': 'Mug', 'price': '2.00', 'quantity': 1}])

            cart = CartStore(storage)
            self.assertEqual(cart.item_count, 1)
            self.assertEqual(str(cart.total()), '2.00')


if __name__ == '__main__':
    unittest.main(verbosity=2)
