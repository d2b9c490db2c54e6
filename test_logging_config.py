#!/usr/bin/env python3
"""
Logging configuration tests
Startup record contents and request/account fields on formatted lines
"""

import logging
import unittest

from flask import session

from storefront import create_app
from storefront.logging_config import LOG_FORMAT, StorefrontFormatter, resolve_level

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'LOG_LEVEL': 'INFO',
}


class TestStartupRecord(unittest.TestCase):

    def startup_record(self, **overrides):
        with self.assertLogs('storefront', level='INFO') as logs:
            create_app({**TEST_CONFIG, **overrides})
        records = [r for r in logs.records if getattr(r, 'event_type', None) == 'app_startup']
        self.assertEqual(len(records), 1)
        return records[0]

    def test_describes_storefront_wiring(self):
        record = self.startup_record()

        self.assertEqual(record.database_backend, 'sqlite')
        self.assertTrue(record.order_placement_atomic)
        self.assertEqual(record.blueprints, ['auth', 'cart', 'catalog', 'main', 'orders'])
        self.assertEqual(record.log_level, 'INFO')
        self.assertTrue(record.testing)
        self.assertIn('atomic order placement', record.getMessage())

    def test_reports_step_by_step_placement(self):
        record = self.startup_record(ORDER_PLACEMENT_ATOMIC=False)

        self.assertFalse(record.order_placement_atomic)
        self.assertIn('step-by-step order placement', record.getMessage())


class TestStorefrontFormatter(unittest.TestCase):
    def setUp(self):
        self.app = create_app({**TEST_CONFIG, 'LOG_LEVEL': 'WARNING'})
        self.formatter = StorefrontFormatter(LOG_FORMAT)

    def record(self, **extra):
        record = logging.LogRecord('storefront.test', logging.INFO, __file__, 1, 'Cart updated', None, None)
        record.__dict__.update(extra)
        return record

    def test_outside_request(self):
        line = self.formatter.format(self.record())
        self.assertIn('[- -] [IP: -] [user: -] [-] Cart updated', line)

    def test_inside_request_with_event_type(self):
        with self.app.test_request_context('/cart/add/3?source=home', method='POST'):
            line = self.formatter.format(self.record(event_type='cart_add'))

        self.assertIn('[POST /cart/add/3?source=home]', line)
        self.assertIn('[user: anonymous]', line)
        self.assertIn('[cart_add] Cart updated', line)

    def test_signed_in_account(self):
        with self.app.test_request_context('/auth/me'):
            session['_user_id'] = '42'
            line = self.formatter.format(self.record())

        self.assertIn('[user: 42]', line)

    def test_handler_replaced_on_repeated_setup(self):
        create_app(TEST_CONFIG)
        app = create_app(TEST_CONFIG)
        own = [h for h in app.logger.handlers if getattr(h, '_storefront_handler', False)]
        self.assertEqual(len(own), 1)

    def test_level_names(self):
        self.assertEqual(resolve_level('debug'), logging.DEBUG)
        self.assertEqual(resolve_level('WARNING'), logging.WARNING)
        self.assertEqual(resolve_level('chatty'), logging.INFO)


if __name__ == '__main__':
    unittest.main(verbosity=2)
