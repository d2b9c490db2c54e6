#!/usr/bin/env python3
"""
Database initialization script
Creates sample categories and products for the storefront
"""

import sys
import os

# Add parent directory to path to import storefront
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from storefront import create_app, db
from storefront.models import Product
from storefront.services.catalog_store import CatalogStore

SAMPLE_CATEGORIES = [
    {'name': 'Electronics', 'slug': 'electronics', 'description': 'Computers, audio and accessories'},
    {'name': 'Home & Kitchen', 'slug': 'home-kitchen', 'description': 'Everyday items for the home'},
    {'name': 'Books', 'slug': 'books', 'description': None},
]

SAMPLE_PRODUCTS = [
    {
        'name': 'Laptop',
        'description': 'High performance laptop for work and play.',
        'price': '899.00',
        'quantity': 10,
        'category': 'electronics',
        'image_url': 'https://via.placeholder.com/300x300?text=Laptop'
    },
    {
        'name': 'Wireless Mouse',
        'description': 'Comfortable wireless mouse',
        'price': '29.80',
        'quantity': 50,
        'category': 'electronics',
        'image_url': 'https://via.placeholder.com/300x300?text=Mouse'
    },
    {
        'name': 'Mechanical Keyboard',
        'description': 'Mechanical keyboard with brown switches',
        'price': '128.00',
        'quantity': 30,
        'category': 'electronics',
        'image_url': 'https://via.placeholder.com/300x300?text=Keyboard'
    },
    {
        'name': 'USB-C Hub',
        'description': '7-in-1 USB-C hub with HDMI and USB 3.0',
        'price': '49.80',
        'quantity': 4,
        'category': 'electronics',
        'image_url': 'https://via.placeholder.com/300x300?text=USB-C+Hub'
    },
    {
        'name': 'French Press',
        'description': 'Glass French press, 1 litre',
        'price': '19.99',
        'quantity': 25,
        'category': 'home-kitchen',
        'image_url': 'https://via.placeholder.com/300x300?text=French+Press'
    },
    {
        'name': 'Chef Knife',
        'description': None,
        'price': '45.00',
        'quantity': 0,
        'category': 'home-kitchen',
        'image_url': None
    },
    {
        'name': 'Python Cookbook',
        'description': 'Recipes for mastering Python',
        'price': '39.95',
        'quantity': 12,
        'category': 'books',
        'image_url': 'https://via.placeholder.com/300x300?text=Cookbook'
    },
]

def init_db():
    app = create_app()

    with app.app_context():
        # Create all tables
        print("Creating database tables...")
        db.create_all()

        # Check if products already exist
        if db.session.scalars(db.select(Product)).first():
            print("Database already initialized.")
            return

        catalog = CatalogStore()

        print("Creating sample categories...")
        categories = {}
        for category_data in SAMPLE_CATEGORIES:
            category = catalog.create_category(**category_data)
            categories[category.slug] = category

        print("Creating sample products...")
        for product_data in SAMPLE_PRODUCTS:
            product_data = dict(product_data)
            category = categories[product_data.pop('category')]
            catalog.create_product(category_id=category.id, **product_data)

        print(f"Successfully created {len(SAMPLE_CATEGORIES)} categories "
              f"and {len(SAMPLE_PRODUCTS)} products")


if __name__ == '__main__':
    init_db()
