#!/usr/bin/env python3
"""
Admin user creation script
Creates the administrator who manages products, categories and orders
"""

import sys
import os

# Add parent directory to path to import storefront
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from storefront import create_app, db
from storefront.models import User

def create_admin():
    app = create_app()
    email = os.getenv('ADMIN_EMAIL', 'admin@example.com')
    password = os.getenv('ADMIN_PASSWORD', 'admin123')

    with app.app_context():
        db.create_all()

        admin_user = db.session.scalars(db.select(User).filter_by(email=email)).first()

        if admin_user:
            print("Admin user already exists:")
            print(f"Email: {admin_user.email}")
            print(f"Username: {admin_user.username}")
            print(f"Is Admin: {admin_user.is_admin}")
            return

        print("Creating admin user...")
        admin_user = User(
            username='admin',
            email=email,
            is_admin=True
        )
        admin_user.set_password(password)

        db.session.add(admin_user)
        db.session.commit()

        print("Admin user created successfully!")
        print(f"Email: {email}")
        print("Username: admin")

if __name__ == '__main__':
    create_admin()
