#!/usr/bin/env python3
"""
Admin account creation script
Creates the account for the first address in ADMIN_EMAILS
"""

import sys
import os

# Add parent directory to path to import storefront
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from storefront import create_app, db
from storefront.models import User
from storefront.services.accounts import ADMIN_DEFAULT_DISPLAY_NAME

def create_admin(password=None):
    app = create_app()

    with app.app_context():
        if not app.config['ADMIN_EMAILS']:
            print("ADMIN_EMAILS is empty; nothing to create.")
            return
        email = app.config['ADMIN_EMAILS'][0]
        password = password or os.getenv('ADMIN_PASSWORD', 'admin123')

        admin_user = User.query.filter_by(email=email).first()
        if admin_user:
            print("Admin user already exists:")
            print(f"Email: {admin_user.email}")
            print(f"Display name: {admin_user.display_name}")
            return

        print("Creating admin user...")
        admin_user = User(email=email, display_name=ADMIN_DEFAULT_DISPLAY_NAME)
        admin_user.set_password(password)

        db.session.add(admin_user)
        db.session.commit()

        print("Admin user created successfully!")
        print("\nAdmin user credentials:")
        print(f"Email: {email}")
        print(f"Password: {password}")

if __name__ == '__main__':
    create_admin(sys.argv[1] if len(sys.argv) > 1 else None)
