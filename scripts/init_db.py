#!/usr/bin/env python3
"""
Database initialization script
Creates tables and seeds the catalog, testimonials and a test shopper
"""

import sys
import os

# Add parent directory to path to import storefront
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from storefront import create_app, db
from storefront.models import Category, Product, Testimonial, User

SAMPLE_CATEGORIES = ['electronics', 'home', 'apparel']

SAMPLE_PRODUCTS = [
    {
        'name': 'Laptop',
        'description': 'Lightweight laptop for work and travel',
        'price': 899.0,
        'stock': 10,
        'category': 'electronics',
        'image': 'https://via.placeholder.com/300x300?text=Laptop'
    },
    {
        'name': 'Wireless Mouse',
        'description': 'Quiet wireless mouse with a two-year battery',
        'price': 29.8,
        'stock': 50,
        'category': 'electronics',
        'image': 'https://via.placeholder.com/300x300?text=Mouse'
    },
    {
        'name': 'Mechanical Keyboard',
        'description': 'Tenkeyless keyboard with tactile switches',
        'price': 128.0,
        'stock': 30,
        'category': 'electronics',
        'image': 'https://via.placeholder.com/300x300?text=Keyboard'
    },
    {
        'name': 'Noise Cancelling Earbuds',
        'description': 'Wireless earbuds with active noise cancelling',
        'price': 158.0,
        'stock': 25,
        'category': 'electronics',
        'image': 'https://via.placeholder.com/300x300?text=Earbuds'
    },
    {
        'name': 'Ceramic Mug',
        'description': 'Stoneware mug, 350 ml',
        'price': 12.0,
        'stock': 80,
        'category': 'home',
        'image': 'https://via.placeholder.com/300x300?text=Mug'
    },
    {
        'name': 'Desk Lamp',
        'description': 'Dimmable LED desk lamp',
        'price': 45.0,
        'stock': 20,
        'category': 'home',
        'image': 'https://via.placeholder.com/300x300?text=Lamp'
    },
    {
        'name': 'Cotton Tee',
        'description': 'Organic cotton t-shirt',
        'price': 19.5,
        'stock': 60,
        'category': 'apparel',
        'image': 'https://via.placeholder.com/300x300?text=Tee'
    },
    {
        'name': 'Rain Jacket',
        'description': 'Packable waterproof jacket',
        'price': 89.0,
        'stock': 15,
        'category': 'apparel',
        'image': 'https://via.placeholder.com/300x300?text=Jacket'
    }
]

SAMPLE_TESTIMONIALS = [
    {'name': 'Maya', 'message': 'Fast delivery and the keyboard is lovely.', 'rating': 5},
    {'name': 'Tom', 'message': 'Good prices, easy checkout.', 'rating': 4},
    {'name': 'Ines', 'message': 'The order status updates were really helpful.', 'rating': 5},
]

def init_db():
    app = create_app()

    with app.app_context():
        # Create all tables
        print("Creating database tables...")
        db.create_all()

        # Check if products already exist
        if Product.query.first():
            print("Database already initialized.")
            return

        print("Creating categories...")
        for name in SAMPLE_CATEGORIES:
            db.session.add(Category(name=name))

        print("Creating sample products...")
        for product_data in SAMPLE_PRODUCTS:
            db.session.add(Product(**product_data))

        print("Creating testimonials...")
        for testimonial_data in SAMPLE_TESTIMONIALS:
            db.session.add(Testimonial(**testimonial_data))

        # Create a test user
        print("Creating test user...")
        test_user = User(email='test@example.com', display_name='Test User')
        test_user.set_password('password123')
        db.session.add(test_user)

        db.session.commit()
        print(f"Successfully created {len(SAMPLE_PRODUCTS)} products and 1 test user")
        print("\nTest user credentials:")
        print("Email: test@example.com")
        print("Password: password123")


if __name__ == '__main__':
    init_db()
