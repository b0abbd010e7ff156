#!/usr/bin/env python3
"""
Catalog browsing, reviews, saved cart and admin product helpers
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import unittest
from datetime import datetime, timedelta
from types import SimpleNamespace

from storefront import create_app, db
from storefront.config import TestingConfig
from storefront.models import Category, Product, Review, SavedCartItem, User
from storefront.services import catalog
from storefront.services.error_handler import AuthenticationError, NotFoundError, ValidationError


def card(name, price, category=None):
    return SimpleNamespace(name=name, price=price, category=category)


class TestCatalogBrowsing(unittest.TestCase):

    def setUp(self):
        self.products = [
            card('Blue Mug', 12.0, 'home'),
            card('Red Tee', 20.0, 'apparel'),
            card('Green Mug', 8.0, 'home'),
            card('Poster', None, None),
        ]

    def test_filter_by_category_and_search(self):
        result = catalog.filter_products(self.products, category='home', search='MUG')
        self.assertEqual([p.name for p in result], ['Green Mug', 'Blue Mug'])

    def test_sort_descending_treats_missing_price_as_zero(self):
        result = catalog.filter_products(self.products, sort_order='desc')
        self.assertEqual([p.name for p in result], ['Red Tee', 'Blue Mug', 'Green Mug', 'Poster'])

    def test_category_names_first_seen(self):
        self.assertEqual(catalog.category_names(self.products), ['home', 'apparel'])

    def test_is_new_product(self):
        now = datetime(2024, 6, 30)
        self.assertTrue(catalog.is_new_product(datetime(2024, 6, 1), now=now))
        self.assertFalse(catalog.is_new_product(datetime(2024, 5, 1), now=now))
        self.assertFalse(catalog.is_new_product(None))

    def test_average_rating(self):
        self.assertEqual(catalog.average_rating([]), 0)
        reviews = [SimpleNamespace(rating=5), SimpleNamespace(rating=4)]
        self.assertEqual(catalog.average_rating(reviews), 4.5)

    def test_sorted_products(self):
        by_price = catalog.sorted_products(self.products[:3], 'price')
        self.assertEqual([p.price for p in by_price], [8.0, 12.0, 20.0])
        with self.assertRaises(ValidationError):
            catalog.sorted_products(self.products, 'rating')


class TestCatalogWrites(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

        self.user = User(email='reviewer@example.com', display_name='Rae')
        self.user.set_password('secret123')
        self.mug = Product(name='Mug', price=10.0, image='mug.png', category='home')
        self.plate = Product(name='Plate', price=6.0, image='plate.png', category='home')
        self.tee = Product(name='Tee', price=15.0, image='tee.png', category='apparel',
                           created_at=datetime.utcnow() - timedelta(days=90))
        db.session.add_all([self.user, self.mug, self.plate, self.tee])
        db.session.commit()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def test_related_products_share_category(self):
        self.assertEqual([p.name for p in catalog.related_products(self.mug)], ['Plate'])

    def test_add_review(self):
        review = catalog.add_review(self.mug.id, self.user, '  Sturdy mug  ', rating='4')

        self.assertEqual(review.user_name, 'Rae')
        self.assertEqual(review.review_text, 'Sturdy mug')
        self.assertEqual(Review.query.filter_by(product_id=self.mug.id).count(), 1)

    def test_anonymous_review_rejected(self):
        anonymous = SimpleNamespace(is_authenticated=False)

        with self.assertRaises(AuthenticationError) as ctx:
            catalog.add_review(self.mug.id, anonymous, 'Nice')

        self.assertEqual(ctx.exception.message, 'Please login to review.')

    def test_review_rating_out_of_range(self):
        with self.assertRaises(ValidationError):
            catalog.add_review(self.mug.id, self.user, 'Nice', rating=9)

    def test_save_to_cart_overwrites_quantity(self):
        catalog.save_to_cart(self.user.id, self.mug.id)
        item = catalog.save_to_cart(self.user.id, self.mug.id)

        self.assertEqual(item.quantity, 1)
        self.assertEqual(SavedCartItem.query.filter_by(user_id=self.user.id).count(), 1)

    def test_save_unknown_product(self):
        with self.assertRaises(NotFoundError):
            catalog.save_to_cart(self.user.id, 9999)

    def test_create_product_defaults(self):
        product = catalog.create_product({'name': ' Lamp ', 'price': '24.50', 'image': 'lamp.png'})

        self.assertEqual(product.name, 'Lamp')
        self.assertEqual(product.price, 24.5)
        self.assertEqual(product.rating, 4)

    def test_create_product_validation(self):
        for data in (
            {'price': 5, 'image': 'x.png'},
            {'name': 'Lamp', 'price': 'free', 'image': 'x.png'},
            {'name': 'Lamp', 'price': -1, 'image': 'x.png'},
            {'name': 'Lamp', 'price': 5},
        ):
            with self.assertRaises(ValidationError):
                catalog.create_product(data)

    def test_update_product_is_partial(self):
        catalog.update_product(self.mug.id, {'price': 11.0})

        stored = db.session.get(Product, self.mug.id)
        self.assertEqual(stored.price, 11.0)
        self.assertEqual(stored.name, 'Mug')

    def test_category_rename_conflict(self):
        home = catalog.create_category('Home')
        catalog.create_category('Garden')

        with self.assertRaises(ValidationError):
            catalog.rename_category(home.id, 'Garden')

        self.assertEqual(db.session.get(Category, home.id).name, 'Home')

    def test_delete_category(self):
        category = catalog.create_category('Outdoor')
        catalog.delete_category(category.id)
        with self.assertRaises(NotFoundError):
            catalog.delete_category(category.id)


class TestProductEndpoints(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        with self.app.app_context():
            db.create_all()
            user = User(email='reviewer@example.com')
            user.set_password('secret123')
            fresh = Product(name='Lamp', price=30.0, image='lamp.png', category='home')
            old = Product(name='Rug', price=50.0, image='rug.png', category='home',
                          created_at=datetime.utcnow() - timedelta(days=90))
            db.session.add_all([user, fresh, old])
            db.session.commit()
            self.fresh_id, self.old_id = fresh.id, old.id
        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def test_new_badge(self):
        products = {p['id']: p for p in self.client.get('/products/').get_json()['products']}

        self.assertTrue(products[self.fresh_id]['is_new'])
        self.assertFalse(products[self.old_id]['is_new'])

    def test_products_path_without_trailing_slash(self):
        response = self.client.get('/products')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.get_json()['products']), 2)

    def test_review_requires_login(self):
        response = self.client.post(f'/products/{self.fresh_id}/reviews', json={'review_text': 'Bright'})
        self.assertEqual(response.status_code, 401)

    def test_review_then_detail(self):
        self.client.post('/auth/login', json={'email': 'reviewer@example.com', 'password': 'secret123'})

        created = self.client.post(f'/products/{self.fresh_id}/reviews', json={'review_text': 'Bright', 'rating': 3})
        detail = self.client.get(f'/products/{self.fresh_id}').get_json()

        self.assertEqual(created.status_code, 201)
        self.assertEqual(detail['average_rating'], 3)
        self.assertEqual([p['id'] for p in detail['related']], [self.old_id])

    def test_home_page(self):
        data = self.client.get('/').get_json()

        self.assertEqual(len(data['products']), 2)
        self.assertEqual(data['categories'], ['home'])
        self.assertFalse(data['dark_mode'])
        self.assertTrue(self.client.post('/theme/toggle').get_json()['dark_mode'])


if __name__ == '__main__':
    unittest.main(verbosity=2)
