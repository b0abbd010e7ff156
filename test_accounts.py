#!/usr/bin/env python3
"""
Registration, sign-in, profile settings and order history
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import unittest
from unittest.mock import patch

from storefront import create_app, db
from storefront.config import TestingConfig
from storefront.models import Order, User
from storefront.services import accounts
from storefront.services.error_handler import AuthenticationError, ValidationError, error_handler


class TestAccountService(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def test_register_normalizes_email(self):
        user = accounts.register('Kim', ' Kim@Example.com ', 'secret123')

        self.assertEqual(user.email, 'kim@example.com')
        self.assertEqual(user.display_name, 'Kim')
        self.assertTrue(user.check_password('secret123'))

    def test_register_duplicate_email(self):
        accounts.register('Kim', 'kim@example.com', 'secret123')

        with self.assertRaises(ValidationError) as ctx:
            accounts.register('Kim', 'KIM@example.com', 'other')

        self.assertEqual(ctx.exception.code, 'email-already-in-use')

    def test_invalid_email(self):
        with self.assertRaises(AuthenticationError) as ctx:
            accounts.register('Kim', 'kim-at-example', 'secret123')
        self.assertEqual(ctx.exception.message, 'Invalid email format.')

    def test_authenticate_error_codes(self):
        user = accounts.register('Kim', 'kim@example.com', 'secret123')

        cases = [
            ('nobody@example.com', 'secret123', 'user-not-found'),
            ('kim@example.com', 'wrong', 'wrong-password'),
        ]
        for email, password, code in cases:
            with self.assertRaises(AuthenticationError) as ctx:
                accounts.authenticate(email, password)
            self.assertEqual(ctx.exception.code, code)

        user.disabled = True
        db.session.commit()
        with self.assertRaises(AuthenticationError) as ctx:
            accounts.authenticate('kim@example.com', 'secret123')
        self.assertEqual(ctx.exception.code, 'user-disabled')

    def test_admin_sign_in_saves_default_name_transactionally(self):
        accounts.register(None, 'admin@example.com', 'adminpass')

        with self.app.test_request_context():
            with patch.object(error_handler, 'preserve_data_integrity',
                              wraps=error_handler.preserve_data_integrity) as write:
                user = accounts.admin_sign_in('admin@example.com', 'adminpass')

        write.assert_called_once()
        self.assertEqual(db.session.get(User, user.id).display_name, 'Admin User')

    def test_admin_allow_list(self):
        self.assertTrue(accounts.is_admin_email('ADMIN@example.com'))
        self.assertFalse(accounts.is_admin_email('kim@example.com'))
        self.assertFalse(accounts.is_admin(None))

    def test_update_settings_password_change(self):
        user = accounts.register('Kim', 'kim@example.com', 'secret123')

        accounts.update_settings(user, display_name='Kimberly', current_password='secret123',
                                 new_password='newpass1', confirm_password='newpass1')

        stored = db.session.get(User, user.id)
        self.assertEqual(stored.display_name, 'Kimberly')
        self.assertTrue(stored.check_password('newpass1'))

    def test_update_settings_password_errors(self):
        user = accounts.register('Kim', 'kim@example.com', 'secret123')

        with self.assertRaises(ValidationError) as ctx:
            accounts.update_settings(user, new_password='newpass1')
        self.assertEqual(ctx.exception.message, 'Please fill all password fields to change password.')

        with self.assertRaises(ValidationError) as ctx:
            accounts.update_settings(user, current_password='secret123',
                                     new_password='newpass1', confirm_password='newpass2')
        self.assertEqual(ctx.exception.message, 'New password and confirmation do not match.')

        with self.assertRaises(AuthenticationError):
            accounts.update_settings(user, current_password='wrong',
                                     new_password='newpass1', confirm_password='newpass1')

        self.assertTrue(db.session.get(User, user.id).check_password('secret123'))


class TestAccountEndpoints(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        with self.app.app_context():
            db.create_all()
            for name, email in (('Kim', 'kim@example.com'), ('Lee', 'lee@example.com')):
                db.session.add(Order(name=name, email=email, address='1 Main St',
                                     cart=[], total=12.0, status='pending'))
            db.session.commit()
        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def test_register_signs_in(self):
        response = self.client.post('/auth/register', json={
            'name': 'Kim', 'email': 'kim@example.com', 'password': 'secret123'})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.client.get('/auth/me').get_json()['user']['email'], 'kim@example.com')

    def test_register_duplicate_email_is_bad_request(self):
        payload = {'name': 'Kim', 'email': 'kim@example.com', 'password': 'secret123'}
        self.client.post('/auth/register', json=payload)
        self.client.post('/auth/logout')

        response = self.client.post('/auth/register', json=payload)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['code'], 'email-already-in-use')
        self.assertEqual(response.get_json()['error'], 'Email already registered.')

    def test_login_failure_message(self):
        response = self.client.post('/auth/login', json={'email': 'ghost@example.com', 'password': 'x'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()['error'], 'User not found. Please check your email.')

    def test_my_orders_matches_email(self):
        self.client.post('/auth/register', json={
            'name': 'Kim', 'email': 'kim@example.com', 'password': 'secret123'})

        orders = self.client.get('/my-orders').get_json()['orders']

        self.assertEqual([o['name'] for o in orders], ['Kim'])

    def test_profile_update(self):
        self.client.post('/auth/register', json={
            'name': 'Kim', 'email': 'kim@example.com', 'password': 'secret123'})

        response = self.client.post('/profile', json={'display_name': 'Kimberly', 'photo_url': 'k.png'})

        self.assertEqual(response.get_json()['user']['display_name'], 'Kimberly')
        self.assertEqual(response.get_json()['user']['photo_url'], 'k.png')

    def test_logout(self):
        self.client.post('/auth/register', json={
            'name': 'Kim', 'email': 'kim@example.com', 'password': 'secret123'})

        self.client.post('/auth/logout')

        self.assertIsNone(self.client.get('/auth/me').get_json()['user'])


if __name__ == '__main__':
    unittest.main(verbosity=2)
