#!/usr/bin/env python3
"""
Notification listing and read tracking
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import unittest
from datetime import datetime, timedelta

from storefront import create_app, db
from storefront.config import TestingConfig
from storefront.models import Notification, User
from storefront.services import notifications
from storefront.services.error_handler import AuthorizationError, NotFoundError


class TestNotificationService(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

        self.alice = User(email='alice@example.com')
        self.bob = User(email='bob@example.com')
        for user in (self.alice, self.bob):
            user.set_password('secret123')
        db.session.add_all([self.alice, self.bob])
        db.session.commit()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def add(self, user, order_id, minutes_ago=0, read=False):
        notification = Notification(
            user_id=user.id,
            order_id=order_id,
            message=notifications.status_message(order_id, 'shipped'),
            read=read,
            created_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
        )
        db.session.add(notification)
        db.session.commit()
        return notification

    def test_create_without_user_is_skipped(self):
        self.assertIsNone(notifications.create_notification(None, 7, 'shipped'))
        self.assertEqual(Notification.query.count(), 0)

    def test_list_for_user_newest_first(self):
        older = self.add(self.alice, 1, minutes_ago=10)
        newer = self.add(self.alice, 2, minutes_ago=1)
        self.add(self.bob, 3)

        items = notifications.list_for_user(self.alice.id)

        self.assertEqual([n.id for n in items], [newer.id, older.id])

    def test_unread_count(self):
        self.add(self.alice, 1)
        self.add(self.alice, 2, read=True)
        self.add(self.alice, 3)

        self.assertEqual(notifications.unread_count(notifications.list_for_user(self.alice.id)), 2)

    def test_mark_read_own_notification(self):
        notification = self.add(self.alice, 1)

        notifications.mark_read(notification.id, self.alice)

        self.assertTrue(db.session.get(Notification, notification.id).read)

    def test_mark_read_other_users_notification(self):
        notification = self.add(self.alice, 1)

        with self.assertRaises(AuthorizationError):
            notifications.mark_read(notification.id, self.bob)
        self.assertFalse(db.session.get(Notification, notification.id).read)

        notifications.mark_read(notification.id, self.bob, is_admin=True)
        self.assertTrue(db.session.get(Notification, notification.id).read)

    def test_mark_read_missing(self):
        with self.assertRaises(NotFoundError):
            notifications.mark_read(404, self.alice)

    def test_mark_all_read_is_scoped_to_user(self):
        self.add(self.alice, 1)
        self.add(self.alice, 2)
        self.add(self.alice, 3, read=True)
        self.add(self.bob, 4)

        updated = notifications.mark_all_read(self.alice.id)

        self.assertEqual(updated, 2)
        self.assertEqual(notifications.unread_count(notifications.list_for_user(self.alice.id)), 0)
        self.assertEqual(notifications.unread_count(notifications.list_for_user(self.bob.id)), 1)


class TestNotificationEndpoints(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        with self.app.app_context():
            db.create_all()
            alice = User(email='alice@example.com')
            alice.set_password('secret123')
            bob = User(email='bob@example.com')
            bob.set_password('secret123')
            db.session.add_all([alice, bob])
            db.session.commit()
            self.alice_id, self.bob_id = alice.id, bob.id
            for user_id, order_id in ((alice.id, 1), (alice.id, 2), (bob.id, 3)):
                db.session.add(Notification(user_id=user_id, order_id=order_id,
                                            message=notifications.status_message(order_id, 'shipped')))
            db.session.commit()
            self.bob_notification_id = Notification.query.filter_by(user_id=bob.id).first().id
        self.client = self.app.test_client()
        self.client.post('/auth/login', json={'email': 'alice@example.com', 'password': 'secret123'})

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def test_list_own_notifications(self):
        data = self.client.get('/notifications').get_json()

        self.assertEqual(len(data['notifications']), 2)
        self.assertEqual(data['unread_count'], 2)
        self.assertTrue(all(n['user_id'] == self.alice_id for n in data['notifications']))

    def test_read_all(self):
        response = self.client.post('/notifications/read-all')

        self.assertEqual(response.get_json()['updated'], 2)
        self.assertEqual(self.client.get('/notifications').get_json()['unread_count'], 0)
        with self.app.app_context():
            self.assertFalse(db.session.get(Notification, self.bob_notification_id).read)

    def test_cannot_mark_another_users_notification(self):
        response = self.client.post(f'/notifications/{self.bob_notification_id}/read')
        self.assertEqual(response.status_code, 403)

    def test_requires_login(self):
        self.client.post('/auth/logout')
        response = self.client.get('/notifications')
        self.assertIn(response.status_code, (302, 401))


if __name__ == '__main__':
    unittest.main(verbosity=2)
