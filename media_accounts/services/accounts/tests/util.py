"""Helpers for store tests."""

from unittest import TestCase

from flask import Flask

from .. import AccountStore, init_app, create_all, drop_all
from .... import domain


class StoreTestCase(TestCase):
    """Each test gets a fresh in-memory database with one account."""

    def setUp(self):
        """Create the tables and ``alice``."""
        self.app = Flask('test_store')
        self.app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
        init_app(self.app)
        self.context = self.app.app_context()
        self.context.push()
        create_all()
        self.store = AccountStore()
        self.account = self.store.create_account(domain.Account(
            username='Alice', email='A@X.com', full_name=' Alice ',
            password_hash='pbkdf2:sha256:1000$salt$hash'
        ))

    def tearDown(self):
        """Drop the tables."""
        drop_all()
        self.context.pop()
