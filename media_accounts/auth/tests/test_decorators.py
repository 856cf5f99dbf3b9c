"""Tests for :mod:`media_accounts.auth.decorators`."""

from unittest import TestCase, mock

from flask import Flask
from werkzeug.exceptions import Unauthorized

from .. import decorators
from ... import domain


class TestAuthenticated(TestCase):
    """Tests for :func:`.decorators.authenticated`."""

    def setUp(self):
        """Bind ``flask.request`` so ``mock.patch`` can inspect it."""
        ctx = Flask(__name__).test_request_context()
        ctx.push()
        self.addCleanup(ctx.pop)

    @mock.patch(f'{decorators.__name__}.request')
    def test_no_identity(self, mock_request):
        """No identity is attached to the request."""
        mock_request.auth = None

        @decorators.authenticated
        def protected():
            """A protected function."""

        with self.assertRaises(Unauthorized):
            protected()

    @mock.patch(f'{decorators.__name__}.request')
    def test_identity(self, mock_request):
        """The gate attached an identity."""
        mock_request.auth = domain.Identity(account_id='1', username='alice',
                                            email='a@x.com',
                                            full_name='Alice')

        @decorators.authenticated
        def protected():
            """A protected function."""
            return 'ok'

        self.assertEqual(protected(), 'ok')
