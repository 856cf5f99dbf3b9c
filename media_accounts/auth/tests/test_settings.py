"""Tests for :mod:`media_accounts.auth.settings`."""

from unittest import TestCase

from ..settings import AuthSettings
from ...exceptions import ConfigurationError


class TestFromConfig(TestCase):
    """Settings are read once from the application config."""

    def test_defaults(self):
        """Only the secrets are required."""
        settings = AuthSettings.from_config({'ACCESS_TOKEN_SECRET': 'a',
                                             'REFRESH_TOKEN_SECRET': 'b'})
        self.assertEqual(settings.access_ttl, 86400)
        self.assertEqual(settings.refresh_ttl, 864000)
        self.assertEqual(settings.algorithm, 'HS256')
        self.assertFalse(settings.revoke_on_password_change)

    def test_values_from_config(self):
        """Lifetimes may arrive as strings from the environment."""
        settings = AuthSettings.from_config({
            'ACCESS_TOKEN_SECRET': 'a',
            'REFRESH_TOKEN_SECRET': 'b',
            'ACCESS_TOKEN_EXPIRY': '30',
            'REFRESH_TOKEN_EXPIRY': '300',
            'PASSWORD_CHANGE_REVOKES_SESSIONS': '1'
        })
        self.assertEqual(settings.access_ttl, 30)
        self.assertEqual(settings.refresh_ttl, 300)
        self.assertTrue(settings.revoke_on_password_change)

    def test_missing_secret(self):
        """Both secrets must be set."""
        with self.assertRaises(ConfigurationError):
            AuthSettings.from_config({'ACCESS_TOKEN_SECRET': 'a'})
        with self.assertRaises(ConfigurationError):
            AuthSettings.from_config({'REFRESH_TOKEN_SECRET': 'b'})

    def test_same_secret(self):
        """The two classes can't share a secret."""
        with self.assertRaises(ConfigurationError):
            AuthSettings.from_config({'ACCESS_TOKEN_SECRET': 'a',
                                      'REFRESH_TOKEN_SECRET': 'a'})

    def test_bad_lifetime(self):
        """Lifetimes are positive integers."""
        for value in ('0', '-5', 'tomorrow'):
            with self.assertRaises(ConfigurationError):
                AuthSettings.from_config({'ACCESS_TOKEN_SECRET': 'a',
                                          'REFRESH_TOKEN_SECRET': 'b',
                                          'ACCESS_TOKEN_EXPIRY': value})

    def test_asymmetric_algorithm(self):
        """Only HMAC algorithms are supported."""
        with self.assertRaises(ConfigurationError):
            AuthSettings.from_config({'ACCESS_TOKEN_SECRET': 'a',
                                      'REFRESH_TOKEN_SECRET': 'b',
                                      'JWT_ALGORITHM': 'RS256'})
