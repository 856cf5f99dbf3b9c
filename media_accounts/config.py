"""Flask configuration."""
import secrets
import os

#################### Token configs ####################
ACCESS_TOKEN_SECRET = os.environ.get('ACCESS_TOKEN_SECRET',
                                     secrets.token_urlsafe(32))
"""Secret used to sign access tokens.

The default is random per process, so tokens don't survive a restart. Set
this (and ``REFRESH_TOKEN_SECRET``) in any real deployment.
"""

REFRESH_TOKEN_SECRET = os.environ.get('REFRESH_TOKEN_SECRET',
                                      secrets.token_urlsafe(32))
"""Secret used to sign refresh tokens. Must differ from the access secret."""

ACCESS_TOKEN_EXPIRY = int(os.environ.get('ACCESS_TOKEN_EXPIRY', '86400'))
"""Access token lifetime, in seconds. One day by default."""

REFRESH_TOKEN_EXPIRY = int(os.environ.get('REFRESH_TOKEN_EXPIRY', '864000'))
"""Refresh token lifetime, in seconds. Ten days by default."""

JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')

#################### Password configs ####################
PASSWORD_HASH_METHOD = os.environ.get('PASSWORD_HASH_METHOD',
                                      'pbkdf2:sha256:600000')
"""Method string passed to :func:`werkzeug.security.generate_password_hash`."""

PASSWORD_SALT_LENGTH = int(os.environ.get('PASSWORD_SALT_LENGTH', '16'))

PASSWORD_CHANGE_REVOKES_SESSIONS = int(
    os.environ.get('PASSWORD_CHANGE_REVOKES_SESSIONS', '0')
)
"""If 1, changing a password also ends the outstanding session."""

#################### Cookie configs ####################
ACCESS_TOKEN_COOKIE_NAME = os.environ.get('ACCESS_TOKEN_COOKIE_NAME',
                                          'accessToken')
REFRESH_TOKEN_COOKIE_NAME = os.environ.get('REFRESH_TOKEN_COOKIE_NAME',
                                           'refreshToken')

AUTH_COOKIE_SECURE = bool(int(os.environ.get('AUTH_COOKIE_SECURE', '1')))
"""If set to 0, auth cookies will not have the secure flag.

Use this for local development over plain http.
"""

AUTH_COOKIE_SAMESITE = os.environ.get('AUTH_COOKIE_SAMESITE', 'Strict')

AUTH_COOKIE_DOMAIN = os.environ.get('AUTH_COOKIE_DOMAIN', None)
"""Domain for the auth cookies. Unset means the host of the request."""

CORS_ORIGIN = os.environ.get('CORS_ORIGIN', None)
"""Origin allowed to make credentialed cross-site requests, if any."""

MAX_CONTENT_LENGTH = 16 * 1024
"""Request bodies larger than this are rejected with 413."""

#################### Database configs ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite:///accounts.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

CREATE_DB = bool(int(os.environ.get('CREATE_DB', '0')))
"""Create the tables at start-up. Useful for development and testing."""

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
