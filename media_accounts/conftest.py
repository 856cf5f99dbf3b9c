import pytest

from .factory import create_web_app
from .services import accounts

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'CREATE_DB': True,
    'ACCESS_TOKEN_SECRET': 'access-secret-for-tests',
    'REFRESH_TOKEN_SECRET': 'refresh-secret-for-tests',
    'PASSWORD_HASH_METHOD': 'pbkdf2:sha256:1000',
    'AUTH_COOKIE_SECURE': False,
    'LOGLEVEL': 'DEBUG',
}


@pytest.fixture()
def app():
    app = create_web_app(TEST_CONFIG)
    yield app
    with app.app_context():
        accounts.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def app_context(app):
    with app.app_context():
        yield app
