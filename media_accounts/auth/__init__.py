"""Provides tools for working with authenticated account sessions."""

from typing import Optional

from flask import Flask, request, current_app

import logging

from . import decorators, gate, passwords, sessions, settings, tokens
from .. import exceptions
from ..services.accounts import AccountStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'media_accounts.auth'


class Auth(object):
    """
    Attaches authentication information to the request.

    On start-up, the crypto settings are frozen into an
    :class:`.settings.AuthSettings` and used to build the password hasher,
    the token signer, the :class:`.sessions.SessionManager` and the
    :class:`.gate.AuthenticationGate`. Before each request, the gate runs
    and its result is attached as ``request.auth``: a
    :class:`.domain.Identity`, or ``None`` if the request carries no valid
    access token. Routes that require an identity are protected with
    :func:`.decorators.authenticated`.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from media_accounts.auth import Auth
       from someapp import routes


       def create_web_app() -> Flask:
          app = Flask('someapp')
          app.config.from_object('someapp.config')
          Auth(app)   # Registers the before_request auth check
          app.register_blueprint(routes.blueprint)
          return app

    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        """
        Initialize ``app`` with `Auth`.

        Parameters
        ----------
        app : :class:`Flask`

        """
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Build the auth components and attach :meth:`.load_identity`.

        Raises
        ------
        :class:`.exceptions.ConfigurationError`
            If the auth settings in ``app.config`` are missing or unsafe.

        """
        self.app = app
        self.settings = settings.AuthSettings.from_config(app.config)
        self.hasher = passwords.PasswordHasher.from_settings(self.settings)
        self.signer = tokens.TokenSigner(self.settings)
        self.store = AccountStore()
        self.sessions = sessions.SessionManager(
            self.store, self.hasher, self.signer,
            revoke_on_password_change=self.settings.revoke_on_password_change
        )
        self.gate = gate.AuthenticationGate(
            self.signer, self.store,
            cookie_name=app.config.get('ACCESS_TOKEN_COOKIE_NAME',
                                       'accessToken')
        )
        app.extensions[EXTENSION_KEY] = self
        app.before_request(self.load_identity)

    def load_identity(self) -> None:
        """
        Run the gate, and attach the identity (or ``None``) to the request.

        A request without a usable access token is not rejected here: it is
        simply anonymous, and protected routes reject it.
        """
        request.auth = None
        token = self.gate.extract_token(request.cookies, request.headers)
        if token is None:
            return None
        try:
            request.auth = self.gate.authenticate(request.cookies,
                                                  request.headers)
        except exceptions.Unauthorized as e:
            logger.debug('Request is not authenticated: %s', e)
        return None


def current_auth() -> Auth:
    """Get the :class:`.Auth` extension of the current application."""
    auth: Auth = current_app.extensions[EXTENSION_KEY]
    return auth
