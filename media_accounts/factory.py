"""Application factory for the accounts service."""

from typing import Optional, Mapping, Any

from flask import Flask
from flask_cors import CORS

import logging

from . import auth
from .routes import api
from .services import accounts


def create_web_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Initialize and configure the accounts application.

    Parameters
    ----------
    config : dict
        Overrides applied on top of :mod:`media_accounts.config`, e.g. for
        testing.

    """
    app = Flask('media_accounts')
    app.config.from_object('media_accounts.config')
    if config:
        app.config.update(config)

    logging.getLogger('media_accounts').setLevel(app.config['LOGLEVEL'])

    accounts.init_app(app)
    auth.Auth(app)  # Handles sessions and authentication.
    app.register_blueprint(api.blueprint)

    if app.config.get('CORS_ORIGIN'):
        CORS(app, origins=[app.config['CORS_ORIGIN']],
             supports_credentials=True)

    if app.config['CREATE_DB']:
        with app.app_context():
            accounts.create_all()

    return app
