"""Provides the JSON API for account registration and sessions."""

from typing import Any, Optional, Tuple

from flask import Blueprint, request, current_app, jsonify, Response, \
    make_response
from werkzeug.exceptions import HTTPException

import logging

from .. import exceptions
from ..auth.decorators import authenticated
from ..controllers import authentication, registration, profile, util
from ..services.accounts import util as db_util

logger = logging.getLogger(__name__)
blueprint = Blueprint('api', __name__, url_prefix='/api/v1/users')


def _cookie_params() -> dict:
    config = current_app.config
    params = dict(httponly=True,
                  secure=bool(config.get('AUTH_COOKIE_SECURE', True)),
                  samesite=config.get('AUTH_COOKIE_SAMESITE', 'Strict'))
    if config.get('AUTH_COOKIE_DOMAIN'):
        params['domain'] = config['AUTH_COOKIE_DOMAIN']
    return params


def set_cookies(response: Response, cookies: Optional[dict]) -> None:
    """
    Update a :class:`.Response` with cookies from controller data.

    Controllers seeking to update cookies must include a 'cookies' key in
    their response data, mapping a cookie key to ``(value, max_age)``. The
    cookie name is taken from the ``<KEY>_COOKIE_NAME`` config parameter.
    """
    if cookies is None:
        return None
    params = _cookie_params()
    for cookie_key, (cookie_value, max_age) in cookies.items():
        cookie_name = current_app.config[f'{cookie_key.upper()}_COOKIE_NAME']
        logger.debug('Set cookie %s, max_age %s', cookie_name, max_age)
        response.set_cookie(cookie_name, cookie_value, max_age=max_age,
                            **params)
    return None


def _respond(data: dict, code: int, headers: dict) -> Response:
    # Flask puts cookie-setting methods on the response, so we do that here
    # instead of in the controller.
    cookies = data.pop('cookies', None)
    response = make_response(jsonify(data), code, headers)
    set_cookies(response, cookies)
    return response


def _body() -> Any:
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.app_errorhandler(HTTPException)
def handle_http_exception(error: HTTPException) -> Tuple[Response, int]:
    """Render framework-level errors in the response envelope."""
    kind = 'Unauthorized' if error.code == 401 else 'HTTPError'
    if error.code == 400:
        kind = exceptions.ValidationError.kind
    data, code, _ = util.failure(kind, error.description or error.name,
                                 code=error.code)
    return jsonify(data), code


@blueprint.app_errorhandler(exceptions.AccountsError)
def handle_accounts_error(error: exceptions.AccountsError) \
        -> Tuple[Response, int]:
    """Anything a controller did not translate still gets an envelope."""
    if isinstance(error, exceptions.InternalFailure):
        logger.error('Unhandled failure: %s', error)
    data, code, _ = util.from_exception(error)
    return jsonify(data), code


@blueprint.route('/status', methods=['GET'])
def status() -> Response:
    """Liveness check; also reports whether the database is reachable."""
    available = db_util.is_available()
    data, code, headers = util.success({'database': available}, 'ok')
    return _respond(data, code, headers)


@blueprint.route('/register', methods=['POST'])
def register() -> Response:
    """Create a new account."""
    return _respond(*registration.register(_body()))


@blueprint.route('/login', methods=['POST'])
def login() -> Response:
    """Log in with username or e-mail, and password."""
    return _respond(*authentication.login(_body()))


@blueprint.route('/refresh-token', methods=['POST'])
def refresh_token() -> Response:
    """Rotate the session, using the refresh cookie or body field."""
    cookie_name = current_app.config['REFRESH_TOKEN_COOKIE_NAME']
    return _respond(*authentication.refresh(request.cookies.get(cookie_name),
                                            _body()))


@blueprint.route('/logout', methods=['POST'])
@authenticated
def logout() -> Response:
    """End the session and clear both cookies."""
    return _respond(*authentication.logout(request.auth))


@blueprint.route('/change-password', methods=['POST'])
@authenticated
def change_password() -> Response:
    """Change the password of the authenticated account."""
    return _respond(*authentication.change_password(request.auth, _body()))


@blueprint.route('/current-user', methods=['GET'])
@authenticated
def current_user() -> Response:
    """Describe the authenticated account."""
    return _respond(*profile.current_account(request.auth))


@blueprint.route('/update-account', methods=['PATCH'])
@authenticated
def update_account() -> Response:
    """Change display name and e-mail."""
    return _respond(*profile.update_account(request.auth, _body()))


@blueprint.route('/c/<username>', methods=['GET'])
@authenticated
def channel(username: str) -> Response:
    """View a channel and its subscription counts."""
    return _respond(*profile.channel_profile(request.auth, username))


@blueprint.route('/history', methods=['GET'])
@authenticated
def history() -> Response:
    """List watched videos, most recent first."""
    return _respond(*profile.watch_history(request.auth))
