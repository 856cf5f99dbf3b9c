"""
Controllers for logging in, refreshing, and logging out.

A successful login or refresh hands the client two tokens: a short-lived
access token, presented on every request, and a long-lived refresh token,
exchanged (once) for a new pair when the access token runs out. Both are
set as http-only cookies by the route, and also returned in the body for
clients that can't use cookies.
"""

from typing import Any, Optional
from http import HTTPStatus as status

from retry import retry

import logging

from .. import domain, exceptions
from ..auth import current_auth
from ..services.accounts import Unavailable
from . import util
from .forms import LoginForm, PasswordChangeForm, RefreshForm, normalize
from .util import ResponseData

logger = logging.getLogger(__name__)


def _grant_data(grant: domain.SessionGrant) -> dict:
    return {
        'user': domain.to_dict(grant.identity),
        'accessToken': grant.access.token,
        'refreshToken': grant.refresh.token
    }


def _grant_cookies(grant: domain.SessionGrant) -> dict:
    return {
        'access_token': (grant.access.token, grant.access.ttl),
        'refresh_token': (grant.refresh.token, grant.refresh.ttl)
    }


def login(form_data: Any) -> ResponseData:
    """
    Log in with a username or e-mail address, and a password.

    Parameters
    ----------
    form_data : MultiDict or dict
        Should include ``password`` and either ``username`` or ``email``.

    Returns
    -------
    dict
        Response envelope. On success, also a ``cookies`` key that the route
        uses to set the access and refresh cookies.
    int
        Status code: 200 on success.
    dict
        Headers to add to the response.

    """
    logger.debug('Login submitted')
    form = LoginForm(normalize(form_data))
    if not form.validate():
        return util.invalid_form(form, 'Username or email is required')

    try:
        grant = _do_login(form.password.data,
                          username=(form.username.data or '').strip(),
                          email=(form.email.data or '').strip())
    except exceptions.AccountsError as e:
        logger.debug('Login failed: %s', e)
        return util.from_exception(e)

    data, code, headers = util.success(_grant_data(grant),
                                       'User logged in successfully')
    data['cookies'] = _grant_cookies(grant)
    return data, code, headers


def refresh(cookie_token: Optional[str], form_data: Any) -> ResponseData:
    """
    Exchange a refresh token for a new access/refresh pair.

    The token is read from the refresh cookie if present, otherwise from
    the ``refreshToken`` field of the body.
    """
    form = RefreshForm(normalize(form_data))
    form.validate()
    incoming = cookie_token or (form.refresh_token.data or '').strip()
    try:
        grant = current_auth().sessions.refresh(incoming)
    except exceptions.Unauthorized as e:
        return util.from_exception(e)

    data, code, headers = util.success(_grant_data(grant),
                                       'Access token refreshed')
    data['cookies'] = _grant_cookies(grant)
    return data, code, headers


def logout(identity: domain.Identity) -> ResponseData:
    """
    End the session of the authenticated account.

    The account comes from the gate, not from the refresh token. Both
    cookies are cleared, whether or not there was a session to end.
    """
    try:
        _do_logout(identity.account_id)
    except exceptions.AccountsError as e:
        logger.error('Logout failed for %s: %s', identity.account_id, e)
        return util.from_exception(e)
    data, code, headers = util.success({}, 'User logged out')
    data['cookies'] = {'access_token': ('', 0), 'refresh_token': ('', 0)}
    return data, code, headers


def change_password(identity: domain.Identity, form_data: Any) \
        -> ResponseData:
    """Change the password of the authenticated account."""
    form = PasswordChangeForm(normalize(form_data))
    if not form.validate():
        return util.invalid_form(form, 'Old and new password are required')
    try:
        _do_change_password(identity.account_id, form.old_password.data,
                            form.new_password.data)
    except exceptions.AccountsError as e:
        logger.debug('Password change failed: %s', e)
        return util.from_exception(e)
    return util.success({}, 'Password changed successfully', status.OK)


# These are broken out to add retry logic.
@retry(Unavailable, tries=3, delay=0.5, backoff=2)
def _do_login(password: str, username: str = '',
              email: str = '') -> domain.SessionGrant:
    return current_auth().sessions.login(password, username=username or None,
                                         email=email or None)


@retry(Unavailable, tries=3, delay=0.5, backoff=2)
def _do_logout(account_id: str) -> None:
    current_auth().sessions.logout(account_id)


@retry(Unavailable, tries=3, delay=0.5, backoff=2)
def _do_change_password(account_id: str, current: str, new: str) -> None:
    current_auth().sessions.change_password(account_id, current, new)
