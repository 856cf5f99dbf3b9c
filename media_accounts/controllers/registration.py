"""
Controller for registering new accounts.

Media uploads are handled elsewhere; registration only records references
(URLs) to an avatar and cover image that have already been uploaded.
"""

from typing import Any
from http import HTTPStatus as status

from retry import retry

import logging

from .. import domain, exceptions
from ..auth import current_auth
from ..services.accounts import Unavailable
from . import util
from .forms import RegistrationForm, normalize
from .util import ResponseData

logger = logging.getLogger(__name__)


def register(form_data: Any) -> ResponseData:
    """
    Create a new account.

    Parameters
    ----------
    form_data : MultiDict or dict
        Requires ``username``, ``email``, ``fullName`` and ``password``;
        ``avatar`` and ``coverImage`` are optional.

    Returns
    -------
    dict
        Response envelope holding the new account, minus credentials.
    int
        201 on success; 400 if a field is missing or malformed; 409 if the
        username or e-mail address is taken.
    dict
        Headers to add to the response.

    """
    logger.debug('Registration submitted')
    form = RegistrationForm(normalize(form_data))
    if not form.validate():
        return util.invalid_form(form, 'All fields are required')

    try:
        identity = _do_register(form.to_domain(), form.password.data)
    except exceptions.AccountsError as e:
        logger.debug('Registration failed: %s', e)
        return util.from_exception(e)

    logger.debug('Registered account %s', identity.account_id)
    return util.success(domain.to_dict(identity),
                        'User registered successfully', status.CREATED)


@retry(Unavailable, tries=3, delay=0.5, backoff=2)
def _do_register(account: domain.Account, password: str) -> domain.Identity:
    auth = current_auth()
    if auth.store.username_exists(account.username) \
            or auth.store.email_exists(account.email):
        raise exceptions.Conflict('User with email or username already exists')
    created = auth.store.create_account(
        account._replace(password_hash=auth.hasher.hash(password))
    )
    return created.identity
