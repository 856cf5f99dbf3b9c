"""Controllers for the authenticated account and the channels it views."""

from typing import Any

import logging

from .. import domain, exceptions
from ..auth import current_auth
from ..services.channels import ChannelStore
from . import util
from .forms import AccountDetailsForm, normalize
from .util import ResponseData

logger = logging.getLogger(__name__)


def current_account(identity: domain.Identity) -> ResponseData:
    """Describe the account behind the request."""
    return util.success(domain.to_dict(identity),
                        'Current user fetched successfully')


def update_account(identity: domain.Identity, form_data: Any) \
        -> ResponseData:
    """Change the display name and e-mail address of the account."""
    form = AccountDetailsForm(normalize(form_data))
    if not form.validate():
        return util.invalid_form(form, 'All fields are required')

    store = current_auth().store
    email = form.email.data.strip().lower()
    try:
        if email != identity.email and store.email_exists(email):
            raise exceptions.Conflict('Email is already in use')
        account = store.update_details(identity.account_id,
                                       full_name=form.full_name.data,
                                       email=email)
        if account is None:
            raise exceptions.AccountNotFound('User does not exist')
    except exceptions.AccountsError as e:
        logger.debug('Account update failed: %s', e)
        return util.from_exception(e)
    return util.success(domain.to_dict(account.identity),
                        'Account details updated successfully')


def channel_profile(identity: domain.Identity, username: str) \
        -> ResponseData:
    """Get a channel by username, as seen by the authenticated account."""
    if not username or not username.strip():
        return util.failure(exceptions.ValidationError.kind,
                            'Username is missing')
    channels = ChannelStore(current_auth().store)
    try:
        profile = channels.get_channel_profile(username,
                                               viewer_id=identity.account_id)
    except exceptions.AccountsError as e:
        return util.from_exception(e)
    if profile is None:
        return util.failure(exceptions.AccountNotFound.kind,
                            'Channel does not exist')
    return util.success(domain.to_dict(profile),
                        'User channel fetched successfully')


def watch_history(identity: domain.Identity) -> ResponseData:
    """List the videos the authenticated account has watched."""
    channels = ChannelStore(current_auth().store)
    try:
        entries = channels.get_watch_history(identity.account_id)
    except exceptions.AccountsError as e:
        return util.from_exception(e)
    return util.success(domain.to_dict_list(entries),
                        'Watch history fetched successfully')
