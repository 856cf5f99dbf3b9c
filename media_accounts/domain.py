"""Defines account and session concepts for the accounts service."""

from typing import Any, Optional, NamedTuple, List
from datetime import datetime

import logging

logger = logging.getLogger(__name__)


class TokenClass(object):
    """Known classes of signed tokens."""

    ACCESS = 'access'
    """Short-lived, stateless; proves identity for a single request window."""

    REFRESH = 'refresh'
    """Long-lived, stateful; exchanged once for a new token pair."""

    ALL = (ACCESS, REFRESH)


class Identity(NamedTuple):
    """
    The sanitized account attached to a request after authentication.

    Never carries the credential hash or the refresh token.
    """

    account_id: str
    """Unique identifier for the account."""

    username: str
    """Lower-cased, unique handle."""

    email: str
    """Lower-cased, unique e-mail address."""

    full_name: str
    """Display name."""

    avatar_url: str = ''
    """Reference to an already-uploaded avatar image."""

    cover_image_url: str = ''
    """Reference to an already-uploaded cover image."""

    created_at: Optional[datetime] = None
    """When the account was registered."""


class Account(NamedTuple):
    """An account record as held by the credential store."""

    username: str
    """Lower-cased, unique handle."""

    email: str
    """Lower-cased, unique e-mail address."""

    full_name: str
    """Display name."""

    account_id: Optional[str] = None
    """Unique identifier. If ``None``, the account does not exist yet."""

    avatar_url: str = ''
    cover_image_url: str = ''

    password_hash: Optional[str] = None
    """
    Salted one-way hash of the password.

    ``None`` when the account was loaded without its credentials.
    """

    refresh_token: Optional[str] = None
    """The single outstanding refresh token, if any."""

    created_at: Optional[datetime] = None

    @property
    def identity(self) -> Identity:
        """This account with credential and session fields stripped."""
        if self.account_id is None:
            raise ValueError('Account has not been persisted')
        return Identity(
            account_id=self.account_id,
            username=self.username,
            email=self.email,
            full_name=self.full_name,
            avatar_url=self.avatar_url,
            cover_image_url=self.cover_image_url,
            created_at=self.created_at
        )


class TokenClaims(NamedTuple):
    """The verified payload of an access or refresh token."""

    account_id: str
    issued_at: datetime
    expires_at: datetime
    token_class: str
    token_id: str
    """Random nonce; makes every issued token unique."""


class IssuedToken(NamedTuple):
    """A freshly signed token and the moment it stops being valid."""

    token: str
    expires_at: datetime
    token_class: str
    ttl: int
    """Lifetime in seconds; used as the cookie ``max_age``."""


class SessionGrant(NamedTuple):
    """Outcome of a successful login or refresh."""

    access: IssuedToken
    refresh: IssuedToken
    identity: Identity


class ChannelProfile(NamedTuple):
    """Public view of an account as a channel in the social graph."""

    identity: Identity
    subscribers_count: int = 0
    """How many accounts subscribe to this channel."""

    channels_subscribed_to_count: int = 0
    """How many channels this account subscribes to."""

    is_subscribed: bool = False
    """Whether the viewing account subscribes to this channel."""


class WatchEntry(NamedTuple):
    """A single item in an account's watch history."""

    video_id: str
    watched_at: datetime


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    This just uses the built-in ``_asdict`` method on the intance, but also
    calls this on any child NamedTuple instances (recursively) so that the
    entire tree is cast to ``dict``. Datetimes become ISO-8601 strings.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore
    _data = {}

    def _cast(obj: Any) -> Any:
        if hasattr(obj, '_asdict'):
            obj = to_dict(obj)
        elif isinstance(obj, datetime):
            obj = obj.isoformat()
        elif isinstance(obj, list):
            obj = [_cast(o) for o in obj]
        return obj

    for key, value in data.items():
        _data[key] = _cast(value)
    return _data


def to_dict_list(objs: List[tuple]) -> List[dict]:
    """Cast a list of NamedTuple instances with :func:`to_dict`."""
    return [to_dict(obj) for obj in objs]
