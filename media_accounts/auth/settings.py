"""Immutable crypto configuration, frozen once at application start."""

from typing import NamedTuple, Mapping, Any

import logging

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HASH_METHOD = 'pbkdf2:sha256:600000'


class AuthSettings(NamedTuple):
    """Secrets, lifetimes and hashing parameters for the auth subsystem."""

    access_secret: str
    refresh_secret: str

    access_ttl: int = 86400
    """Access token lifetime, in seconds."""

    refresh_ttl: int = 864000
    """Refresh token lifetime, in seconds."""

    algorithm: str = 'HS256'
    """JWT signing algorithm; must be an HMAC family algorithm."""

    hash_method: str = DEFAULT_HASH_METHOD
    """Werkzeug password hashing method string."""

    salt_length: int = 16

    revoke_on_password_change: bool = False
    """Whether changing a password also ends the outstanding session."""

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'AuthSettings':
        """
        Build and validate settings from a Flask-style config mapping.

        Raises
        ------
        :class:`ConfigurationError`
            If a secret is missing, the two secrets are identical, a lifetime
            is not a positive integer, or the algorithm is not HMAC-based.

        """
        try:
            settings = cls(
                access_secret=config.get('ACCESS_TOKEN_SECRET') or '',
                refresh_secret=config.get('REFRESH_TOKEN_SECRET') or '',
                access_ttl=int(config.get('ACCESS_TOKEN_EXPIRY', 86400)),
                refresh_ttl=int(config.get('REFRESH_TOKEN_EXPIRY', 864000)),
                algorithm=config.get('JWT_ALGORITHM', 'HS256'),
                hash_method=config.get('PASSWORD_HASH_METHOD',
                                       DEFAULT_HASH_METHOD),
                salt_length=int(config.get('PASSWORD_SALT_LENGTH', 16)),
                revoke_on_password_change=bool(int(config.get(
                    'PASSWORD_CHANGE_REVOKES_SESSIONS', 0)))
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f'Invalid auth setting: {e}') from e
        settings.validate()
        return settings

    def validate(self) -> None:
        """Refuse settings under which the two token classes could mix."""
        if not self.access_secret or not self.refresh_secret:
            raise ConfigurationError('Both token secrets must be set')
        if self.access_secret == self.refresh_secret:
            raise ConfigurationError('Access and refresh secrets must differ')
        if self.access_ttl <= 0 or self.refresh_ttl <= 0:
            raise ConfigurationError('Token lifetimes must be positive')
        if not self.algorithm.startswith('HS'):
            raise ConfigurationError('Only HMAC signing is supported')
        if self.salt_length <= 0:
            raise ConfigurationError('Salt length must be positive')
