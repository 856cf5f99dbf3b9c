"""
Issue and verify signed, time-bounded access and refresh tokens.

Tokens are HMAC-signed JWTs. Each token class has its own secret and
lifetime, and the class is also part of the signed payload: a token is only
accepted for the class it was issued for, even if the two secrets were ever
configured identically.
"""

from typing import Callable, Optional
from datetime import datetime, timedelta
import math
import uuid

import jwt
from pytz import UTC

import logging

from .. import domain
from .settings import AuthSettings
from ..exceptions import InvalidSignature, Expired, MalformedToken

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

REQUIRED_CLAIMS = ['sub', 'iat', 'exp', 'cls', 'jti']


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def epoch(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time."""
    return int(t.timestamp())


def from_epoch(t: int) -> datetime:
    """Get a :class:`datetime` from an UNIX timestamp."""
    return datetime.fromtimestamp(t, tz=UTC)


class TokenSigner(object):
    """Creates and verifies access and refresh tokens."""

    def __init__(self, settings: AuthSettings,
                 clock: Optional[Clock] = None) -> None:
        self._secrets = {
            domain.TokenClass.ACCESS: settings.access_secret,
            domain.TokenClass.REFRESH: settings.refresh_secret
        }
        self._ttls = {
            domain.TokenClass.ACCESS: settings.access_ttl,
            domain.TokenClass.REFRESH: settings.refresh_ttl
        }
        self._algorithm = settings.algorithm
        self._clock = clock or _utcnow

    def issue(self, account_id: str, token_class: str) -> domain.IssuedToken:
        """
        Sign a new token of ``token_class`` for an account.

        Parameters
        ----------
        account_id : str
        token_class : str
            One of :attr:`.domain.TokenClass.ALL`.

        Returns
        -------
        :class:`.domain.IssuedToken`

        """
        if token_class not in domain.TokenClass.ALL:
            raise ValueError(f'Unknown token class: {token_class}')
        ttl = self._ttls[token_class]
        now = self._clock()
        issued_at = now.replace(microsecond=0)
        # Rounded up: a token lives for at least ``ttl`` seconds.
        expires_at = from_epoch(
            math.ceil((now + timedelta(seconds=ttl)).timestamp())
        )
        payload = {
            'sub': str(account_id),
            'iat': epoch(issued_at),
            'exp': epoch(expires_at),
            'cls': token_class,
            'jti': uuid.uuid4().hex
        }
        token = jwt.encode(payload, self._secrets[token_class],
                           algorithm=self._algorithm)
        return domain.IssuedToken(token=token, expires_at=expires_at,
                                  token_class=token_class, ttl=ttl)

    def verify(self, token: str, token_class: str) -> domain.TokenClaims:
        """
        Verify a token against the secret and rules of ``token_class``.

        Returns
        -------
        :class:`.domain.TokenClaims`

        Raises
        ------
        :class:`.InvalidSignature`
            The signature does not verify under the class secret.
        :class:`.Expired`
            The current time is later than the token's expiry.
        :class:`.MalformedToken`
            The token can't be decoded, lacks claims, or is of another class.

        """
        if token_class not in domain.TokenClass.ALL:
            raise ValueError(f'Unknown token class: {token_class}')
        if not token or not isinstance(token, str):
            raise MalformedToken('Empty token')
        try:
            # Expiry is checked below against our own clock.
            data: dict = jwt.decode(
                token,
                self._secrets[token_class],
                algorithms=[self._algorithm],
                options={'require': REQUIRED_CLAIMS,
                         'verify_exp': False,
                         'verify_iat': False,
                         'verify_nbf': False}
            )
        except jwt.exceptions.InvalidSignatureError as e:
            raise InvalidSignature('Signature does not verify') from e
        except jwt.exceptions.InvalidTokenError as e:
            raise MalformedToken(f'Token malformed: {e}') from e

        if data['cls'] != token_class:
            raise MalformedToken(f'Expected {token_class} token')
        try:
            claims = domain.TokenClaims(
                account_id=str(data['sub']),
                issued_at=from_epoch(int(data['iat'])),
                expires_at=from_epoch(int(data['exp'])),
                token_class=data['cls'],
                token_id=str(data['jti'])
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedToken('Token claims malformed') from e

        if self._clock() > claims.expires_at:
            raise Expired('Token has expired')
        return claims
