"""Resolve the authenticated identity behind an inbound request."""

from typing import Mapping, Optional

import logging

from .. import domain
from ..services.accounts import AccountStore, Projection
from .tokens import TokenSigner
from ..exceptions import Unauthorized, MissingToken, InvalidToken

logger = logging.getLogger(__name__)

INVALID_ACCESS_TOKEN = 'Invalid access token'
BEARER = 'bearer'


class AuthenticationGate(object):
    """
    Verifies the access token on a request and loads its account.

    This is a pure read: nothing is written, so it is safe to run on every
    request, concurrently. Access tokens are never checked against the
    store; only the account they name is.
    """

    def __init__(self, signer: TokenSigner, store: AccountStore,
                 cookie_name: str = 'accessToken') -> None:
        self.signer = signer
        self.store = store
        self.cookie_name = cookie_name

    def extract_token(self, cookies: Mapping[str, str],
                      headers: Mapping[str, str]) -> Optional[str]:
        """Get the access token from the cookie, or else a bearer header."""
        token = cookies.get(self.cookie_name)
        if token:
            return token
        header = headers.get('Authorization')
        if not header:
            return None
        scheme, _, credentials = header.strip().partition(' ')
        if scheme.lower() != BEARER or not credentials.strip():
            return None
        return credentials.strip()

    def authenticate(self, cookies: Mapping[str, str],
                     headers: Mapping[str, str]) -> domain.Identity:
        """
        Produce the :class:`.domain.Identity` for a request, or reject it.

        Raises
        ------
        :class:`.Unauthorized`
            No token, a token that does not verify as an access token, or an
            account that no longer exists. The message is always the same.
        :class:`.InternalFailure`
            The store could not be read.

        """
        token = self.extract_token(cookies, headers)
        if not token:
            raise MissingToken('Unauthorized request')
        try:
            claims = self.signer.verify(token, domain.TokenClass.ACCESS)
        except InvalidToken as e:
            logger.debug('Access token refused: %s (%s)', e,
                         type(e).__name__)
            raise Unauthorized(INVALID_ACCESS_TOKEN) from e

        account = self.store.find_by_id(claims.account_id, Projection.PUBLIC)
        if account is None:
            logger.debug('Access token for missing account %s',
                         claims.account_id)
            raise Unauthorized(INVALID_ACCESS_TOKEN)
        return account.identity
