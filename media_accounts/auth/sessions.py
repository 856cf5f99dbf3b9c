"""
Session lifecycle: login, refresh-token rotation, logout, password change.

Each account has at most one outstanding refresh token, persisted on the
account record. Login overwrites it; refresh redeems it exactly once and
persists its replacement; logout clears it. A refresh token that verifies
cryptographically but is not the persisted value has already been redeemed
(or superseded by a later login) and is refused.

Tokens are only handed back once the store reflects them. If the refresh
token can't be persisted, the whole attempt fails.
"""

from typing import Optional, Any
import hmac

import logging

from .. import domain
from ..services.accounts import AccountStore, Projection
from .passwords import PasswordHasher
from .tokens import TokenSigner
from ..exceptions import ValidationError, AccountNotFound, \
    InvalidCredential, InternalFailure, Unauthorized, MissingToken, StaleToken

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = 'Invalid refresh token'


def _same_token(incoming: str, persisted: Optional[str]) -> bool:
    """Compare two token values without leaking where they differ."""
    if not persisted:
        return False
    return hmac.compare_digest(incoming.encode('utf-8'),
                               persisted.encode('utf-8'))


class SessionManager(object):
    """
    Orchestrates credential checks, token issuance and session persistence.

    Parameters
    ----------
    store : :class:`.AccountStore`
    hasher : :class:`.PasswordHasher`
    signer : :class:`.TokenSigner`
    revoke_on_password_change : bool
        If ``True``, a successful password change also clears the persisted
        refresh token. Off by default.

    """

    def __init__(self, store: AccountStore, hasher: PasswordHasher,
                 signer: TokenSigner,
                 revoke_on_password_change: bool = False) -> None:
        self.store = store
        self.hasher = hasher
        self.signer = signer
        self.revoke_on_password_change = revoke_on_password_change

    def login(self, password: str, username: Optional[str] = None,
              email: Optional[str] = None) -> domain.SessionGrant:
        """
        Verify a credential and start a new session.

        The account is looked up by username OR e-mail address.

        Returns
        -------
        :class:`.domain.SessionGrant`

        Raises
        ------
        :class:`.ValidationError`
            Neither username nor e-mail, or no password, was supplied.
        :class:`.AccountNotFound`
            No account matches.
        :class:`.InvalidCredential`
            The password is wrong.
        :class:`.InternalFailure`
            The new session could not be persisted; no tokens are returned.

        """
        if not (username or email):
            raise ValidationError('Username or email is required')
        if not password:
            raise ValidationError('Password is required')

        account = self.store.find_by_username_or_email(username, email)
        if account is None:
            self.hasher.verify_decoy(password)
            logger.debug('Login for unknown account')
            raise AccountNotFound('User does not exist')

        # Always ask the hasher; a stored hash being present proves nothing.
        if not self.hasher.verify(password, account.password_hash or ''):
            logger.debug('Wrong password for account %s', account.account_id)
            raise InvalidCredential('Invalid user credentials')

        grant = self._start(account)
        logger.debug('Logged in account %s', account.account_id)
        return grant

    def refresh(self, incoming: Optional[str]) -> domain.SessionGrant:
        """
        Redeem a refresh token for a new access/refresh pair.

        Every failure (bad signature, expiry, unknown account, reuse, a lost
        race with a concurrent refresh, or a store error) is reported as the
        same :class:`.Unauthorized`. The specific reason is chained as
        ``__cause__`` and logged.
        """
        if not incoming:
            raise MissingToken('Unauthorized request')
        try:
            claims = self.signer.verify(incoming, domain.TokenClass.REFRESH)
            account = self.store.find_by_id(claims.account_id,
                                            Projection.CREDENTIALS)
            if account is None:
                raise Unauthorized('Account no longer exists')
            if not _same_token(incoming, account.refresh_token):
                raise StaleToken('Refresh token is expired or used')
            grant = self._start(account, expected=incoming)
        except Exception as e:
            logger.debug('Refresh refused: %s (%s)', e, type(e).__name__)
            raise Unauthorized(INVALID_REFRESH_TOKEN) from e
        logger.debug('Rotated refresh token for account %s',
                     grant.identity.account_id)
        return grant

    def logout(self, account_id: str) -> None:
        """
        End the session of an authenticated account.

        Clearing an already-cleared session is not an error.
        """
        self.store.update_session_token(account_id, None)
        logger.debug('Logged out account %s', account_id)

    def change_password(self, account_id: str, current: str,
                        new: str) -> None:
        """
        Replace the credential of an authenticated account.

        The outstanding refresh token is left alone unless the manager was
        built with ``revoke_on_password_change``.

        Raises
        ------
        :class:`.ValidationError`
        :class:`.AccountNotFound`
        :class:`.InvalidCredential`
            ``current`` does not match the stored credential.

        """
        if not current or not new:
            raise ValidationError('Old and new password are required')
        account = self.store.find_by_id(account_id, Projection.CREDENTIALS)
        if account is None:
            raise AccountNotFound('User does not exist')
        if not self.hasher.verify(current, account.password_hash or ''):
            raise InvalidCredential('Invalid old password')
        if not self.store.update_credential(account_id,
                                            self.hasher.hash(new)):
            raise AccountNotFound('User does not exist')
        if self.revoke_on_password_change:
            self.store.update_session_token(account_id, None)
        logger.debug('Changed password for account %s', account_id)

    def _start(self, account: domain.Account,
               expected: Any = None) -> domain.SessionGrant:
        """
        Issue a token pair and persist the refresh token.

        When ``expected`` is given, the refresh token is only written if the
        stored value is still ``expected``; losing that race is a
        :class:`.StaleToken`.
        """
        account_id = str(account.account_id)
        access = self.signer.issue(account_id, domain.TokenClass.ACCESS)
        refresh = self.signer.issue(account_id, domain.TokenClass.REFRESH)
        if expected is None:
            persisted = self.store.update_session_token(account_id,
                                                        refresh.token)
            if not persisted:
                raise InternalFailure('Could not persist session')
        else:
            persisted = self.store.update_session_token(account_id,
                                                        refresh.token,
                                                        expected=expected)
            if not persisted:
                raise StaleToken('Refresh token was rotated concurrently')
        return domain.SessionGrant(access=access, refresh=refresh,
                                   identity=account.identity)
