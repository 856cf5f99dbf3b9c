"""
Database integration for persisting account records.

This is the credential store: the only shared mutable state the session
subsystem depends on. Besides ordinary reads and inserts it exposes two
narrow partial updates, :meth:`AccountStore.update_session_token` and
:meth:`AccountStore.update_credential`, which touch a single column and
nothing else.
"""

from typing import Optional, Callable, Any, TypeVar, cast
from functools import wraps

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError, OperationalError, IntegrityError

import logging

from ... import domain
from ...exceptions import Conflict, InternalFailure
from . import util
from .models import DBAccount

logger = logging.getLogger(__name__)

init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all
transaction = util.transaction

F = TypeVar('F', bound=Callable[..., Any])


class Unavailable(InternalFailure):
    """The database could not be reached; the operation may be retried."""


class Projection(object):
    """Which fields of an account record to load."""

    PUBLIC = 'public'
    """Everything except the credential hash and the refresh token."""

    CREDENTIALS = 'credentials'
    """The full record."""


_UNCONDITIONAL = object()


def translate_errors(func: F) -> F:
    """Map SQLAlchemy failures onto the store's exceptions."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except OperationalError as e:
            logger.error('Database unavailable in %s: %s', func.__name__, e)
            raise Unavailable('Account store is unavailable') from e
        except IntegrityError as e:
            logger.debug('Integrity error in %s: %s', func.__name__, e)
            raise Conflict('Username or email already exists') from e
        except SQLAlchemyError as e:
            logger.exception('Database error in %s', func.__name__)
            raise InternalFailure('Account store failed') from e
    return cast(F, wrapper)


def _to_domain(db_account: DBAccount, projection: str) -> domain.Account:
    account = domain.Account(
        account_id=str(db_account.account_id),
        username=db_account.username,
        email=db_account.email,
        full_name=db_account.full_name,
        avatar_url=db_account.avatar_url or '',
        cover_image_url=db_account.cover_image_url or '',
        created_at=db_account.created
    )
    if projection == Projection.CREDENTIALS:
        account = account._replace(password_hash=db_account.password_hash,
                                   refresh_token=db_account.refresh_token)
    return account


def _as_key(account_id: str) -> Optional[int]:
    """Account IDs are strings in the domain, integers in the database."""
    try:
        return int(account_id)
    except (TypeError, ValueError):
        return None


class AccountStore(object):
    """
    Reads and writes account records.

    All methods must be called within an application context. Every write
    is committed before the method returns.
    """

    @translate_errors
    def find_by_username_or_email(self, username: Optional[str],
                                  email: Optional[str]) \
            -> Optional[domain.Account]:
        """
        Load the full account whose username OR e-mail address matches.

        Both comparisons are case-insensitive.
        """
        clauses = []
        if username:
            clauses.append(DBAccount.username == username.strip().lower())
        if email:
            clauses.append(DBAccount.email == email.strip().lower())
        if not clauses:
            return None
        with transaction() as session:
            db_account = session.query(DBAccount) \
                .filter(or_(*clauses)) \
                .order_by(DBAccount.account_id) \
                .first()
            if db_account is None:
                return None
            return _to_domain(db_account, Projection.CREDENTIALS)

    @translate_errors
    def find_by_id(self, account_id: str,
                   projection: str = Projection.PUBLIC) \
            -> Optional[domain.Account]:
        """Load an account by ID, with the requested ``projection``."""
        key = _as_key(account_id)
        if key is None:
            return None
        with transaction() as session:
            db_account = session.get(DBAccount, key)
            if db_account is None:
                return None
            return _to_domain(db_account, projection)

    @translate_errors
    def find_by_username(self, username: str) -> Optional[domain.Account]:
        """Load the public projection of an account by username."""
        with transaction() as session:
            db_account = session.query(DBAccount) \
                .filter(DBAccount.username == username.strip().lower()) \
                .first()
            if db_account is None:
                return None
            return _to_domain(db_account, Projection.PUBLIC)

    @translate_errors
    def username_exists(self, username: str) -> bool:
        """Determine whether an account with ``username`` exists."""
        with transaction() as session:
            return session.query(DBAccount.account_id) \
                .filter(DBAccount.username == username.strip().lower()) \
                .first() is not None

    @translate_errors
    def email_exists(self, email: str) -> bool:
        """Determine whether an account with ``email`` exists."""
        with transaction() as session:
            return session.query(DBAccount.account_id) \
                .filter(DBAccount.email == email.strip().lower()) \
                .first() is not None

    @translate_errors
    def create_account(self, account: domain.Account) -> domain.Account:
        """
        Persist a new account.

        ``account.password_hash`` must already be set. Username and e-mail
        are stored lower-cased.

        Raises
        ------
        :class:`.Conflict`
            The username or e-mail address is already taken.

        """
        if not account.password_hash:
            raise ValueError('Credential hash is required')
        with transaction() as session:
            db_account = DBAccount(
                username=account.username.strip().lower(),
                email=account.email.strip().lower(),
                full_name=account.full_name.strip(),
                avatar_url=account.avatar_url or '',
                cover_image_url=account.cover_image_url or '',
                password_hash=account.password_hash,
                refresh_token=None
            )
            session.add(db_account)
            session.commit()
            logger.debug('Created account %s', db_account.account_id)
            return _to_domain(db_account, Projection.PUBLIC)

    @translate_errors
    def update_session_token(self, account_id: str, token: Optional[str],
                             expected: Any = _UNCONDITIONAL) -> bool:
        """
        Overwrite the stored refresh token, and nothing else.

        Parameters
        ----------
        account_id : str
        token : str or None
            The new refresh token; ``None`` clears the session.
        expected : str or None
            If passed, the write only happens if the stored value is still
            ``expected`` (compare-and-swap). Use this when rotating, so that
            of two concurrent rotations of the same token only one wins.

        Returns
        -------
        bool
            Whether a row was updated.

        """
        key = _as_key(account_id)
        if key is None:
            return False
        with transaction() as session:
            query = session.query(DBAccount) \
                .filter(DBAccount.account_id == key)
            if expected is not _UNCONDITIONAL:
                if expected is None:
                    query = query.filter(DBAccount.refresh_token.is_(None))
                else:
                    query = query.filter(DBAccount.refresh_token == expected)
            count = query.update({DBAccount.refresh_token: token},
                                 synchronize_session=False)
            session.commit()
        return bool(count)

    @translate_errors
    def update_credential(self, account_id: str, credential_hash: str) -> bool:
        """Overwrite the stored credential hash, and nothing else."""
        if not credential_hash:
            raise ValueError('Credential hash is required')
        key = _as_key(account_id)
        if key is None:
            return False
        with transaction() as session:
            count = session.query(DBAccount) \
                .filter(DBAccount.account_id == key) \
                .update({DBAccount.password_hash: credential_hash},
                        synchronize_session=False)
            session.commit()
        return bool(count)

    @translate_errors
    def update_details(self, account_id: str,
                       full_name: Optional[str] = None,
                       email: Optional[str] = None) \
            -> Optional[domain.Account]:
        """
        Update profile fields of an account.

        Returns the public projection of the updated account, or ``None`` if
        there is no such account.

        Raises
        ------
        :class:`.Conflict`
            The new e-mail address belongs to another account.

        """
        key = _as_key(account_id)
        if key is None:
            return None
        with transaction() as session:
            db_account = session.get(DBAccount, key)
            if db_account is None:
                return None
            if full_name is not None:
                db_account.full_name = full_name.strip()
            if email is not None:
                db_account.email = email.strip().lower()
            session.add(db_account)
            session.commit()
            return _to_domain(db_account, Projection.PUBLIC)
