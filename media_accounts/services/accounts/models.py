"""SQLAlchemy models for account persistence."""

from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, \
    UniqueConstraint, Index
from pytz import UTC

db: SQLAlchemy = SQLAlchemy()


def _now() -> datetime:
    return datetime.now(tz=UTC)


class DBAccount(db.Model):  # type: ignore
    """Persistence for :class:`domain.Account`."""

    __tablename__ = 'accounts'

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    avatar_url = Column(String(1024), nullable=False, default='')
    cover_image_url = Column(String(1024), nullable=False, default='')
    password_hash = Column(String(255), nullable=False)
    refresh_token = Column(String(1024), nullable=True)
    created = Column(DateTime(timezone=True), default=_now)
    updated = Column(DateTime(timezone=True), default=_now, onupdate=_now)


class DBSubscription(db.Model):  # type: ignore
    """A subscriber following a channel; both are accounts."""

    __tablename__ = 'subscriptions'
    __table_args__ = (
        UniqueConstraint('subscriber_id', 'channel_id'),
    )

    subscription_id = Column(Integer, primary_key=True, autoincrement=True)
    subscriber_id = Column(ForeignKey('accounts.account_id'), nullable=False,
                           index=True)
    channel_id = Column(ForeignKey('accounts.account_id'), nullable=False,
                        index=True)
    created = Column(DateTime(timezone=True), default=_now)


class DBWatchEntry(db.Model):  # type: ignore
    """A video watched by an account."""

    __tablename__ = 'watch_history'
    __table_args__ = (
        Index('ix_watch_history_account_watched', 'account_id', 'watched'),
    )

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(ForeignKey('accounts.account_id'), nullable=False)
    video_id = Column(String(64), nullable=False)
    watched = Column(DateTime(timezone=True), default=_now)
