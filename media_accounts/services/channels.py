"""Read-only social-graph queries: channel profiles and watch history."""

from typing import List, Optional

from sqlalchemy import func

import logging

from .. import domain
from .accounts import AccountStore, transaction, translate_errors
from .accounts.models import DBSubscription, DBWatchEntry

logger = logging.getLogger(__name__)


class ChannelStore(object):
    """Aggregates subscriptions and watch history for authenticated views."""

    def __init__(self, accounts: Optional[AccountStore] = None) -> None:
        self.accounts = accounts or AccountStore()

    @translate_errors
    def get_channel_profile(self, username: str,
                            viewer_id: Optional[str] = None) \
            -> Optional[domain.ChannelProfile]:
        """
        Get the public profile of the channel owned by ``username``.

        Parameters
        ----------
        username : str
        viewer_id : str or None
            The authenticated account looking at the channel; used to work
            out :attr:`.domain.ChannelProfile.is_subscribed`.

        Returns
        -------
        :class:`.domain.ChannelProfile` or None
            ``None`` if there is no such channel.

        """
        account = self.accounts.find_by_username(username)
        if account is None:
            return None
        channel_id = int(account.account_id)
        with transaction() as session:
            count = func.count(DBSubscription.subscription_id)
            subscribers = session.query(count) \
                .filter(DBSubscription.channel_id == channel_id) \
                .scalar()
            subscribed_to = session.query(count) \
                .filter(DBSubscription.subscriber_id == channel_id) \
                .scalar()
            is_subscribed = False
            if viewer_id is not None and str(viewer_id).isdigit():
                is_subscribed = session.query(DBSubscription.subscription_id) \
                    .filter(DBSubscription.channel_id == channel_id) \
                    .filter(DBSubscription.subscriber_id == int(viewer_id)) \
                    .first() is not None
        return domain.ChannelProfile(
            identity=account.identity,
            subscribers_count=int(subscribers or 0),
            channels_subscribed_to_count=int(subscribed_to or 0),
            is_subscribed=is_subscribed
        )

    @translate_errors
    def get_watch_history(self, account_id: str,
                          limit: int = 100) -> List[domain.WatchEntry]:
        """Get the videos watched by an account, most recent first."""
        if not str(account_id).isdigit():
            return []
        with transaction() as session:
            rows = session.query(DBWatchEntry) \
                .filter(DBWatchEntry.account_id == int(account_id)) \
                .order_by(DBWatchEntry.watched.desc(),
                          DBWatchEntry.entry_id.desc()) \
                .limit(limit) \
                .all()
            return [domain.WatchEntry(video_id=row.video_id,
                                      watched_at=row.watched)
                    for row in rows]
