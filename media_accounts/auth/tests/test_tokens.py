"""Tests for :mod:`media_accounts.auth.tokens`."""

from unittest import TestCase
from datetime import datetime, timedelta

import jwt
from pytz import UTC
from hypothesis import given, settings
from hypothesis import strategies as st

from .. import tokens
from ..settings import AuthSettings
from ... import domain, exceptions


class FrozenClock(object):
    """A clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class TestTokenSigner(TestCase):
    """Issue and verify tokens of both classes."""

    def setUp(self):
        """Create a signer with a controllable clock."""
        self.settings = AuthSettings(access_secret='accesssecret',
                                     refresh_secret='refreshsecret',
                                     access_ttl=60, refresh_ttl=600)
        self.clock = FrozenClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC))
        self.signer = tokens.TokenSigner(self.settings, clock=self.clock)

    @given(st.integers(min_value=1, max_value=2 ** 31),
           st.sampled_from(domain.TokenClass.ALL))
    @settings(max_examples=50)
    def test_issue_then_verify(self, account_id, token_class):
        """A freshly issued token verifies as its own class."""
        issued = self.signer.issue(str(account_id), token_class)
        claims = self.signer.verify(issued.token, token_class)
        self.assertEqual(claims.account_id, str(account_id))
        self.assertEqual(claims.token_class, token_class)
        self.assertEqual(claims.expires_at, issued.expires_at)

    def test_lifetimes(self):
        """Each class gets its own lifetime."""
        access = self.signer.issue('1', domain.TokenClass.ACCESS)
        refresh = self.signer.issue('1', domain.TokenClass.REFRESH)
        self.assertEqual(access.ttl, 60)
        self.assertEqual(refresh.ttl, 600)
        self.assertEqual(access.expires_at - self.clock.now,
                         timedelta(seconds=60))
        self.assertEqual(refresh.expires_at - self.clock.now,
                         timedelta(seconds=600))

    def test_tokens_are_unique(self):
        """Two tokens issued in the same second still differ."""
        first = self.signer.issue('1', domain.TokenClass.REFRESH)
        second = self.signer.issue('1', domain.TokenClass.REFRESH)
        self.assertNotEqual(first.token, second.token)

    def test_expiry_boundary(self):
        """A token is valid up to and including its expiry instant."""
        issued = self.signer.issue('1', domain.TokenClass.ACCESS)
        self.clock.advance(60)
        self.assertEqual(self.clock.now, issued.expires_at)
        self.signer.verify(issued.token, domain.TokenClass.ACCESS)

        self.clock.advance(1)
        with self.assertRaises(exceptions.Expired):
            self.signer.verify(issued.token, domain.TokenClass.ACCESS)

    def test_expiry_with_fractional_issue_time(self):
        """A token issued mid-second lasts at least its full lifetime."""
        self.clock.now = datetime(2024, 5, 1, 12, 0, 0, 900000, tzinfo=UTC)
        issued = self.signer.issue('1', domain.TokenClass.ACCESS)
        self.assertGreaterEqual(issued.expires_at - self.clock.now,
                                timedelta(seconds=60))

        self.clock.advance(59.5)
        self.signer.verify(issued.token, domain.TokenClass.ACCESS)
        self.clock.advance(0.5)
        self.signer.verify(issued.token, domain.TokenClass.ACCESS)

        self.clock.advance(1.5)
        with self.assertRaises(exceptions.Expired):
            self.signer.verify(issued.token, domain.TokenClass.ACCESS)

    def test_access_token_as_refresh(self):
        """An access token is never accepted as a refresh token."""
        issued = self.signer.issue('1', domain.TokenClass.ACCESS)
        with self.assertRaises(exceptions.InvalidToken):
            self.signer.verify(issued.token, domain.TokenClass.REFRESH)

    def test_refresh_token_as_access(self):
        """A refresh token is never accepted as an access token."""
        issued = self.signer.issue('1', domain.TokenClass.REFRESH)
        with self.assertRaises(exceptions.InvalidToken):
            self.signer.verify(issued.token, domain.TokenClass.ACCESS)

    def test_class_claim_is_checked(self):
        """Even with a shared secret, the class claim must match."""
        shared = tokens.TokenSigner(
            self.settings._replace(refresh_secret='accesssecret'),
            clock=self.clock
        )
        issued = shared.issue('1', domain.TokenClass.ACCESS)
        with self.assertRaises(exceptions.MalformedToken):
            shared.verify(issued.token, domain.TokenClass.REFRESH)

    def test_forged_signature(self):
        """A token signed with another secret does not verify."""
        payload = {'sub': '1', 'iat': tokens.epoch(self.clock.now),
                   'exp': tokens.epoch(self.clock.now) + 60,
                   'cls': domain.TokenClass.ACCESS, 'jti': 'abc'}
        forged = jwt.encode(payload, 'notthesecret', algorithm='HS256')
        with self.assertRaises(exceptions.InvalidSignature):
            self.signer.verify(forged, domain.TokenClass.ACCESS)

    def test_missing_claims(self):
        """A correctly signed token without the class claim is refused."""
        payload = {'sub': '1', 'iat': tokens.epoch(self.clock.now),
                   'exp': tokens.epoch(self.clock.now) + 60}
        token = jwt.encode(payload, 'accesssecret', algorithm='HS256')
        with self.assertRaises(exceptions.MalformedToken):
            self.signer.verify(token, domain.TokenClass.ACCESS)

    def test_garbage(self):
        """Things that aren't JWTs are malformed."""
        for garbage in ('', 'foo', 'a.b.c', None):
            with self.assertRaises(exceptions.InvalidToken):
                self.signer.verify(garbage, domain.TokenClass.ACCESS)

    def test_unknown_class(self):
        """There are only two token classes."""
        with self.assertRaises(ValueError):
            self.signer.issue('1', 'session')
        with self.assertRaises(ValueError):
            self.signer.verify('foo', 'session')
