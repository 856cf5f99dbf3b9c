"""Tests for :mod:`media_accounts.auth.passwords`."""

from unittest import TestCase
import string

from hypothesis import given, settings
from hypothesis import strategies as st

from .. import passwords

CHEAP = 'pbkdf2:sha256:1000'


class TestPasswordHasher(TestCase):
    """Hashing and verifying with werkzeug's pbkdf2."""

    def setUp(self):
        """Use a cheap work factor."""
        self.hasher = passwords.PasswordHasher(CHEAP, 8)

    @given(st.text(alphabet=string.printable, min_size=1))
    @settings(max_examples=25, deadline=None)
    def test_verify_after_hash(self, passw):
        """A password verifies against its own hash."""
        self.assertTrue(self.hasher.verify(passw, self.hasher.hash(passw)),
                        f"should work for password '{passw}'")

    @given(st.text(alphabet=string.printable, min_size=1),
           st.text(alphabet=st.characters(), min_size=1))
    @settings(max_examples=25, deadline=None)
    def test_verify_fuzz(self, passw, fuzzpw):
        """Only the password that was hashed verifies."""
        hashed = self.hasher.hash(passw)
        self.assertEqual(self.hasher.verify(fuzzpw, hashed), passw == fuzzpw)

    def test_salted(self):
        """Hashing the same password twice gives two different hashes."""
        first = self.hasher.hash('thepassword')
        second = self.hasher.hash('thepassword')
        self.assertNotEqual(first, second)
        self.assertTrue(self.hasher.verify('thepassword', first))
        self.assertTrue(self.hasher.verify('thepassword', second))

    def test_hash_is_not_plaintext(self):
        """The stored form does not contain the password."""
        self.assertNotIn('thepassword', self.hasher.hash('thepassword'))
        self.assertTrue(self.hasher.hash('x').startswith(CHEAP))

    def test_malformed_hash(self):
        """Garbage in the store is a mismatch, not an error."""
        for bad in ('', 'not-a-hash', 'md9$salt$abc', '$$'):
            self.assertFalse(self.hasher.verify('thepassword', bad))

    def test_missing_hash(self):
        """A missing hash never verifies."""
        self.assertFalse(self.hasher.verify('thepassword', None))

    def test_decoy(self):
        """The decoy check never succeeds."""
        self.assertFalse(self.hasher.verify_decoy('anything'))
        self.assertFalse(self.hasher.verify_decoy(''))
