"""
Exceptions raised by the authentication and session subsystem.

Every exception carries a ``kind``, which is what crosses the response
boundary. The specific sub-classes of :class:`Unauthorized` exist so that
callers (and logs) can tell token failures apart; clients never can.
"""


class AccountsError(RuntimeError):
    """Base class for errors that are reported to the client."""

    kind = 'InternalFailure'


class ValidationError(AccountsError):
    """Input is missing or malformed."""

    kind = 'ValidationError'

    def __init__(self, message: str, fields: dict = None) -> None:
        super(ValidationError, self).__init__(message)
        self.fields = fields or {}


class AccountNotFound(AccountsError):
    """No account matches the supplied identifier."""

    kind = 'AccountNotFound'


class InvalidCredential(AccountsError):
    """The supplied password does not match the stored credential."""

    kind = 'InvalidCredential'


class Conflict(AccountsError):
    """Username or e-mail address is already taken."""

    kind = 'Conflict'


class InternalFailure(AccountsError):
    """The store or hashing backend failed."""

    kind = 'InternalFailure'


class Unauthorized(AccountsError):
    """Missing, invalid, expired or reused token."""

    kind = 'Unauthorized'


class MissingToken(Unauthorized):
    """No token was presented with the request."""


class InvalidToken(Unauthorized):
    """Token could not be verified."""


class InvalidSignature(InvalidToken):
    """Token signature does not verify under the secret for its class."""


class Expired(InvalidToken):
    """Token verified, but its expiry has passed."""


class MalformedToken(InvalidToken):
    """Token cannot be decoded, lacks claims, or is of the wrong class."""


class StaleToken(Unauthorized):
    """Refresh token verified but is no longer the persisted value."""


class ConfigurationError(RuntimeError):
    """Auth settings are missing or unsafe."""
