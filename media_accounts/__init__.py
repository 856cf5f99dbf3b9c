"""
User-account backend for the media-sharing application.

This package provides registration, credential verification, session
issuance and the read-only social-graph queries that depend on an
authenticated identity. The heart of it is :mod:`media_accounts.auth`, which
houses the password hasher, the access/refresh token signer, the session
manager (login, refresh rotation, logout) and the authentication gate that
every protected route depends on.

Quick start
-----------

.. code-block:: python

   from media_accounts.factory import create_web_app

   app = create_web_app()
   app.run()

Protected routes are decorated with
:func:`media_accounts.auth.decorators.authenticated`; the resolved
:class:`.domain.Identity` is then available as ``flask.request.auth``.
"""

from .domain import Account, Identity, TokenClass, TokenClaims, \
    IssuedToken, SessionGrant, ChannelProfile, WatchEntry
