"""
Protect Flask routes that require an authenticated identity.

.. code-block:: python

   from media_accounts.auth.decorators import authenticated


   @blueprint.route('/current-user', methods=['GET'])
   @authenticated
   def current_user():
       return jsonify(to_dict(request.auth))


If the gate did not attach an identity to the request, an
:class:`werkzeug.exceptions.Unauthorized` is raised before the route runs.
"""

from typing import Callable, Any
from functools import wraps

from flask import request
from werkzeug.exceptions import Unauthorized

import logging

logger = logging.getLogger(__name__)


def authenticated(func: Callable) -> Callable:
    """Require ``request.auth`` to hold an identity."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        identity = getattr(request, 'auth', None)
        if identity is None:
            logger.debug('No authenticated identity; aborting')
            raise Unauthorized('Unauthorized request')
        return func(*args, **kwargs)
    return wrapper
