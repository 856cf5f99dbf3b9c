"""Helpers for :mod:`media_accounts.controllers`."""

from typing import Tuple, Any, Optional, Dict
from http import HTTPStatus as status

import logging

from .. import exceptions

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

STATUS_FOR_KIND: Dict[str, int] = {
    exceptions.ValidationError.kind: status.BAD_REQUEST,
    exceptions.InvalidCredential.kind: status.UNAUTHORIZED,
    exceptions.Unauthorized.kind: status.UNAUTHORIZED,
    exceptions.AccountNotFound.kind: status.NOT_FOUND,
    exceptions.Conflict.kind: status.CONFLICT,
    exceptions.InternalFailure.kind: status.INTERNAL_SERVER_ERROR,
}


def success(data: Any, message: str, code: int = status.OK,
            headers: Optional[dict] = None) -> ResponseData:
    """Wrap ``data`` in the success envelope."""
    body = {
        'status_code': int(code),
        'data': data,
        'message': message,
        'success': True
    }
    return body, int(code), headers or {}


def failure(kind: str, message: str, code: Optional[int] = None,
            errors: Optional[dict] = None) -> ResponseData:
    """Build the failure envelope for an error ``kind``."""
    if code is None:
        code = STATUS_FOR_KIND.get(kind, status.INTERNAL_SERVER_ERROR)
    body = {
        'status_code': int(code),
        'message': message,
        'errors': {'kind': kind, 'fields': errors or {}},
        'success': False
    }
    return body, int(code), {}


def from_exception(exc: exceptions.AccountsError) -> ResponseData:
    """Translate an :class:`.AccountsError` into a failure envelope."""
    if isinstance(exc, exceptions.InternalFailure):
        # Never describe backend failures to the client.
        return failure(exc.kind, 'Something went wrong')
    fields = getattr(exc, 'fields', None)
    return failure(exc.kind, str(exc), errors=fields)


def invalid_form(form: Any, message: str = 'Invalid request') \
        -> ResponseData:
    """Report wtforms validation errors."""
    logger.debug('Form data is not valid: %s', form.errors)
    return failure(exceptions.ValidationError.kind, message,
                   errors=dict(form.errors))
