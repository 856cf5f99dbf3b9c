"""
Request controllers for the accounts service.

Controllers take plain request data rather than the Flask request, and return
a ``(data, status_code, headers)`` tuple. They run inside an application
context, where :func:`.auth.current_auth` provides the session manager and
the account store. Routes turn the tuple into a response, setting any cookies
listed under ``data['cookies']``.
"""
