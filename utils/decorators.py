from __future__ import annotations
from functools import wraps
import hmac
import logging

from flask import current_app, request

from services.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

_open_access_warned = False


def admin_required(fn):
    """
    Guard catalog mutations with the configured ADMIN_TOKEN.

    The request must carry ``Authorization: Bearer <ADMIN_TOKEN>``. When no
    token is configured the endpoint stays open and a warning is logged once.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        global _open_access_warned
        expected = current_app.config.get("ADMIN_TOKEN")
        if not expected:
            if not _open_access_warned:
                logger.warning("ADMIN_TOKEN is not set; catalog mutations are unauthenticated")
                _open_access_warned = True
            return fn(*args, **kwargs)

        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            raise AuthorizationError("Missing or invalid Authorization header")
        token = auth.split(" ", 1)[1].strip()
        if not hmac.compare_digest(token.encode(), expected.encode()):
            raise AuthorizationError("Invalid admin token")
        return fn(*args, **kwargs)

    return wrapper
