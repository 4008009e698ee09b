"""
auth.py
- Validates the bearer token presented to the HTTP trigger against the configured secret.
"""

import hmac

from conductor.core.errors import Unauthorized


def is_authorized(presented, configured):
    if not presented or not configured:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), configured.encode("utf-8"))


def check_token(presented, configured):
    """
    Raise Unauthorized unless `presented` exactly equals `configured`.
    A missing token is treated as a mismatch.
    """
    if not is_authorized(presented, configured):
        raise Unauthorized()
