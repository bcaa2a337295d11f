"""
Security utilities for the administrative password check.
"""

import hmac
import logging
from typing import Optional

from app.core.errors import AuthorizationError

logger = logging.getLogger(__name__)


def verify_admin_password(candidate: Optional[str], expected: str) -> None:
    """
    Raise AuthorizationError unless candidate matches the admin password.

    Uses a constant-time comparison so response timing does not leak
    how much of the password matched.
    """
    if not candidate or not expected:
        logger.warning("Admin action rejected: empty password")
        raise AuthorizationError("Incorrect password")

    if not hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Admin action rejected: incorrect password")
        raise AuthorizationError("Incorrect password")

