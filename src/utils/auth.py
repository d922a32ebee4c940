"""
Authorization utilities for resolving the calling user.

Writes are only ever keyed by the caller's own Cognito sub; there is no
admin override and no cross-user write path.
"""

from .appsync_types import ResolverEvent
from .errors import AppError, ErrorCode


def require_caller(event: ResolverEvent) -> str:
    """
    Require an authenticated caller and return their subject.

    Args:
        event: Parsed resolver event

    Returns:
        Cognito sub of the caller

    Raises:
        AppError: UNAUTHORIZED if the event carries no identity or an empty subject
    """
    subject = event.caller_subject()
    if not subject:
        raise AppError(ErrorCode.UNAUTHORIZED, "Unauthorized: No user identity")
    return subject
