"""Deadline policy for authorizations.

The verifier accepts an authorization while block.timestamp <= deadline, so a
deadline equal to the current time is still valid and anything earlier is
expired.
"""

import logging
import time
from typing import Optional

from ..errors import ExpiredDeadlineError

logger = logging.getLogger(__name__)

# Relative deadline bounds
MIN_DEADLINE_SECONDS = 60  # 1 minute
MAX_DEADLINE_SECONDS = 86400  # 24 hours


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else now


def is_expired(deadline: int, now: Optional[int] = None) -> bool:
    """True if the verifier would reject this deadline at time `now`."""
    return _now(now) > deadline


def check_deadline(deadline: int, now: Optional[int] = None) -> int:
    """Reject deadlines that are already in the past.

    Args:
        deadline: Unix timestamp in seconds
        now: Current time (defaults to the system clock)

    Returns:
        The deadline, unchanged

    Raises:
        ExpiredDeadlineError: If deadline < now
    """
    current = _now(now)
    if current > deadline:
        logger.warning(
            "Refusing to sign: deadline %d expired %ds ago", deadline, current - deadline
        )
        raise ExpiredDeadlineError(
            f"Deadline {deadline} is in the past (now: {current})"
        )
    return deadline


def deadline_from_now(seconds: int = 3600, now: Optional[int] = None) -> int:
    """Absolute deadline `seconds` from now.

    Raises:
        ValueError: If seconds is outside [MIN_DEADLINE_SECONDS, MAX_DEADLINE_SECONDS]
    """
    if seconds < MIN_DEADLINE_SECONDS:
        raise ValueError(
            f"Deadline too short: {seconds}s. Minimum: {MIN_DEADLINE_SECONDS}s"
        )
    if seconds > MAX_DEADLINE_SECONDS:
        raise ValueError(
            f"Deadline too long: {seconds}s. Maximum: {MAX_DEADLINE_SECONDS}s"
        )
    return _now(now) + seconds
