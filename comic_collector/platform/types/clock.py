"""
Clock used by the store services.

Services take a zero-argument callable returning an aware UTC datetime, so
tests can pin "now" without patching the datetime module.
"""

from collections.abc import Callable
from datetime import datetime, timezone


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
