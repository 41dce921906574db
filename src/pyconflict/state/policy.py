"""Result acceptance policy.

A completed read is applied only when it was issued for the request the
consumer is currently waiting on. Anything else is a stale result and is
dropped silently.
"""

from __future__ import annotations

from typing import Any


def is_stale(fetched_for: Any, latest: Any) -> bool:
    """Whether a result for *fetched_for* has been superseded by *latest*."""
    return fetched_for != latest


def should_apply_result(*, fetched_for: Any, latest: Any, closed: bool) -> bool:
    """Decide whether a completed read may update its consumer.

    Policy:
    - never after the consumer was closed (unmounted);
    - only when the request still matches the latest scheduled one.
    """
    if closed:
        return False
    return not is_stale(fetched_for, latest)
