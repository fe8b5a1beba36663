"""
Process-wide throttling for outbound AI calls.
Set THROTTLE_DISABLED=1 to turn every pause off (tests).
"""

import os
import random
import threading
import time

_lock = threading.Lock()
_last_call: dict[str, float] = {}


def throttle_disabled() -> bool:
    return os.getenv("THROTTLE_DISABLED") == "1"


def throttle(key: str, min_seconds: float = 0.5, max_seconds: float = 1.0) -> None:
    """
    Wait until a random delay in [min_seconds, max_seconds] has passed
    since the previous call with the same key.
    """
    if throttle_disabled():
        return
    delay = random.uniform(min_seconds, max_seconds)
    with _lock:
        now = time.monotonic()
        wait_for = _last_call.get(key, 0.0) + delay - now
        if wait_for > 0:
            time.sleep(wait_for)
            now = time.monotonic()
        _last_call[key] = now


def backoff(key: str = "backoff", min_seconds: float = 30.0, max_seconds: float = 60.0) -> None:
    """Pause after a rate-limit response, then count it as the last call for key."""
    if throttle_disabled():
        return
    time.sleep(random.uniform(min_seconds, max_seconds))
    with _lock:
        _last_call[key] = time.monotonic()
