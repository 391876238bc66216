from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Callable


def run_periodically(
    interval: timedelta,
    step: Callable[[], object],
    stop_event: threading.Event,
    *,
    immediate: bool = False,
) -> None:
    """Call `step` every `interval` until `stop_event` is set.

    Fixed rate: the next deadline is measured from the previous one, not from
    the end of `step`. Ticks missed because a step overran are dropped rather
    than run back to back.
    """

    interval_s = interval.total_seconds()
    if immediate:
        step()

    deadline = time.monotonic()
    while True:
        deadline += interval_s
        now = time.monotonic()
        if deadline < now:
            deadline = now
        if stop_event.wait(deadline - now):
            return
        step()
