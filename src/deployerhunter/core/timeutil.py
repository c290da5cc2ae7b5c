"""Epoch-millisecond helpers shared by the pipeline, cache and UI."""

import time


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)
