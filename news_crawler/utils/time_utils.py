import time


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds (the content API's timestamp unit)."""
    return int(time.time() * 1000)
