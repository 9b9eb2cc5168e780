"""Clock formatting and timestamps for the match screens."""
import time


def fmt_mmss(seconds: int) -> str:
    """
    Render a match clock or playing time as minutes and seconds.

    Minutes are not wrapped into hours and anything below zero shows as
    ``00:00``.

    Example:
        >>> fmt_mmss(125)
        '02:05'
        >>> fmt_mmss(-5)
        '00:00'
    """
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def now_ts() -> float:
    """Epoch seconds, used for created_ts stamps."""
    return time.time()
