"""
Utility helper functions for lrclib-fetcher
Duration formatting and parsing, text truncation and retry logic
"""

import functools
import re
import time
from typing import Optional, Tuple, Type, Union


def format_duration(seconds: Union[int, float]) -> str:
    """
    Render seconds as "m:ss", or "h:mm:ss" past an hour; negatives give "0:00"
    """
    if seconds is None or seconds < 0:
        return "0:00"

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_duration_string(duration_str: str) -> Optional[float]:
    """
    Read a track length typed by the user

    Accepts plain seconds ("215", "215.4") as well as "m:ss" and "h:mm:ss".

    Returns:
        Seconds, or None when the text is not a duration
    """
    if duration_str is None:
        return None

    text = str(duration_str).strip()
    if not text:
        return None

    if re.fullmatch(r'\d+(?:\.\d+)?', text):
        return float(text)

    if not re.fullmatch(r'\d+(?::\d{1,2}){1,2}', text):
        return None

    seconds = 0
    for part in text.split(':'):
        seconds = seconds * 60 + int(part)
    return float(seconds)


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Shorten text to at most max_length characters, suffix included
    """
    if len(text) <= max_length:
        return text

    keep = max(max_length - len(suffix), 0)
    return text[:keep] + suffix


def retry_on_failure(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,)
):
    """
    Retry the decorated call when it raises one of `exceptions`

    Only exceptions listed in `exceptions` trigger a retry; anything else
    propagates immediately. The last exception is re-raised once attempts
    are exhausted.

    Args:
        max_attempts: Maximum number of attempts (1 disables retrying)
        delay: Initial delay between attempts in seconds
        backoff: Factor applied to the delay after each failed attempt
        exceptions: Exception types that should be retried
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 1
            pause = delay

            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions:
                    if attempt >= max_attempts:
                        raise

                    time.sleep(pause)
                    pause *= backoff
                    attempt += 1

        return wrapper
    return decorator
