from datetime import datetime
from re import compile as re_compile
from secrets import choice
from string import ascii_lowercase, digits
from time import perf_counter, time

CLOCK_TIME = re_compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_ID_ALPHABET = ascii_lowercase + digits


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def time_taken(start_time: float) -> str:
    minutes, seconds = divmod(perf_counter() - start_time, 60)
    return f"{int(minutes)}m {int(seconds)}s"


def local_id(prefix: str = "custom") -> str:
    """
    Generate an identifier for an entity that has not been persisted yet.

    Args:
        prefix: Leading label, e.g. ``custom`` for activities or ``tip``.

    Returns:
        ``{prefix}_{epoch millis}_{9 random base36 chars}``.
    """
    suffix = "".join(choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time() * 1000)}_{suffix}"


def is_local_id(value: str | None, prefix: str = "custom") -> bool:
    return bool(value) and str(value).startswith(f"{prefix}_")


def to_non_negative_int(value: object, default: int = 0) -> int:
    """
    Coerce form input to a non-negative integer.

    Missing or unparsable input yields ``default``; negative numbers yield 0.

    Examples:
    --------
    >>> to_non_negative_int("150000")
    150000
    >>> to_non_negative_int("abc")
    0
    >>> to_non_negative_int(-5)
    0
    >>> to_non_negative_int("n/a", default=500)
    500
    """
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(number, 0)


def is_clock_time(value: str | None) -> bool:
    return bool(value) and CLOCK_TIME.match(str(value).strip()) is not None
