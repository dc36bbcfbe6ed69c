# lambda_fleet_tool/timeutil.py
"""
Relative time formatting for last invocation display
"""
from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from dateutil.tz import tzutc


def from_epoch_millis(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=tzutc())


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_time_ago(timestamp_ms: int, now: Optional[datetime] = None) -> str:
    """
    Describe an epoch-millis timestamp relative to now ('3 days ago')

    Timestamps ahead of now (clock skew) read as 'less than a minute ago'.
    """
    now = now or datetime.now(tz=tzutc())
    then = from_epoch_millis(timestamp_ms)
    if then > now:
        then = now

    seconds = (now - then).total_seconds()
    if seconds < 60:
        return 'less than a minute ago'
    if seconds < 3600:
        return f"{_plural(int(seconds // 60), 'minute')} ago"
    if seconds < 86400:
        return f"about {_plural(int(seconds // 3600), 'hour')} ago"

    delta = relativedelta(now, then)
    if delta.years:
        return f"about {_plural(delta.years, 'year')} ago"
    if delta.months:
        return f"{_plural(delta.months, 'month')} ago"
    return f"{_plural(int(seconds // 86400), 'day')} ago"
