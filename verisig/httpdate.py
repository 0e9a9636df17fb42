"""
HTTP Date Handling

Formatting and strict parsing of IMF-fixdate values such as
``Mon, 02 Jan 2006 15:04:05 GMT``. Locale-independent.
"""

import re
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional

from .errors import MissingOrInvalidDate

_IMF_FIXDATE_RE = re.compile(
    r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun), \d{2} "
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"\d{4} \d{2}:\d{2}:\d{2} GMT$"
)


def format_http_date(when: Optional[datetime] = None) -> str:
    """
    Format a timestamp for the Date header.

    Args:
        when: Timestamp to format, defaults to now. Naive values are taken as UTC.

    Returns:
        IMF-fixdate string
    """
    if when is None:
        when = datetime.now(timezone.utc)
    elif when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    else:
        when = when.astimezone(timezone.utc)
    return format_datetime(when.replace(microsecond=0), usegmt=True)


def parse_http_date(value: Optional[str]) -> datetime:
    """
    Parse a Date header value.

    Args:
        value: Header value, may be None

    Returns:
        Timezone-aware UTC datetime

    Raises:
        MissingOrInvalidDate: If the value is absent or not an IMF-fixdate
    """
    if value is None or not value.strip():
        raise MissingOrInvalidDate("Request has no Date header")

    value = value.strip()
    if not _IMF_FIXDATE_RE.match(value):
        raise MissingOrInvalidDate(f"Date header is not a valid HTTP date: {value!r}")
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError) as e:
        raise MissingOrInvalidDate(f"Date header is not a valid HTTP date: {value!r}") from e
    return parsed.astimezone(timezone.utc)
