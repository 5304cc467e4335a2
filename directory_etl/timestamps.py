import warnings
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

# pandas resolves these to the wall clock; a registration date never means "now"
RELATIVE_DATE_WORDS = frozenset({"now", "today", "yesterday", "tomorrow"})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Render as ISO-8601 UTC with millisecond precision, e.g. 2010-05-12T00:00:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_datetime(text: str) -> Optional[datetime]:
    """Parse a calendar date/time string; None when it is blank or not a date."""
    if not text or not text.strip():
        return None
    text = text.strip()
    if text.lower() in RELATIVE_DATE_WORDS:
        return None
    try:
        # Day-first registry dates (13/01/2010) make pandas warn once per row
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()
