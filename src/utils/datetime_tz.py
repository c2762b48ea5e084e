from __future__ import annotations

from datetime import date, datetime, time, timezone


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo); convert aware ones."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_day_date(d: date | datetime | str | None, *, include_time: bool = False) -> str:
    """Return 'Fri 05 Oct' or with time 'Fri 05 Oct 14:30 UTC'.

    Accepts ISO date/datetime strings (with optional trailing 'Z').
    """
    if d is None:
        return ""
    if isinstance(d, str):
        s = d.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return str(d)
    elif isinstance(d, datetime):
        dt = d
    else:
        dt = datetime.combine(d, time(0, 0))

    dt = ensure_utc(dt)
    if include_time:
        return dt.strftime("%a %d %b %H:%M UTC")
    return dt.strftime("%a %d %b")
