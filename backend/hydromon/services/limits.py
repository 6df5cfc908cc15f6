"""Input bounds shared by the timeseries and log queries."""
from datetime import datetime, timezone
from typing import Optional, Tuple

from hydromon.errors import AccessError, ErrorKind

MAX_LIMIT = 100


def check_limit(limit: int, maximum: int = MAX_LIMIT) -> int:
    """Reject out-of-range page sizes instead of clamping them."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise AccessError(ErrorKind.VALIDATION_FAILED, "limit must be an integer")
    if limit < 1 or limit > maximum:
        raise AccessError(ErrorKind.VALIDATION_FAILED, f"limit must be between 1 and {maximum}")
    return limit


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def check_range(
    from_ts: Optional[datetime], to_ts: Optional[datetime]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    from_ts = _utc(from_ts) if from_ts is not None else None
    to_ts = _utc(to_ts) if to_ts is not None else None
    if from_ts is not None and to_ts is not None and from_ts > to_ts:
        raise AccessError(
            ErrorKind.VALIDATION_FAILED,
            "Invalid range: 'from' must not be after 'to'",
            detail={"reason": "INVALID_RANGE"},
        )
    return from_ts, to_ts
