"""UTC timestamps for stored documents and API responses."""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Fixed width, so string order in DynamoDB and in Python sorts is
    chronological order.
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
