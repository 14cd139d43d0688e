from datetime import datetime, timezone

from sqlalchemy import DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Column type for every created_at/updated_at
TIMESTAMP = DateTime(timezone=True)
