# pickbook/core/times.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Union

from pickbook.core.errors import ValidationError


def parse_instant(v: Union[str, datetime, None]) -> datetime:
    """ISO-8601 string ('Z' allowed) or datetime -> aware UTC datetime. Naive input is taken as UTC."""
    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, str) and v.strip():
        try:
            dt = datetime.fromisoformat(v.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"unparseable instant: {v!r}") from None
    else:
        raise ValidationError(f"missing instant: {v!r}")
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)
