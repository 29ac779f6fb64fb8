"""
ID generation utilities & it provides:
- Request IDs for log correlation
- Time-derived plan IDs for backfill

The main purpose:
Consistent identifier creation across system.
"""

import uuid
from datetime import datetime


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def timestamp_id(prefix: str, at: datetime) -> str:
    # epoch millis, e.g. plan-1718000000000
    return f"{prefix}-{int(at.timestamp() * 1000)}"
