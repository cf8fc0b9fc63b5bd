"""
Explicit per-request identity passed into services.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    """Who is acting and under which request id."""

    user_id: str
    username: str
    request_id: Optional[str] = None
