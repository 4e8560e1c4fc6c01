from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: int
    employee_id: int
    title: str
    message: str
    is_read: bool
    created_at: datetime
    link: Optional[str] = None
