from datetime import datetime
from typing import Optional

import attrs


@attrs.define(frozen=True)
class EventSnapshot:
    """Event fields a booking needs at admission time"""

    id: str
    title: str = ''
    date: Optional[datetime] = None
    time: str = ''
    venue: str = ''
    location: str = ''
