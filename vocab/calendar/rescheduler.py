"""
Manual rescheduling from the calendar (drag-and-drop and removal).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Optional, Union

from vocab.calendar.types import OVERDUE_KEY
from vocab.schemas import VocabRecord

if TYPE_CHECKING:
    from vocab.service import VocabularyService

logger = logging.getLogger(__name__)


class CalendarRescheduler:
    """Translates calendar gestures into service commands."""

    def __init__(self, service: "VocabularyService"):
        self.service = service

    def move(
        self,
        record_id: str,
        from_key: Optional[Union[str, date]],
        to_day: date,
    ) -> Optional[VocabRecord]:
        """
        Drop a record on a day cell.

        Args:
            record_id: Dragged record
            from_key: Source cell (ISO day string, date, or "overdue")
            to_day: Target cell day

        Returns:
            Rescheduled record, or None when dropped on its own cell or unknown
        """
        if isinstance(from_key, date):
            from_key = from_key.isoformat()
        if from_key is not None and from_key != OVERDUE_KEY and from_key == to_day.isoformat():
            return None

        # Noon keeps the target inside the intended local day
        when = self.service.clock.noon_of(to_day)
        logger.debug("Calendar move %r: %s -> %s", record_id, from_key, to_day)
        return self.service.reschedule(record_id, when)

    def remove(self, record_id: str) -> Optional[VocabRecord]:
        """Take a record off the calendar without deleting it."""
        return self.service.remove_from_schedule(record_id)
