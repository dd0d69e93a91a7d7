"""Date and time-slot selection for appointment booking."""

import logging
from datetime import date, timedelta
from typing import List, Optional, Union

from healthwire.config import settings
from healthwire.services.api_gateway import ApiError
from healthwire.utils.timezone import format_day_label, today_local

logger = logging.getLogger(__name__)

SLOTS_FAILED_MESSAGE = "Failed to load available time slots"


class TimeSlotPicker:
    """Week-window day picker plus the free slots of the selected day.

    Selecting a day clears the selected time. Slots are only fetched once
    both a doctor and a day are known.
    """

    def __init__(self, gateway, doctor_id: Optional[Union[int, str]] = None,
                 start_date: Optional[date] = None, window_days: Optional[int] = None):
        self.gateway = gateway
        self.doctor_id = doctor_id
        self.current_date = start_date or today_local()
        self.window_days = window_days or settings.SLOT_WINDOW_DAYS

        self.selected_date: Optional[date] = None
        self.selected_time: Optional[str] = None
        self.available_slots: List[str] = []
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def date_range(self) -> List[date]:
        return [self.current_date + timedelta(days=i) for i in range(self.window_days)]

    @property
    def day_labels(self) -> List[str]:
        return [format_day_label(day) for day in self.date_range]

    def previous_week(self) -> None:
        self.current_date -= timedelta(days=7)

    def next_week(self) -> None:
        self.current_date += timedelta(days=7)

    def select_date(self, day: date) -> None:
        self.selected_date = day
        self.selected_time = None

    def select_time(self, time_slot: str) -> None:
        self.selected_time = time_slot

    def is_date_selected(self, day: date) -> bool:
        return self.selected_date is not None and self.selected_date == day

    def is_time_selected(self, time_slot: str) -> bool:
        return self.selected_time == time_slot

    async def load_slots(self) -> List[str]:
        """Fetch free slots for the selected doctor and day."""
        if not self.doctor_id or self.selected_date is None:
            return self.available_slots

        self.is_loading = True
        self.error = None
        try:
            self.available_slots = await self.gateway.get_available_slots(self.doctor_id, self.selected_date)
        except ApiError as e:
            logger.error(f"Error fetching available slots for doctor {self.doctor_id}: {e}")
            self.error = SLOTS_FAILED_MESSAGE
        finally:
            self.is_loading = False

        return self.available_slots
