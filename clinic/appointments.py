"""
appointments.py
===============
AppointmentBook: books (doctor, time slot) pairs with conflict detection
and keeps the follow-up appointment log.

Booking line format:   ``Patient: <name>, Doctor: <doctor>, Time: <slot>``
Follow-up line format: ``Patient: <name> - Follow-up on: <slot>``
"""

import re
import logging
from typing import Iterator, List, Optional

from .errors import Conflict
from .models import Doctor, FollowUpSlot, TimeSlot, parse_option
from .schemas import Booking, Patient, build
from .storage import append_line, iter_lines

logger = logging.getLogger(__name__)

BOOKING_RE = re.compile(r"^Patient: (?P<patient>.*), Doctor: (?P<doctor>.*), Time: (?P<time>.*)$")


def parse_booking(line: str) -> Optional[Booking]:
    match = BOOKING_RE.match(line)
    if not match:
        return None
    try:
        return Booking(patient_name=match["patient"], doctor=match["doctor"], time_slot=match["time"])
    except ValueError:
        return None


class AppointmentBook:
    """
    Append-only booking log. Every call re-reads the file, so the log on disk
    is the only source of truth.
    """

    def __init__(self, path, follow_ups_path):
        self.path = path
        self.follow_ups_path = follow_ups_path

    # -----------------------------------------------------------------------
    # BOOKINGS
    # -----------------------------------------------------------------------

    def bookings(self) -> Iterator[Booking]:
        """Parsed bookings in file order; unparseable lines are skipped."""
        for line in iter_lines(self.path):
            booking = parse_booking(line)
            if booking is not None:
                yield booking

    def is_available(self, doctor, time_slot) -> bool:
        """Linear scan of the whole log for the same (doctor, slot) pair."""
        doctor = parse_option(Doctor, doctor)
        time_slot = parse_option(TimeSlot, time_slot)
        for booking in self.bookings():
            if booking.doctor == doctor.value and booking.time_slot == time_slot.value:
                return False
        return True

    def book(self, patient_name: str, doctor, time_slot) -> Booking:
        """
        Reserve a slot for the patient.

        Raises InvalidChoice when doctor or time slot is not on the fixed
        lists, and Conflict (without writing anything) when the pair is
        already booked.
        """
        doctor = parse_option(Doctor, doctor)
        time_slot = parse_option(TimeSlot, time_slot)
        booking = build(Booking, patient_name=patient_name, doctor=doctor.value, time_slot=time_slot.value)

        if not self.is_available(doctor, time_slot):
            logger.info(f"Slot {doctor.value} at {time_slot.value} already booked")
            raise Conflict("This slot is already booked. Please choose another time.")

        append_line(self.path, booking.to_line())
        logger.info(f"Booked {booking.patient_name} with {doctor.value} at {time_slot.value}")
        return booking

    def list_all(self) -> Iterator[str]:
        """Booking lines in insertion order. Each call starts from the top of the file."""
        return iter_lines(self.path)

    def list_sorted(self) -> List[str]:
        """
        Booking lines sorted case-insensitively on the whole line.
        Lines start with "Patient:", so this effectively orders by patient name.
        """
        return sorted(self.list_all(), key=str.lower)

    # -----------------------------------------------------------------------
    # FOLLOW-UPS
    # -----------------------------------------------------------------------

    def schedule_follow_up(self, patient: Patient, slot) -> FollowUpSlot:
        slot = parse_option(FollowUpSlot, slot)
        append_line(self.follow_ups_path, f"Patient: {patient.name} - Follow-up on: {slot.value}")
        patient.follow_up = True
        logger.info(f"Follow-up for {patient.name} on {slot.value}")
        return slot

    def clear_follow_up(self, patient: Patient):
        patient.follow_up = False

    def follow_ups(self) -> Iterator[str]:
        return iter_lines(self.follow_ups_path)
