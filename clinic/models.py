"""
models.py
=========
Fixed option lists for the Virtual Clinic.
Contains enumerations for:
 - Doctor roster
 - Daily appointment time slots
 - Weekly follow-up slots
 - Staff roles
 - Payment methods
"""

import enum

from .errors import InvalidChoice

# ---------------------------------------------------------------------------
# ENUM DEFINITIONS
# ---------------------------------------------------------------------------


class Doctor(str, enum.Enum):
    """Doctors that can be booked."""
    john_smith = "Dr. John Smith"
    sarah_lee = "Dr. Sarah Lee"
    banini = "Dr. Banini"
    babu = "Dr. Babu"


class TimeSlot(str, enum.Enum):
    """Daily appointment times."""
    nine_am = "9:00 AM"
    eleven_am = "11:00 AM"
    one_pm = "1:00 PM"
    three_pm = "3:00 PM"
    five_pm = "5:00 PM"


class FollowUpSlot(str, enum.Enum):
    """Weekly follow-up appointment times offered after a consultation."""
    monday = "Monday, 9:00 AM"
    tuesday = "Tuesday, 11:00 AM"
    wednesday = "Wednesday, 1:00 PM"
    thursday = "Thursday, 3:00 PM"
    friday = "Friday, 5:00 PM"


class StaffRole(str, enum.Enum):
    """Staff roles that can log in."""
    receptionist = "receptionist"
    doctor = "doctor"
    nurse = "nurse"
    pharmacist = "pharmacist"
    cashier = "cashier"


class PaymentMethod(str, enum.Enum):
    """How a patient settles the bill."""
    card = "Card"
    cash = "Cash"


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

def parse_option(enum_cls, value):
    """
    Coerce a member or its label into a member of enum_cls.
    Raises InvalidChoice for anything else.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidChoice(f"Invalid choice: {value!r} is not a valid {enum_cls.__name__.lower()}.")


def choose(options, index: int):
    """
    Pick an option by its 1-based menu number.
    Raises InvalidChoice when the number is out of range.
    """
    options = list(options)
    if not isinstance(index, int) or index < 1 or index > len(options):
        raise InvalidChoice("Invalid choice. Returning to main menu.")
    return options[index - 1]
