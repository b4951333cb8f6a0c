"""
staff.py
========
Clinic staff. Every role shares one small interface (name, duties, info);
the role tag selects the duty text.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel

from .errors import NotAuthorized
from .models import StaffRole

logger = logging.getLogger(__name__)

DUTIES = {
    StaffRole.receptionist: "is booking patient appointments and managing schedules.",
    StaffRole.doctor: "is performing doctor duties.",
    StaffRole.nurse: "is performing nursing duties.",
    StaffRole.pharmacist: "is dispensing medications and advising patients.",
    StaffRole.cashier: "is processing payments and handling transactions.",
}


class StaffMember(BaseModel):
    role: StaffRole
    name: str
    staff_id: Optional[int] = None

    def duties(self) -> str:
        return f"{self.name} {DUTIES[self.role]}"

    def display_info(self) -> List[str]:
        title = self.role.value.capitalize()
        lines = [f"{title}'s Name: {self.name}"]
        if self.staff_id is not None:
            lines.append(f"{title}'s ID: {self.staff_id}")
        return lines


# Default roster on duty
DEFAULT_STAFF = {
    StaffRole.receptionist: StaffMember(role=StaffRole.receptionist, name="Rachel"),
    StaffRole.doctor: StaffMember(role=StaffRole.doctor, name="Dr. John Smith", staff_id=101),
    StaffRole.nurse: StaffMember(role=StaffRole.nurse, name="Alice"),
    StaffRole.pharmacist: StaffMember(role=StaffRole.pharmacist, name="Claire"),
    StaffRole.cashier: StaffMember(role=StaffRole.cashier, name="John Doe"),
}


def authenticate(passwords: Dict[str, str], role: str, password: str) -> StaffRole:
    """
    Check a staff login against the configured passwords.
    Raises NotAuthorized for an unknown role or a wrong password.
    """
    try:
        staff_role = StaffRole(role.strip().lower())
    except ValueError:
        logger.warning(f"Login attempt for unknown role {role!r}")
        raise NotAuthorized("Invalid staff ID or password.")

    if passwords.get(staff_role.value) != password:
        logger.warning(f"Failed login for role {staff_role.value}")
        raise NotAuthorized("Invalid staff ID or password.")

    logger.info(f"Staff login: {staff_role.value}")
    return staff_role
