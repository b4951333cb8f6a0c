"""
config.py
=========
Runtime configuration for the Virtual Clinic.

Values come from environment variables (optionally loaded from a ``.env``
file) and are resolved into a ``Settings`` object holding the data directory
and the path of every record file.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from .schemas import build

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# DEFAULTS
# ---------------------------------------------------------------------------

DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_LEVEL = "WARNING"

# Password gate per staff role (not a security boundary)
DEFAULT_PASSWORDS = {
    "receptionist": "receptionist123",
    "doctor": "doctor123",
    "nurse": "nurse123",
    "pharmacist": "pharma123",
    "cashier": "cashier123",
}

PATIENTS_FILE = "patient_records.txt"
APPOINTMENTS_FILE = "appointments.txt"
FOLLOW_UPS_FILE = "followup_appointments.txt"
DISEASE_CASES_FILE = "disease_cases.txt"
SYMPTOMS_DISEASES_FILE = "symptoms_diseases.txt"
VITALS_FILE = "patient_vitals.txt"
PRESCRIPTIONS_FILE = "prescriptions.txt"
PAYMENTS_FILE = "payments.txt"


class Settings(BaseModel):
    """Resolved configuration for one clinic process."""
    data_dir: Path
    log_level: str = DEFAULT_LOG_LEVEL
    passwords: Dict[str, str] = dict(DEFAULT_PASSWORDS)

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        value = value.upper()
        # getLevelName maps known names to their numeric level
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown logging level {value!r}")
        return value

    @property
    def patients_path(self) -> Path:
        return self.data_dir / PATIENTS_FILE

    @property
    def appointments_path(self) -> Path:
        return self.data_dir / APPOINTMENTS_FILE

    @property
    def follow_ups_path(self) -> Path:
        return self.data_dir / FOLLOW_UPS_FILE

    @property
    def cases_path(self) -> Path:
        return self.data_dir / DISEASE_CASES_FILE

    @property
    def custom_rules_path(self) -> Path:
        return self.data_dir / SYMPTOMS_DISEASES_FILE

    @property
    def vitals_path(self) -> Path:
        return self.data_dir / VITALS_FILE

    @property
    def prescriptions_path(self) -> Path:
        return self.data_dir / PRESCRIPTIONS_FILE

    @property
    def payments_path(self) -> Path:
        return self.data_dir / PAYMENTS_FILE


def get_settings(data_dir: Optional[str] = None, log_level: Optional[str] = None) -> Settings:
    """
    Build settings from the environment.
    Explicit arguments (e.g. from the command line) win over env values.
    """
    load_dotenv()

    data_dir = data_dir or os.getenv("CLINIC_DATA_DIR", DEFAULT_DATA_DIR)
    log_level = (log_level or os.getenv("CLINIC_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()

    passwords = {
        role: os.getenv(f"CLINIC_{role.upper()}_PASSWORD", default)
        for role, default in DEFAULT_PASSWORDS.items()
    }

    # Create directory if it doesn't exist
    path = Path(data_dir)
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created data directory {path}")

    return build(Settings, data_dir=path, log_level=log_level, passwords=passwords)
