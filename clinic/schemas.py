"""
schemas.py
==========
Pydantic models for every record the clinic keeps, plus the helper that
turns pydantic's validation failures into the clinic's ValidationError.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import PaymentMethod

BLOOD_PRESSURE_RE = re.compile(r"^(\d+)/(\d+)$")
CARD_NUMBER_RE = re.compile(r"^\d{12}$")
CVV_RE = re.compile(r"^\d{3}$")
EXPIRY_RE = re.compile(r"^\d{2}/(\d{2})$")

MIN_TEMPERATURE = 36
MAX_TEMPERATURE = 99
MIN_EXPIRY_YEAR = 24


def build(model_cls, **fields):
    """
    Construct model_cls, re-raising pydantic's error as a clinic ValidationError.
    The reason is the first error's message.
    """
    try:
        return model_cls(**fields)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first.get("loc", ()))
        message = first.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        reason = f"{field}: {message}" if field else message
        raise ValidationError(reason, field=field or None) from e


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    # Every record file holds one record per line
    if "\n" in value or "\r" in value:
        raise ValueError("must be a single line")
    return value


# ---------------------------------------------------------------------------
# PATIENTS
# ---------------------------------------------------------------------------

class Patient(BaseModel):
    """A registered patient. Identity is the name, compared case-insensitively."""
    name: str
    age: int
    nationality: str
    address: str
    medical_history: List[str] = Field(default_factory=list)
    follow_up: bool = False

    @field_validator("name", "nationality", "address")
    @classmethod
    def check_text(cls, value: str) -> str:
        value = _required_text(value)
        # Stored in a comma-delimited file
        if "," in value:
            raise ValueError("must not contain commas")
        return value

    @field_validator("age")
    @classmethod
    def check_age(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("age must be a positive number")
        return value

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.strip().lower()

    def add_history(self, diagnosis: str):
        self.medical_history.append(diagnosis)

    def sorted_history(self) -> List[str]:
        """Medical history in lexicographic order, whatever the insertion order."""
        return sorted(self.medical_history)

    def as_tuple(self) -> tuple:
        return (self.name, self.age, self.nationality, self.address)


# ---------------------------------------------------------------------------
# DIAGNOSIS
# ---------------------------------------------------------------------------

class DiagnosisRule(BaseModel):
    """Static symptom-to-treatment entry."""
    model_config = ConfigDict(frozen=True)

    symptom: str
    description: str
    prescription: str
    dosage: str


class CustomRule(BaseModel):
    """Symptom/disease pair added by a doctor at runtime."""
    symptoms: str
    disease: str
    prescription: str

    @field_validator("symptoms", "disease", "prescription")
    @classmethod
    def check_text(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("symptoms")
    @classmethod
    def lower_symptoms(cls, value: str) -> str:
        return value.lower()

    def to_line(self) -> str:
        return f"{self.symptoms} : {self.disease} : {self.prescription}"


class Consultation(BaseModel):
    """Outcome of a doctor visit, echoed back for receipts."""
    patient_name: str
    rule: DiagnosisRule
    case_count: int

    @property
    def diagnosis(self) -> str:
        return self.rule.description

    @property
    def prescription(self) -> str:
        return self.rule.prescription


# ---------------------------------------------------------------------------
# APPOINTMENTS
# ---------------------------------------------------------------------------

class Booking(BaseModel):
    """One booked appointment slot."""
    patient_name: str
    doctor: str
    time_slot: str

    @field_validator("patient_name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _required_text(value)

    def to_line(self) -> str:
        return f"Patient: {self.patient_name}, Doctor: {self.doctor}, Time: {self.time_slot}"


# ---------------------------------------------------------------------------
# CLINICAL LOGS
# ---------------------------------------------------------------------------

class VitalsReading(BaseModel):
    """Temperature and blood pressure taken by a nurse."""
    patient_name: str
    temperature: float
    blood_pressure: str

    @field_validator("patient_name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("temperature")
    @classmethod
    def check_temperature(cls, value: float) -> float:
        if value < MIN_TEMPERATURE or value > MAX_TEMPERATURE:
            raise ValueError(f"Temperature must be between {MIN_TEMPERATURE}°C and {MAX_TEMPERATURE}°C.")
        return value

    @field_validator("blood_pressure")
    @classmethod
    def check_blood_pressure(cls, value: str) -> str:
        value = value.strip()
        match = BLOOD_PRESSURE_RE.match(value)
        if not match:
            raise ValueError("Blood pressure must be in the format systolic/diastolic (e.g. 120/80).")
        systolic, diastolic = int(match.group(1)), int(match.group(2))
        if not (90 <= systolic <= 120 and 60 <= diastolic <= 80):
            raise ValueError("Blood pressure must be in the range 90/60 to 120/80.")
        return value

    def to_line(self) -> str:
        return (f"Patient: {self.patient_name} - Temperature: {self.temperature}°C, "
                f"Blood Pressure: {self.blood_pressure}")


class PrescriptionRecord(BaseModel):
    """A prescription handed to the pharmacy."""
    patient_name: str
    prescription: str

    @field_validator("patient_name", "prescription")
    @classmethod
    def check_text(cls, value: str) -> str:
        return _required_text(value)

    def to_line(self) -> str:
        return f"Patient: {self.patient_name}, Prescription: {self.prescription}"


class CardDetails(BaseModel):
    """Card data checked before a card payment is accepted. Never persisted."""
    card_number: str
    cvv: str
    expiry: str

    @field_validator("card_number")
    @classmethod
    def check_card_number(cls, value: str) -> str:
        if not CARD_NUMBER_RE.match(value):
            raise ValueError("Invalid card number. It must be exactly 12 digits.")
        return value

    @field_validator("cvv")
    @classmethod
    def check_cvv(cls, value: str) -> str:
        if not CVV_RE.match(value):
            raise ValueError("Invalid CVV. It must be exactly 3 digits.")
        return value

    @field_validator("expiry")
    @classmethod
    def check_expiry(cls, value: str) -> str:
        match = EXPIRY_RE.match(value)
        if not match:
            raise ValueError("Invalid expiry date format. It must be in the format MM/YY.")
        if int(match.group(1)) < MIN_EXPIRY_YEAR:
            raise ValueError(f"Invalid expiry year. The year must be {MIN_EXPIRY_YEAR} or later.")
        return value


class PaymentRecord(BaseModel):
    """A settled bill."""
    patient_name: str
    method: PaymentMethod
    amount: float = Field(gt=0)
    change: Optional[float] = None

    @field_validator("patient_name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _required_text(value)

    def to_line(self) -> str:
        line = f"Patient: {self.patient_name}, Payment Method: {self.method.value}, Amount: {self.amount} euros"
        if self.change is not None:
            line += f", Change: {self.change} euros"
        return line
