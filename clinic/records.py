"""
records.py
==========
Append-only clinical logs:
 - VitalsLog: nurse readings
 - PrescriptionLog: doctor and pharmacy prescriptions
 - PaymentLog: cashier payments (card or cash)
 - CustomRuleLog: symptom/disease pairs added by doctors

The custom rules are written for the record only; DiseaseCatalog never
reads them back.
"""

import logging
from typing import Iterator

from .errors import ValidationError
from .models import PaymentMethod
from .schemas import (
    CardDetails, CustomRule, PaymentRecord, PrescriptionRecord, VitalsReading, build,
)
from .storage import append_line, iter_lines

logger = logging.getLogger(__name__)


class RecordLog:
    """A text file that only ever grows by one line per record."""

    def __init__(self, path):
        self.path = path

    def entries(self) -> Iterator[str]:
        return iter_lines(self.path)

    def _append(self, record):
        append_line(self.path, record.to_line())
        logger.info(f"Saved to {self.path}: {record.to_line()}")
        return record


class VitalsLog(RecordLog):

    def record(self, patient_name: str, temperature: float, blood_pressure: str) -> VitalsReading:
        """Validate and save one reading. Raises ValidationError for out-of-range values."""
        reading = build(VitalsReading, patient_name=patient_name,
                        temperature=temperature, blood_pressure=blood_pressure)
        return self._append(reading)


class PrescriptionLog(RecordLog):

    def add(self, patient_name: str, prescription: str) -> PrescriptionRecord:
        record = build(PrescriptionRecord, patient_name=patient_name, prescription=prescription)
        return self._append(record)

    def record_diagnosis(self, patient_name: str, diagnosis: str, prescription: str) -> str:
        """Doctor's entry written after a consultation."""
        line = f"Patient: {patient_name} - Diagnosis: {diagnosis} - Prescribed medications: {prescription}"
        append_line(self.path, line)
        logger.info(f"Prescription saved for patient: {patient_name}")
        return line


class PaymentLog(RecordLog):

    def pay_by_card(self, patient_name: str, amount: float,
                    card_number: str, cvv: str, expiry: str) -> PaymentRecord:
        """Check the card details, then save the payment. Card data is not stored."""
        build(CardDetails, card_number=card_number, cvv=cvv, expiry=expiry)
        payment = build(PaymentRecord, patient_name=patient_name, method=PaymentMethod.card, amount=amount)
        return self._append(payment)

    def pay_by_cash(self, patient_name: str, amount: float, tendered: float) -> PaymentRecord:
        """Save a cash payment with its change. Raises ValidationError on insufficient cash."""
        if tendered < amount:
            raise ValidationError("Insufficient funds. Transaction cancelled.")
        payment = build(PaymentRecord, patient_name=patient_name, method=PaymentMethod.cash,
                        amount=amount, change=round(tendered - amount, 2))
        return self._append(payment)


class CustomRuleLog(RecordLog):

    def add(self, symptoms: str, disease: str, prescription: str) -> CustomRule:
        rule = build(CustomRule, symptoms=symptoms, disease=disease, prescription=prescription)
        return self._append(rule)
