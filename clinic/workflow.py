"""
workflow.py
===========
Clinic: wires the record stores together and runs the visit workflows.
 - Registers and looks up patients
 - Runs a consultation (diagnosis, history, case count, prescription)
 - Books appointments and follow-ups
 - Dispenses medication from a prescription note
"""

import logging
from typing import List, Tuple

from .appointments import AppointmentBook
from .cases import CaseLedger
from .config import Settings
from .diagnosis import DEFAULT_DOSAGE, DiseaseCatalog
from .errors import NoMatch
from .records import CustomRuleLog, PaymentLog, PrescriptionLog, VitalsLog
from .schemas import Booking, Consultation, CustomRule, Patient
from .patients import PatientStore

logger = logging.getLogger(__name__)


class Clinic:
    """Every store the clinic needs, rooted in one data directory."""

    def __init__(self, settings: Settings, catalog: DiseaseCatalog = None):
        self.settings = settings
        self.patients = PatientStore(settings.patients_path)
        self.appointments = AppointmentBook(settings.appointments_path, settings.follow_ups_path)
        self.catalog = catalog or DiseaseCatalog()
        self.cases = CaseLedger(settings.cases_path)
        self.vitals = VitalsLog(settings.vitals_path)
        self.prescriptions = PrescriptionLog(settings.prescriptions_path)
        self.payments = PaymentLog(settings.payments_path)
        self.custom_rules = CustomRuleLog(settings.custom_rules_path)

    # -----------------------------------------------------------------------
    # PATIENTS
    # -----------------------------------------------------------------------

    def register_patient(self, name: str, age: int, nationality: str, address: str) -> Patient:
        return self.patients.create(name, age, nationality, address)

    def find_patient(self, name: str) -> Patient:
        return self.patients.find(name)

    # -----------------------------------------------------------------------
    # CONSULTATION
    # -----------------------------------------------------------------------

    def consult(self, patient: Patient, symptoms: str) -> Consultation:
        """
        Diagnose the patient from their symptom text.

        On a match the diagnosis goes into the patient's history, the
        disease's case count goes up by one and the prescription is saved.
        Raises NoMatch, with nothing recorded, when no rule matches.
        """
        rule = self.catalog.diagnose(symptoms)
        self.patients.record_diagnosis(patient, rule.description)
        count = self.cases.increment(rule.description)
        self.prescriptions.record_diagnosis(patient.name, rule.description, rule.prescription)
        logger.info(f"Consultation for {patient.name}: {rule.description} (case #{count})")
        return Consultation(patient_name=patient.name, rule=rule, case_count=count)

    def dispense(self, prescription_text: str) -> Tuple[str, str]:
        """
        Medication and instructions for a prescription note.
        Falls back to the note itself with the standard dosage when the
        note matches no rule.
        """
        try:
            rule = self.catalog.diagnose(prescription_text)
        except NoMatch:
            return prescription_text.strip(), DEFAULT_DOSAGE
        return rule.prescription, rule.dosage

    def add_custom_rule(self, symptoms: str, disease: str, prescription: str) -> CustomRule:
        """Save a doctor's symptom/disease pair and start counting its cases."""
        rule = self.custom_rules.add(symptoms, disease, prescription)
        self.cases.ensure_tracked(rule.disease)
        return rule

    def diagnosis_report(self) -> List[Tuple[str, int]]:
        return list(self.cases.report())

    # -----------------------------------------------------------------------
    # APPOINTMENTS
    # -----------------------------------------------------------------------

    def book(self, patient_name: str, doctor, time_slot) -> Booking:
        return self.appointments.book(patient_name, doctor, time_slot)

    def schedule_follow_up(self, patient: Patient, slot):
        return self.appointments.schedule_follow_up(patient, slot)

    def decline_follow_up(self, patient: Patient):
        self.appointments.clear_follow_up(patient)
