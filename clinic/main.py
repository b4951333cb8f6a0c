"""
main.py
=======
Console entry point for the Virtual Clinic.
It:
 - Loads configuration and sets up logging.
 - Builds the Clinic stores under the data directory.
 - Runs the interactive menu loop for patients and staff.

Every ClinicError raised by the core is printed and control goes back to
the menu; nothing here is fatal.
"""

import argparse
import logging
from typing import Callable, List, Optional

from .config import get_settings
from .errors import ClinicError, ValidationError
from .models import Doctor, FollowUpSlot, PaymentMethod, StaffRole, TimeSlot, choose
from .schemas import Patient
from .staff import DEFAULT_STAFF, authenticate
from .workflow import Clinic

logger = logging.getLogger(__name__)

VITALS_FIELDS = ("temperature", "blood_pressure")
LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class ConsoleApp:
    """
    Menu-driven front end. Reads with input_func and writes with output,
    so a scripted session can drive it in tests.
    """

    def __init__(self, clinic: Clinic, input_func: Callable[[str], str] = input,
                 output: Callable[[str], None] = print):
        self.clinic = clinic
        self._input = input_func
        self._output = output

    # -----------------------------------------------------------------------
    # PROMPT HELPERS
    # -----------------------------------------------------------------------

    def say(self, message: str = ""):
        self._output(message)

    def ask(self, prompt: str) -> str:
        return self._input(prompt + " ").strip()

    def ask_int(self, prompt: str) -> int:
        while True:
            raw = self.ask(prompt)
            try:
                return int(raw)
            except ValueError:
                self.say("Please enter a number.")

    def ask_float(self, prompt: str) -> float:
        while True:
            raw = self.ask(prompt)
            try:
                return float(raw)
            except ValueError:
                self.say("Please enter a number.")

    def pick(self, title: str, options: List[str]):
        self.say(title)
        for i, option in enumerate(options, start=1):
            self.say(f"{i}. {option}")
        return choose(options, self.ask_int(">"))

    def menu(self, title: str, entries: List[str]) -> int:
        self.say()
        self.say(f"--- {title} ---")
        for i, entry in enumerate(entries, start=1):
            self.say(f"{i}. {entry}")
        return self.ask_int(">")

    # -----------------------------------------------------------------------
    # MAIN LOOP
    # -----------------------------------------------------------------------

    def run(self):
        """Loop until the user exits or input runs out."""
        self.say("🏥 Welcome to the Virtual Clinic")
        try:
            while True:
                choice = self.menu("Main Menu", ["Patient", "Staff login", "Exit"])
                if choice == 3:
                    self.say("Goodbye!")
                    return
                self.dispatch(choice)
        except EOFError:
            self.say("Goodbye!")

    def dispatch(self, choice: int):
        handlers = {1: self.patient_menu, 2: self.staff_login}
        handler = handlers.get(choice)
        if handler is None:
            self.say("Invalid choice. Please try again.")
            return
        try:
            handler()
        except ClinicError as e:
            logger.info(f"{type(e).__name__}: {e.reason}")
            self.say(f"❌ {e.reason}")

    # -----------------------------------------------------------------------
    # PATIENT SIDE
    # -----------------------------------------------------------------------

    def patient_menu(self):
        choice = self.menu("Patient Menu", ["Book an appointment", "Visit the doctor", "Back"])
        if choice == 1:
            self.book_appointment()
        elif choice == 2:
            self.visit_doctor()

    def book_appointment(self):
        name = self.ask("Enter patient name:")
        doctor = self.pick("Choose a doctor:", [d.value for d in Doctor])
        slot = self.pick("Choose an appointment time:", [t.value for t in TimeSlot])
        self.clinic.book(name, doctor, slot)
        self.say("✅ Appointment booked successfully.")

    def register_patient(self) -> Patient:
        name = self.ask("Enter your name:")
        age = self.ask_int("Enter your age:")
        nationality = self.ask("Enter your nationality:")
        address = self.ask("Enter your address:")
        patient = self.clinic.register_patient(name, age, nationality, address)
        self.say(f"Patient record created for {patient.name}")
        return patient

    def visit_doctor(self):
        choice = self.menu("Visit the Doctor", ["New patient", "Existing patient"])
        if choice == 1:
            patient = self.register_patient()
        elif choice == 2:
            patient = self.clinic.find_patient(self.ask("Enter your name:"))
        else:
            self.say("Invalid choice. Returning to main menu.")
            return

        hint = ", ".join(self.clinic.catalog.symptoms())
        symptoms = self.ask(f"Doctor: Welcome {patient.name}. Please describe your symptoms ({hint}):")
        consultation = self.clinic.consult(patient, symptoms)
        self.say(f"Diagnosis: You have {consultation.diagnosis}")
        self.say(f"Prescribed: {consultation.prescription}")

        self.offer_follow_up(patient)
        self.dispense(patient.name, consultation.prescription)
        self.take_payment(patient.name)

    def offer_follow_up(self, patient: Patient):
        answer = self.ask("Would you like to schedule a follow-up appointment? (yes/no)")
        if answer.lower() != "yes":
            self.clinic.decline_follow_up(patient)
            self.say("No follow-up appointment scheduled.")
            return
        slot = self.pick("Please select a follow-up date and time:", [s.value for s in FollowUpSlot])
        self.clinic.schedule_follow_up(patient, slot)
        self.say(f"Follow-up appointment scheduled on: {slot}")

    def dispense(self, patient_name: str, prescription: str):
        medication, instructions = self.clinic.dispense(prescription)
        self.say()
        self.say("--- Medication Receipt ---")
        self.say(f"Patient Name: {patient_name}")
        self.say(f"Medicine: {medication}")
        self.say(f"Instructions: {instructions}")
        self.say("------ End of Receipt ------")

    def take_payment(self, patient_name: str):
        amount = self.ask_float("Enter the amount due (euros):")
        method = self.pick("Choose payment method:", [m.value for m in PaymentMethod])
        if method == PaymentMethod.card.value:
            payment = self.clinic.payments.pay_by_card(
                patient_name, amount,
                card_number=self.ask("Enter card number (12 digits):"),
                cvv=self.ask("Enter CVV (3 digits):"),
                expiry=self.ask("Enter card expiry date (MM/YY):"),
            )
        else:
            tendered = self.ask_float("Enter cash amount:")
            payment = self.clinic.payments.pay_by_cash(patient_name, amount, tendered)

        self.say()
        self.say("--- Receipt ---")
        self.say(f"Patient Name: {payment.patient_name}")
        self.say(f"Payment Method: {payment.method.value}")
        self.say(f"Amount Paid: {payment.amount} euros")
        if payment.change is not None:
            self.say(f"Your balance: {payment.change} euros")
        self.say("Thank you for your payment!")

    # -----------------------------------------------------------------------
    # STAFF SIDE
    # -----------------------------------------------------------------------

    def staff_login(self):
        role_name = self.ask("Enter staff ID (receptionist, doctor, nurse, pharmacist, cashier):")
        password = self.ask("Enter password:")
        role = authenticate(self.clinic.settings.passwords, role_name, password)
        member = DEFAULT_STAFF[role]
        for line in member.display_info():
            self.say(line)
        self.say(member.duties())

        sessions = {
            StaffRole.receptionist: self.receptionist_session,
            StaffRole.doctor: self.doctor_session,
            StaffRole.nurse: self.nurse_session,
            StaffRole.pharmacist: self.pharmacist_session,
            StaffRole.cashier: self.cashier_session,
        }
        sessions[role]()

    def _session(self, title: str, actions):
        """Generic staff loop; the last entry always logs out."""
        labels = [label for label, _ in actions] + ["Logout"]
        while True:
            choice = self.menu(title, labels)
            if choice == len(labels):
                return
            if not 1 <= choice < len(labels):
                self.say("Invalid choice. Please try again.")
                continue
            try:
                actions[choice - 1][1]()
            except ClinicError as e:
                self.say(f"❌ {e.reason}")

    def receptionist_session(self):
        self._session("Receptionist Menu", [
            ("Book appointment", self.book_appointment),
            ("View appointments", self.view_appointments),
            ("View sorted appointments", self.view_sorted_appointments),
        ])

    def doctor_session(self):
        self._session("Doctor Menu", [
            ("Add symptom/disease pair", self.add_custom_rule),
            ("Diagnosis report", self.diagnosis_report),
            ("View all patient records", self.view_patient_records),
        ])

    def nurse_session(self):
        self._session("Nurse Menu", [
            ("Take vitals", self.take_vitals),
            ("Preview vitals", self.preview_vitals),
        ])

    def pharmacist_session(self):
        self._session("Pharmacist Menu", [
            ("Add prescription", self.add_prescription),
            ("View prescriptions", self.view_prescriptions),
        ])

    def cashier_session(self):
        self.take_payment(self.ask("Enter patient name:"))

    def _print_lines(self, title: str, lines, empty: str = "No records found."):
        self.say(title)
        found = False
        for line in lines:
            found = True
            self.say(line)
        if not found:
            self.say(empty)

    def view_appointments(self):
        self._print_lines("All Appointments:", self.clinic.appointments.list_all())

    def view_sorted_appointments(self):
        self._print_lines("Sorted Appointments:", self.clinic.appointments.list_sorted())

    def add_custom_rule(self):
        symptoms = self.ask("Enter symptoms for a disease (comma-separated if multiple):")
        disease = self.ask("Enter the corresponding disease for these symptoms:")
        prescription = self.ask(f"Enter the prescription for {disease}:")
        self.clinic.add_custom_rule(symptoms, disease, prescription)
        self.say("Symptom, disease, and prescription added successfully.")

    def diagnosis_report(self):
        report = [f"{disease} : {count}" for disease, count in self.clinic.diagnosis_report()]
        self._print_lines("Generating Diagnosis Report:", report)

    def view_patient_records(self):
        patients = self.clinic.patients.all_sorted()
        self.say(f"All Patient Records ({len(patients)}):")
        if not patients:
            self.say("No records found.")
        for patient in patients:
            self.say(f"Name: {patient.name}")
            self.say(f"Age: {patient.age}")
            self.say(f"Nationality: {patient.nationality}")
            self.say(f"Address: {patient.address}")
            self.say("Medical History:")
            history = patient.sorted_history()
            if not history:
                self.say("No medical history available.")
            for record in history:
                self.say(f" - {record}")
            self.say()

    def take_vitals(self):
        name = self.ask("Enter patient name:")
        while True:
            temperature = self.ask_float("Enter temperature (°C):")
            blood_pressure = self.ask("Enter blood pressure (e.g., 120/80):")
            try:
                reading = self.clinic.vitals.record(name, temperature, blood_pressure)
                break
            except ValidationError as e:
                # Only the readings are re-asked; anything else goes back to the menu
                if e.field not in VITALS_FIELDS:
                    raise
                self.say(e.reason)
        self.say(f"Vitals saved for patient: {reading.patient_name}")
        self.say(f"Temperature: {reading.temperature}°C")
        self.say(f"Blood Pressure: {reading.blood_pressure}")

    def preview_vitals(self):
        self._print_lines("Previewing all patient vitals:", self.clinic.vitals.entries(),
                          empty="No vitals records found.")

    def add_prescription(self):
        name = self.ask("Enter patient name:")
        prescription = self.ask("Enter prescription:")
        self.clinic.prescriptions.add(name, prescription)
        self.say(f"Prescription saved for patient: {name}")

    def view_prescriptions(self):
        self._print_lines("All Prescriptions:", self.clinic.prescriptions.entries())


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Virtual Clinic console")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory for record files")
    parser.add_argument("--log-level", type=str.upper, default=None, choices=LOG_LEVELS,
                        help="Logging level (e.g. INFO)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    try:
        settings = get_settings(data_dir=args.data_dir, log_level=args.log_level)
    except ValidationError as e:
        raise SystemExit(f"❌ Invalid configuration: {e.reason}")
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    logger.info(f"Using data directory {settings.data_dir}")

    ConsoleApp(Clinic(settings)).run()


if __name__ == "__main__":
    main()
