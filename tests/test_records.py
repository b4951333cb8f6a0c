"""
test_records.py
===============
Test cases for the clinical logs, staff roles, storage helpers and config.
Tests cover:
 - Vitals validation and line format
 - Prescriptions and payments
 - Custom symptom/disease rules
 - Staff login gate
 - Safe-replace and settings resolution
"""

import sys, os
# Ensure the clinic package is discoverable when running from /tests
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from clinic import storage
from clinic.config import DEFAULT_PASSWORDS, get_settings
from clinic.errors import NotAuthorized, PersistenceError, ValidationError
from clinic.main import main, parse_args
from clinic.models import PaymentMethod, StaffRole
from clinic.records import CustomRuleLog, PaymentLog, PrescriptionLog, VitalsLog
from clinic.staff import DEFAULT_STAFF, authenticate


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


# --------------------------------------------------------------------------
# VITALS
# --------------------------------------------------------------------------

def test_record_vitals(tmp_path):
    """
    ✅ Test saving a valid reading.
    Expected: One line in the vitals format.
    """
    log = VitalsLog(tmp_path / "patient_vitals.txt")
    reading = log.record("Alice", 37.5, "120/80")

    assert reading.temperature == 37.5
    assert list(log.entries()) == ["Patient: Alice - Temperature: 37.5°C, Blood Pressure: 120/80"]


@pytest.mark.parametrize("temperature, blood_pressure", [
    (35.9, "110/70"),
    (99.1, "110/70"),
    (37.0, "120-80"),
    (37.0, "121/80"),
    (37.0, "110/59"),
    (37.0, "abc/def"),
    (37.0, "110/70/60"),
])
def test_record_vitals_rejects_bad_values(tmp_path, temperature, blood_pressure):
    """
    ✅ Test out-of-range temperatures and malformed blood pressures.
    Expected: ValidationError and nothing written.
    """
    path = tmp_path / "patient_vitals.txt"
    with pytest.raises(ValidationError):
        VitalsLog(path).record("Alice", temperature, blood_pressure)
    assert not path.exists()


def test_vitals_entries_empty_when_missing(tmp_path):
    assert list(VitalsLog(tmp_path / "none.txt").entries()) == []


# --------------------------------------------------------------------------
# PRESCRIPTIONS & PAYMENTS
# --------------------------------------------------------------------------

def test_prescription_lines(tmp_path):
    log = PrescriptionLog(tmp_path / "prescriptions.txt")
    log.add("Bob", "ibuprofen 200mg")
    log.record_diagnosis("Bob", "Stress", "relaxation therapy")

    assert list(log.entries()) == [
        "Patient: Bob, Prescription: ibuprofen 200mg",
        "Patient: Bob - Diagnosis: Stress - Prescribed medications: relaxation therapy",
    ]

    with pytest.raises(ValidationError):
        log.add("Bob", "")


def test_cash_payment_records_change(tmp_path):
    """
    ✅ Test a cash payment with change due.
    """
    log = PaymentLog(tmp_path / "payments.txt")
    payment = log.pay_by_cash("Carol", 50, 65.5)

    assert payment.method is PaymentMethod.cash
    assert payment.change == 15.5
    assert list(log.entries()) == [
        "Patient: Carol, Payment Method: Cash, Amount: 50.0 euros, Change: 15.5 euros"
    ]


def test_cash_payment_insufficient(tmp_path):
    path = tmp_path / "payments.txt"
    with pytest.raises(ValidationError) as exc:
        PaymentLog(path).pay_by_cash("Carol", 50, 20)
    assert "Insufficient" in exc.value.reason
    assert not path.exists()


def test_card_payment(tmp_path):
    """
    ✅ Test a card payment.
    Expected: Card data is checked but never written.
    """
    log = PaymentLog(tmp_path / "payments.txt")
    log.pay_by_card("Dan", 80, card_number="123456789012", cvv="123", expiry="09/27")

    lines = list(log.entries())
    assert lines == ["Patient: Dan, Payment Method: Card, Amount: 80.0 euros"]
    assert "123456789012" not in lines[0]


@pytest.mark.parametrize("card_number, cvv, expiry", [
    ("12345", "123", "09/27"),
    ("123456789012", "12", "09/27"),
    ("123456789012", "123", "0927"),
    ("123456789012", "123", "09/23"),
])
def test_card_payment_rejects_bad_card(tmp_path, card_number, cvv, expiry):
    with pytest.raises(ValidationError):
        PaymentLog(tmp_path / "payments.txt").pay_by_card("Dan", 80, card_number, cvv, expiry)


def test_payment_amount_must_be_positive(tmp_path):
    with pytest.raises(ValidationError):
        PaymentLog(tmp_path / "payments.txt").pay_by_cash("Dan", 0, 10)


# --------------------------------------------------------------------------
# CUSTOM RULES
# --------------------------------------------------------------------------

def test_custom_rule_line(tmp_path):
    log = CustomRuleLog(tmp_path / "symptoms_diseases.txt")
    rule = log.add("Fever, Chills", "Malaria", "artemisinin")

    assert rule.symptoms == "fever, chills"
    assert list(log.entries()) == ["fever, chills : Malaria : artemisinin"]


# --------------------------------------------------------------------------
# STAFF
# --------------------------------------------------------------------------

@pytest.mark.parametrize("role", list(StaffRole))
def test_authenticate_default_passwords(role):
    assert authenticate(DEFAULT_PASSWORDS, role.value, DEFAULT_PASSWORDS[role.value]) is role


@pytest.mark.parametrize("role, password", [
    ("doctor", "wrong"),
    ("janitor", "janitor123"),
    ("nurse", ""),
])
def test_authenticate_rejects(role, password):
    with pytest.raises(NotAuthorized):
        authenticate(DEFAULT_PASSWORDS, role, password)


def test_staff_info_and_duties():
    doctor = DEFAULT_STAFF[StaffRole.doctor]
    assert doctor.display_info() == ["Doctor's Name: Dr. John Smith", "Doctor's ID: 101"]
    assert doctor.duties() == "Dr. John Smith is performing doctor duties."
    assert DEFAULT_STAFF[StaffRole.nurse].display_info() == ["Nurse's Name: Alice"]


# --------------------------------------------------------------------------
# STORAGE & CONFIG
# --------------------------------------------------------------------------

def test_safe_replace_overwrites_whole_file(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("old 1\nold 2\nold 3\n", encoding="utf-8")
    storage.safe_replace(path, ["new"])
    assert _lines(path) == ["new"]


def test_read_failure_is_persistence_error(tmp_path):
    """
    ✅ Test reading a path that is a directory.
    Expected: PersistenceError rather than a raw OSError.
    """
    with pytest.raises(PersistenceError):
        list(storage.iter_lines(tmp_path))


def test_settings_from_environment(tmp_path, monkeypatch):
    data_dir = tmp_path / "clinic-data"
    monkeypatch.setenv("CLINIC_DATA_DIR", str(data_dir))
    monkeypatch.setenv("CLINIC_DOCTOR_PASSWORD", "s3cret")
    monkeypatch.setenv("CLINIC_LOG_LEVEL", "debug")

    settings = get_settings()

    assert data_dir.is_dir()
    assert settings.cases_path == data_dir / "disease_cases.txt"
    assert settings.passwords["doctor"] == "s3cret"
    assert settings.passwords["nurse"] == "nurse123"
    assert settings.log_level == "DEBUG"


def test_settings_arguments_win(tmp_path, monkeypatch):
    monkeypatch.setenv("CLINIC_DATA_DIR", str(tmp_path / "from-env"))
    settings = get_settings(data_dir=str(tmp_path / "from-args"))
    assert settings.data_dir == tmp_path / "from-args"


def test_settings_reject_unknown_log_level(tmp_path, monkeypatch):
    """
    ✅ Test an unknown logging level from the environment.
    Expected: ValidationError from settings; main() exits with a message.
    """
    monkeypatch.setenv("CLINIC_LOG_LEVEL", "FOO")

    with pytest.raises(ValidationError) as exc:
        get_settings(data_dir=str(tmp_path))
    assert exc.value.field == "log_level"

    with pytest.raises(SystemExit) as stop:
        main(["--data-dir", str(tmp_path)])
    assert "log_level" in str(stop.value.code)


def test_log_level_argument_choices():
    assert parse_args(["--log-level", "info"]).log_level == "INFO"
    with pytest.raises(SystemExit):
        parse_args(["--log-level", "FOO"])


def test_payment_rejects_multiline_name(tmp_path):
    with pytest.raises(ValidationError):
        PaymentLog(tmp_path / "payments.txt").pay_by_cash("Dan\nEve", 10, 10)
