"""
test_diagnosis_cases.py
=======================
Test cases for DiseaseCatalog and CaseLedger.
Tests cover:
 - Containment direction of symptom matching
 - Rule order
 - Ledger creation, increments and rewrite safety
"""

import sys, os
# Ensure the clinic package is discoverable when running from /tests
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from pydantic import ValidationError as PydanticValidationError

from clinic import storage
from clinic.cases import CaseLedger
from clinic.diagnosis import DEFAULT_DOSAGE, DEFAULT_RULES, DiseaseCatalog
from clinic.errors import NoMatch, NotFound, PersistenceError
from clinic.schemas import DiagnosisRule


# --------------------------------------------------------------------------
# DISEASE CATALOG
# --------------------------------------------------------------------------

def test_short_input_matches_longer_phrase():
    """
    ✅ Test the containment direction.
    Expected: "cough" matches "whooping cough" when that rule comes first.
    """
    whooping = DiagnosisRule(symptom="whooping cough", description="covid",
                             prescription="ibuprofen", dosage=DEFAULT_DOSAGE)
    cold = DiagnosisRule(symptom="cough", description="Cold",
                         prescription="antibiotics", dosage=DEFAULT_DOSAGE)
    catalog = DiseaseCatalog([whooping, cold])

    assert catalog.diagnose("cough") is whooping
    assert catalog.diagnose("COUGH") is whooping


def test_default_table_first_match_wins():
    """
    ✅ Test the default table order.
    Expected: "cough" hits the Cold rule declared first; "whooping" hits covid.
    """
    catalog = DiseaseCatalog()
    assert catalog.diagnose("cough").description == "Cold"
    assert catalog.diagnose("whooping").description == "covid"
    assert catalog.diagnose("  Memory ").description == "Stroke"
    assert catalog.diagnose("appetite").prescription == "corndirump"


def test_longer_input_does_not_match_shorter_phrase():
    """
    ✅ Test that input containing a phrase is not enough.
    Expected: "bad headache today" matches nothing.
    """
    with pytest.raises(NoMatch):
        DiseaseCatalog().diagnose("bad headache today")


@pytest.mark.parametrize("text", ["nonexistent-symptom", "", "   "])
def test_no_match(text):
    """
    ✅ Test unknown and blank symptoms.
    Expected: NoMatch, which is also a NotFound.
    """
    with pytest.raises(NotFound):
        DiseaseCatalog().diagnose(text)


def test_table_is_immutable():
    catalog = DiseaseCatalog()
    assert catalog.rules == DEFAULT_RULES
    assert catalog.symptoms()[:2] == ["cough", "whooping cough"]
    with pytest.raises(PydanticValidationError):
        catalog.rules[0].description = "Flu"


# --------------------------------------------------------------------------
# CASE LEDGER
# --------------------------------------------------------------------------

@pytest.fixture
def ledger_path(tmp_path):
    return tmp_path / "disease_cases.txt"


@pytest.fixture
def ledger(ledger_path):
    return CaseLedger(ledger_path)


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def test_ledger_file_created_empty(ledger, ledger_path):
    assert ledger_path.exists()
    assert list(ledger.report()) == []


def test_increment_creates_then_counts(ledger, ledger_path):
    """
    ✅ Test incrementing "Cold" twice on an empty ledger.
    Expected: Count 1 then 2; the line count stays the same.
    """
    assert ledger.increment("Cold") == 1
    after_first = _lines(ledger_path)
    assert after_first == ["Cold : 1"]

    assert ledger.increment("Cold") == 2
    after_second = _lines(ledger_path)
    assert after_second == ["Cold : 2"]
    assert len(after_first) == len(after_second)


def test_increment_keeps_other_lines(ledger, ledger_path):
    ledger_path.write_text("Stress : 4\nCold : 1\nStroke : 0\n", encoding="utf-8")

    ledger.increment("Cold")
    ledger.increment("HIV")

    assert _lines(ledger_path) == ["Stress : 4", "Cold : 2", "Stroke : 0", "HIV : 1"]
    assert ledger.count("Cold") == 2
    assert ledger.count("Unknown") == 0


def test_ensure_tracked_is_idempotent(ledger, ledger_path):
    """
    ✅ Test tracking a new disease.
    Expected: One "<disease> : 0" line no matter how often it is called.
    """
    ledger.ensure_tracked("Malaria")
    ledger.ensure_tracked("Malaria")
    assert _lines(ledger_path) == ["Malaria : 0"]

    ledger.increment("Malaria")
    ledger.ensure_tracked("Malaria")
    assert list(ledger.report()) == [("Malaria", 1)]


def test_prefix_does_not_match_longer_name(ledger, ledger_path):
    ledger_path.write_text("Cold Sore : 3\n", encoding="utf-8")
    ledger.increment("Cold")
    assert list(ledger.report()) == [("Cold Sore", 3), ("Cold", 1)]


def test_report_skips_malformed_lines(ledger, ledger_path):
    ledger_path.write_text("Cold : 2\ngarbage\nStress : x\nStroke : 1\n", encoding="utf-8")
    assert list(ledger.report()) == [("Cold", 2), ("Stroke", 1)]


def test_failed_rewrite_leaves_ledger_intact(ledger, ledger_path, monkeypatch):
    """
    ✅ Test a failure during the swap step.
    Expected: PersistenceError, original file untouched, no temp file left.
    """
    ledger_path.write_text("Cold : 5\n", encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", broken_replace)

    with pytest.raises(PersistenceError):
        ledger.increment("Cold")

    assert _lines(ledger_path) == ["Cold : 5"]
    assert sorted(p.name for p in ledger_path.parent.iterdir()) == ["disease_cases.txt"]


def test_disease_name_with_colon(ledger, ledger_path):
    """
    ✅ Test a disease name that itself contains ":".
    Expected: Second increment yields 2 on the same line; report lists it.
    """
    assert ledger.increment("Flu: type A") == 1
    assert ledger.increment("Flu: type A") == 2

    assert _lines(ledger_path) == ["Flu: type A : 2"]
    assert list(ledger.report()) == [("Flu: type A", 2)]
    assert ledger.count("Flu: type A") == 2


def test_ensure_tracked_with_colon(ledger, ledger_path):
    ledger.ensure_tracked("Hepatitis: B")
    ledger.ensure_tracked("Hepatitis: B")
    assert list(ledger.report()) == [("Hepatitis: B", 0)]


def test_colon_name_is_not_a_shorter_disease(ledger, ledger_path):
    ledger_path.write_text("Flu : avian : 3\n", encoding="utf-8")
    ledger.increment("Flu")
    assert list(ledger.report()) == [("Flu : avian", 3), ("Flu", 1)]
    assert not ledger.is_tracked("Flu : avian : 3")
