"""
patients.py
===========
PatientStore: the in-memory set of registered patients and its
comma-delimited record file.

Record line format: ``name,age,nationality,address``
Medical history and the follow-up flag are not written to disk.
"""

import logging
from typing import List, Optional

from .errors import NotFound
from .schemas import Patient, build
from .storage import iter_lines, safe_replace

logger = logging.getLogger(__name__)

FIELD_COUNT = 4


def patient_to_line(patient: Patient) -> str:
    return f"{patient.name},{patient.age},{patient.nationality},{patient.address}"


def patient_from_line(line: str) -> Optional[Patient]:
    """Parse one record line; returns None for anything malformed."""
    details = line.split(",")
    if len(details) != FIELD_COUNT:
        return None
    name, age, nationality, address = details
    try:
        return Patient(name=name, age=int(age), nationality=nationality, address=address)
    except ValueError:
        # int() failures and pydantic validation errors alike
        return None


class PatientStore:
    """
    Owns every patient record.
    Loads once on construction; rewrites the whole file on every mutation.
    """

    def __init__(self, path):
        self.path = path
        self.patients: List[Patient] = []
        self.patient_count = 0
        self.load_all()

    def load_all(self) -> List[Patient]:
        """Replace the in-memory set with the file contents, skipping bad lines."""
        loaded = []
        for number, line in enumerate(iter_lines(self.path), start=1):
            if not line.strip():
                continue
            patient = patient_from_line(line)
            if patient is None:
                logger.warning(f"Skipping malformed patient record on line {number}: {line!r}")
                continue
            loaded.append(patient)
        self.patients = loaded
        logger.info(f"Loaded {len(loaded)} patient records from {self.path}")
        return loaded

    def persist(self):
        safe_replace(self.path, (patient_to_line(p) for p in self.patients))

    def create(self, name: str, age: int, nationality: str, address: str) -> Patient:
        """
        Register a new patient and save the store.
        Raises ValidationError for a non-positive age or an empty field.
        """
        patient = build(Patient, name=name, age=age, nationality=nationality, address=address)
        self.patients.append(patient)
        self.patient_count += 1
        self.persist()
        logger.info(f"Record added for {patient.name}")
        return patient

    def find(self, name: str) -> Patient:
        """Case-insensitive exact-name lookup. The earliest registration wins."""
        for patient in self.patients:
            if patient.matches(name):
                return patient
        raise NotFound(f"No record found for {name}")

    def record_diagnosis(self, patient: Patient, diagnosis: str):
        patient.add_history(diagnosis)
        logger.info(f"Added '{diagnosis}' to history of {patient.name}")

    def all_sorted(self) -> List[Patient]:
        return sorted(self.patients, key=lambda p: p.name.lower())

    def __len__(self):
        return len(self.patients)
