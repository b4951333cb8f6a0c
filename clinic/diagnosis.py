"""
diagnosis.py
============
DiseaseCatalog: the fixed symptom-to-treatment table and symptom matching.

Matching is a case-insensitive containment check in one direction only:
a rule matches when its symptom phrase contains the patient's text.
"cough" therefore matches both "cough" and "whooping cough", and the first
rule in table order wins.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .errors import NoMatch
from .schemas import DiagnosisRule

logger = logging.getLogger(__name__)

DEFAULT_DOSAGE = "Take one pill two times daily before meals."

DEFAULT_RULES: Tuple[DiagnosisRule, ...] = (
    DiagnosisRule(symptom="cough", description="Cold", prescription="antibiotics", dosage=DEFAULT_DOSAGE),
    DiagnosisRule(symptom="whooping cough", description="covid", prescription="ibuprofen", dosage=DEFAULT_DOSAGE),
    DiagnosisRule(symptom="headache", description="Stress", prescription="relaxation therapy", dosage=DEFAULT_DOSAGE),
    DiagnosisRule(symptom="diarrhea", description="Gonorrhea", prescription="Coarterm", dosage=DEFAULT_DOSAGE),
    DiagnosisRule(symptom="loss of appetite", description="HIV", prescription="corndirump", dosage=DEFAULT_DOSAGE),
    DiagnosisRule(symptom="memory loss", description="Stroke", prescription="luphart", dosage=DEFAULT_DOSAGE),
)


class DiseaseCatalog:
    """Immutable, ordered table of diagnosis rules."""

    def __init__(self, rules: Optional[Iterable[DiagnosisRule]] = None):
        self._rules = tuple(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> Tuple[DiagnosisRule, ...]:
        return self._rules

    def symptoms(self) -> List[str]:
        return [rule.symptom for rule in self._rules]

    def diagnose(self, symptom_text: str) -> DiagnosisRule:
        """
        Return the first rule whose symptom phrase contains the input.
        Raises NoMatch when nothing matches or the input is blank.
        """
        needle = (symptom_text or "").strip().lower()
        if not needle:
            raise NoMatch("Diagnosis not found.")
        for rule in self._rules:
            if needle in rule.symptom.lower():
                logger.info(f"Symptoms {needle!r} matched rule {rule.symptom!r} ({rule.description})")
                return rule
        logger.info(f"No rule matches symptoms {needle!r}")
        raise NoMatch("Diagnosis not found.")
