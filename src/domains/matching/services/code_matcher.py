"""
Hierarchical diagnostic code matching

Codes are ICD-style strings where the hierarchy is encoded by prefix:
"E11" (category) is an ancestor of "E11.9" (subcategory). Two codes match
when they are equal or one is an ancestor of the other. Codes carry precise
clinical meaning, so no fuzzy comparison is ever applied here.
"""

from typing import Iterable, List


def normalize_code(code: str) -> str:
    return code.strip().upper()


def matches(patient_code: str, criterion_code: str) -> bool:
    """
    Check whether a patient code satisfies a criterion code.

    Examples:
        matches("E11.9", "E11")   -> True   (patient is more specific)
        matches("E11", "E11.9")   -> True   (criterion is more specific)
        matches("e11.9 ", "E11.9") -> True
        matches("E11.9", "E10")   -> False
        matches("", "")           -> False
    """
    patient = normalize_code(patient_code)
    criterion = normalize_code(criterion_code)

    # An empty code carries no information and matches nothing
    if not patient or not criterion:
        return False

    if patient == criterion:
        return True

    return patient.startswith(criterion) or criterion.startswith(patient)


def matching_codes(patient_codes: Iterable[str], criterion_codes: Iterable[str]) -> List[str]:
    """Patient codes (in their original order) matching at least one criterion code"""
    criterion_codes = list(criterion_codes)
    return [
        code for code in patient_codes
        if any(matches(code, criterion) for criterion in criterion_codes)
    ]


def any_match(patient_codes: Iterable[str], criterion_codes: Iterable[str]) -> bool:
    return bool(matching_codes(patient_codes, criterion_codes))
