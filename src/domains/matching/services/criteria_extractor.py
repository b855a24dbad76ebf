"""
Criteria extraction

Trial inclusion criteria went through several schema revisions without
backfilling, so condition names can live under different keys. This module
flattens whatever is present into plain lists the scorer can compare.
"""

from typing import Any, List, Mapping, Tuple

# Diagnostic code fields, current spelling first
REQUIRED_CODES_KEYS = ("required_codes", "codigos_cie10_requeridos")
EXCLUDED_CODES_KEYS = ("excluded_codes", "codigos_cie10_excluidos")

# Textual condition fields, in extraction order: (key, is_list)
CONDITION_FIELDS = (
    ("conditions", True),
    ("diseases", True),
    ("diagnosis", False),
    ("medicalConditions", True),
)


def _strings(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str)]


def extract_conditions(criteria: Any) -> List[str]:
    """
    Collect condition names from a criteria document.

    Args:
        criteria: Inclusion-criteria document (any value; non-mappings yield nothing)

    Returns:
        Lowercased, trimmed condition strings; blank entries are dropped
    """
    if not isinstance(criteria, Mapping):
        return []

    found: List[str] = []
    for key, is_list in CONDITION_FIELDS:
        value = criteria.get(key)
        if is_list:
            found.extend(_strings(value))
        elif isinstance(value, str):
            found.append(value)

    conditions = [c.lower().strip() for c in found]
    return [c for c in conditions if c]


def extract_codes(criteria: Any, keys: Tuple[str, ...]) -> List[str]:
    """Non-blank diagnostic codes stored under any of `keys`, as written"""
    if not isinstance(criteria, Mapping):
        return []

    codes: List[str] = []
    for key in keys:
        codes.extend(code for code in _strings(criteria.get(key)) if code.strip())
    return codes
