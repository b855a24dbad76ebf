"""
Patient domain models
"""

from typing import Optional, Tuple, Dict, Any, Iterable
from dataclasses import dataclass


def _text_tuple(values: Any) -> Tuple[str, ...]:
    """Keep only non-blank string entries of a list-like field"""
    if not isinstance(values, (list, tuple)):
        return ()
    return tuple(v for v in values if isinstance(v, str) and v.strip())


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


@dataclass(frozen=True)
class PatientProfile:
    """Read-only snapshot of a patient intake used for trial matching"""
    id: str
    primary_condition: Optional[str] = None
    condition_description: Optional[str] = None
    pathologies: Tuple[str, ...] = ()
    diagnostic_codes: Tuple[str, ...] = ()

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "PatientProfile":
        """Build a profile from a stored patient document"""
        return cls(
            id=str(doc["id"]),
            primary_condition=_optional_text(doc.get("primary_condition")),
            condition_description=_optional_text(doc.get("condition_description")),
            pathologies=_text_tuple(doc.get("pathologies")),
            diagnostic_codes=_text_tuple(doc.get("diagnostic_codes")),
        )

    @classmethod
    def create(
        cls,
        id: str,
        primary_condition: Optional[str] = None,
        condition_description: Optional[str] = None,
        pathologies: Iterable[str] = (),
        diagnostic_codes: Iterable[str] = ()
    ) -> "PatientProfile":
        """Convenience constructor accepting any iterables for the list fields"""
        return cls(
            id=id,
            primary_condition=primary_condition,
            condition_description=condition_description,
            pathologies=tuple(pathologies),
            diagnostic_codes=tuple(diagnostic_codes),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "primary_condition": self.primary_condition,
            "condition_description": self.condition_description,
            "pathologies": list(self.pathologies),
            "diagnostic_codes": list(self.diagnostic_codes),
        }
