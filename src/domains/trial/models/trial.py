"""
Trial domain models
"""

from typing import Optional, Dict, Any, Mapping
from datetime import date, datetime
from dataclasses import dataclass
from enum import Enum


class TrialStatus(str, Enum):
    """Lifecycle states of a clinical trial"""
    PREPARATION = "PREPARATION"   # Planning, not yet accepting candidates
    RECRUITING = "RECRUITING"     # Actively accepting candidates
    FOLLOW_UP = "FOLLOW_UP"       # Running with enrolled patients
    CLOSED = "CLOSED"             # Finished


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class Trial:
    """
    Read-only snapshot of a clinical trial.

    inclusion_criteria is kept as the loosely-typed document it was stored
    as; the matching services know how to read it.
    """
    id: str
    title: str
    status: TrialStatus = TrialStatus.RECRUITING
    inclusion_criteria: Optional[Mapping[str, Any]] = None
    max_participants: Optional[int] = None
    current_participants: int = 0
    public_description: str = ""
    clinic_city: Optional[str] = None
    recruitment_deadline: Optional[date] = None
    research_site_name: Optional[str] = None
    research_site_url: Optional[str] = None
    sponsor_name: Optional[str] = None

    @property
    def is_recruiting(self) -> bool:
        return self.status is TrialStatus.RECRUITING

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Trial":
        """Build a trial from a stored trial document"""
        sponsor = doc.get("sponsor")
        sponsor_name = sponsor.get("name") if isinstance(sponsor, dict) else doc.get("sponsor_name")

        return cls(
            id=str(doc["id"]),
            title=doc.get("title") or "",
            status=TrialStatus(doc.get("status", TrialStatus.RECRUITING.value)),
            inclusion_criteria=doc.get("inclusion_criteria"),
            max_participants=_as_int(doc.get("max_participants")),
            current_participants=_as_int(doc.get("current_participants")) or 0,
            public_description=doc.get("public_description") or "",
            clinic_city=doc.get("clinic_city"),
            recruitment_deadline=_as_date(doc.get("recruitment_deadline")),
            research_site_name=doc.get("research_site_name"),
            research_site_url=doc.get("research_site_url"),
            sponsor_name=sponsor_name,
        )
