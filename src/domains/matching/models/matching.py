"""
Matching domain models
"""

from typing import List, Optional
from datetime import date
from dataclasses import dataclass, field
from pydantic import BaseModel, Field

from domains.trial.models.trial import Trial, TrialStatus


@dataclass
class MatchResult:
    """Compatibility of one patient against one trial"""
    trial: Trial
    score: int
    reasons: List[str] = field(default_factory=list)


class TrialSummary(BaseModel):
    """Trial fields exposed alongside a suggestion"""
    id: str = Field(..., description="Trial identifier")
    title: str = Field(..., description="Trial title")
    status: TrialStatus = Field(..., description="Trial lifecycle state")
    public_description: str = ""
    clinic_city: Optional[str] = None
    max_participants: Optional[int] = None
    current_participants: int = 0
    recruitment_deadline: Optional[date] = None
    research_site_name: Optional[str] = None
    research_site_url: Optional[str] = None
    sponsor_name: Optional[str] = None

    @classmethod
    def from_trial(cls, trial: Trial) -> "TrialSummary":
        return cls(
            id=trial.id,
            title=trial.title,
            status=trial.status,
            public_description=trial.public_description,
            clinic_city=trial.clinic_city,
            max_participants=trial.max_participants,
            current_participants=trial.current_participants,
            recruitment_deadline=trial.recruitment_deadline,
            research_site_name=trial.research_site_name,
            research_site_url=trial.research_site_url,
            sponsor_name=trial.sponsor_name,
        )


class TrialSuggestion(BaseModel):
    """Single ranked suggestion"""
    trial: TrialSummary
    score: int = Field(..., ge=0, le=100, description="Compatibility score")
    reasons: List[str] = Field(default_factory=list, description="Why the trial scored as it did")

    @classmethod
    def from_match(cls, result: MatchResult) -> "TrialSuggestion":
        return cls(
            trial=TrialSummary.from_trial(result.trial),
            score=result.score,
            reasons=list(result.reasons),
        )
