"""
Matching controller - HTTP endpoint handlers for trial suggestions
"""

from typing import List
from fastapi import APIRouter, HTTPException, Depends, Path
import logging

from ..models.matching import TrialSuggestion
from ..services.matching_service import MatchingService
from core.dependencies import get_matching_service
from providers.base_provider import RecordNotFoundError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/trials", tags=["matching"])


@router.get("/suggestions/{patient_id}", response_model=List[TrialSuggestion])
async def get_suggestions_for_patient(
    patient_id: str = Path(..., description="Patient ID"),
    service: MatchingService = Depends(get_matching_service)
) -> List[TrialSuggestion]:
    """
    Recruiting trials ranked by compatibility with a patient

    Only trials with a score above zero are returned, best first.
    """
    try:
        results = await service.rank_suggestions(patient_id)
        return [TrialSuggestion.from_match(result) for result in results]

    except HTTPException:
        raise
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error ranking trials for patient {patient_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/suggestions/{patient_id}/{trial_id}", response_model=TrialSuggestion)
async def explain_trial_match(
    patient_id: str = Path(..., description="Patient ID"),
    trial_id: str = Path(..., description="Trial ID"),
    service: MatchingService = Depends(get_matching_service)
) -> TrialSuggestion:
    """
    Score breakdown of one trial for one patient

    Returns the score and reasons even when the score is zero.
    """
    try:
        result = await service.explain_match(patient_id, trial_id)
        return TrialSuggestion.from_match(result)

    except HTTPException:
        raise
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error scoring trial {trial_id} for patient {patient_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
