"""
Dependency injection for the application
"""

from fastapi import Request, Depends

from core.config import get_scoring_config
from providers.base_provider import BaseDataProvider
from domains.matching.services.compatibility_scorer import CompatibilityScorer, ScoringWeights
from domains.matching.services.matching_service import MatchingService


async def get_data_provider(request: Request) -> BaseDataProvider:
    """Get the data provider created at startup"""
    return request.app.state.data_provider


async def get_compatibility_scorer() -> CompatibilityScorer:
    """Get a scorer using the configured weights"""
    return CompatibilityScorer(ScoringWeights.from_config(get_scoring_config()))


async def get_matching_service(
    provider: BaseDataProvider = Depends(get_data_provider),
    scorer: CompatibilityScorer = Depends(get_compatibility_scorer)
) -> MatchingService:
    """Get matching service instance"""
    return MatchingService(provider, scorer)
