"""
Data Providers Package

Read-only data access for the matching engine.

Available Providers:
- MongoDataProvider: patients/trials stored in MongoDB, optional Redis cache
- InMemoryDataProvider: dictionaries, optionally seeded from a JSON file

All providers implement the BaseDataProvider interface.
"""

from .base_provider import (
    BaseDataProvider,
    ProviderConfig,
    RecordNotFoundError,
    PatientNotFoundError,
    TrialNotFoundError,
)
from .mongo_provider import MongoDataProvider
from .memory_provider import InMemoryDataProvider

__all__ = [
    # Base classes
    'BaseDataProvider',
    'ProviderConfig',

    # Errors
    'RecordNotFoundError',
    'PatientNotFoundError',
    'TrialNotFoundError',

    # Provider implementations
    'MongoDataProvider',
    'InMemoryDataProvider',
]

# Provider registry for dynamic loading
PROVIDER_REGISTRY = {
    'mongo': MongoDataProvider,
    'memory': InMemoryDataProvider,
}


def get_provider_class(provider_name: str):
    """
    Get provider class by name

    Args:
        provider_name: Name of the provider ('mongo', 'memory')

    Returns:
        Provider class

    Raises:
        ValueError: If provider name is not recognized
    """
    provider_name = provider_name.lower()

    if provider_name not in PROVIDER_REGISTRY:
        available = ', '.join(PROVIDER_REGISTRY.keys())
        raise ValueError(f"Unknown provider '{provider_name}'. Available providers: {available}")

    return PROVIDER_REGISTRY[provider_name]


def create_provider(provider_name: str, config=None, **kwargs):
    """
    Create provider instance by name

    Args:
        provider_name: Name of the provider
        config: ProviderConfig for the provider
        **kwargs: Additional arguments passed to provider constructor

    Returns:
        Provider instance
    """
    provider_class = get_provider_class(provider_name)
    return provider_class(config=config, **kwargs)
