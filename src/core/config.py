"""
Centralized configuration management for the Trial Matching Service
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from functools import lru_cache

logger = logging.getLogger(__name__)


@dataclass
class DatabaseConfig:
    """Database configuration settings"""
    uri: str = field(default_factory=lambda: os.getenv("MONGODB_URI", "mongodb://localhost:27017"))
    name: str = field(default_factory=lambda: os.getenv("TRIALS_DB", "trial_matching"))
    max_pool_size: int = field(default_factory=lambda: int(os.getenv("MONGO_POOL_SIZE", "50")))
    min_pool_size: int = field(default_factory=lambda: int(os.getenv("MONGO_MIN_POOL_SIZE", "10")))
    max_idle_time_ms: int = field(default_factory=lambda: int(os.getenv("MONGO_MAX_IDLE_TIME_MS", "10000")))
    server_selection_timeout_ms: int = field(default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000")))

    # Collection names
    patients_collection: str = "patients"
    trials_collection: str = "trials"


@dataclass
class RedisConfig:
    """Redis configuration settings"""
    enabled: bool = field(default_factory=lambda: os.getenv("CACHE_ENABLED", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    password: Optional[str] = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    max_connections: int = field(default_factory=lambda: int(os.getenv("REDIS_POOL_SIZE", "50")))
    socket_timeout: int = field(default_factory=lambda: int(os.getenv("REDIS_SOCKET_TIMEOUT", "30")))
    socket_connect_timeout: int = field(default_factory=lambda: int(os.getenv("REDIS_CONNECT_TIMEOUT", "30")))
    decode_responses: bool = False  # We want bytes for orjson serialization

    # Cache TTL settings
    default_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_DEFAULT_TTL", "3600")))
    patient_cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("PATIENT_CACHE_TTL", "300")))


@dataclass
class DataProviderConfig:
    """Data provider selection"""
    provider_name: str = field(default_factory=lambda: os.getenv("DATA_PROVIDER", "mongo"))
    seed_file: Optional[str] = field(default_factory=lambda: os.getenv("SEED_FILE"))


@dataclass
class ScoringConfig:
    """Compatibility scoring weights (points per signal)"""
    required_codes: int = field(default_factory=lambda: int(os.getenv("SCORE_REQUIRED_CODES", "50")))
    primary_condition: int = field(default_factory=lambda: int(os.getenv("SCORE_PRIMARY_CONDITION", "40")))
    pathology_per_match: int = field(default_factory=lambda: int(os.getenv("SCORE_PATHOLOGY_PER_MATCH", "10")))
    pathology_cap: int = field(default_factory=lambda: int(os.getenv("SCORE_PATHOLOGY_CAP", "30")))
    description: int = field(default_factory=lambda: int(os.getenv("SCORE_DESCRIPTION", "20")))
    capacity: int = field(default_factory=lambda: int(os.getenv("SCORE_CAPACITY", "10")))
    max_score: int = field(default_factory=lambda: int(os.getenv("SCORE_MAX", "100")))


@dataclass
class CORSConfig:
    """CORS settings"""
    origins: list = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(","))
    allow_credentials: bool = field(default_factory=lambda: os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true")


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    # File logging
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))
    max_file_size: int = field(default_factory=lambda: int(os.getenv("LOG_MAX_FILE_SIZE", "10485760")))  # 10MB
    backup_count: int = field(default_factory=lambda: int(os.getenv("LOG_BACKUP_COUNT", "5")))


@dataclass
class ApplicationConfig:
    """Main application configuration"""
    # Basic app settings
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Trial Matching Service"))
    app_version: str = field(default_factory=lambda: os.getenv("APP_VERSION", "1.0.0"))
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    # Server settings
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    # Component configurations
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    data_provider: DataProviderConfig = field(default_factory=DataProviderConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization"""
        self.validate()

    def validate(self):
        """Validate configuration settings"""
        errors = []

        # Provider validation
        provider_name = self.data_provider.provider_name.lower()
        if provider_name not in ("mongo", "memory"):
            errors.append(f"Unknown data provider '{self.data_provider.provider_name}'")

        if provider_name == "mongo":
            if not self.database.uri:
                errors.append("Database URI is required")
            if not self.database.name:
                errors.append("Database name is required")

        # Redis validation
        if self.redis.enabled:
            if not self.redis.host:
                errors.append("Redis host is required when caching is enabled")
            if not (1 <= self.redis.port <= 65535):
                errors.append("Redis port must be between 1 and 65535")

        # Scoring validation
        for name, points in self.scoring.__dict__.items():
            if points < 0:
                errors.append(f"Scoring weight '{name}' cannot be negative")
        if self.scoring.max_score > 100:
            errors.append("Scoring max_score cannot exceed 100")

        if not isinstance(logging.getLevelName(self.logging.level.upper()), int):
            errors.append(f"Unknown log level '{self.logging.level}'")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (for logging/debugging)"""
        config_dict = {}
        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, '__dict__'):
                config_dict[field_name] = field_value.__dict__.copy()
                # Mask sensitive values
                if field_name == 'redis' and config_dict[field_name].get('password'):
                    config_dict[field_name]['password'] = '***masked***'
            else:
                config_dict[field_name] = field_value
        return config_dict


@lru_cache(maxsize=1)
def get_config() -> ApplicationConfig:
    """
    Get application configuration singleton.
    Uses LRU cache to ensure same instance is returned.
    """
    config = ApplicationConfig()
    logger.info(f"Configuration loaded for environment: {config.environment}")
    return config


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure root logging from settings; optional rotating file output"""
    config = config or get_config().logging

    handlers = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count
        ))

    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
        handlers=handlers,
        force=True
    )


# Convenience functions for common config access patterns
def get_database_config() -> DatabaseConfig:
    """Get database configuration"""
    return get_config().database


def get_redis_config() -> RedisConfig:
    """Get Redis configuration"""
    return get_config().redis


def get_scoring_config() -> ScoringConfig:
    """Get scoring configuration"""
    return get_config().scoring
