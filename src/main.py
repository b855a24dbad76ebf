"""
Trial Matching Service
Controller/Service/Repository Pattern
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_config, configure_logging
from domains.matching.controllers.matching_controller import router as matching_router
from providers import create_provider, ProviderConfig

config = get_config()
configure_logging(config.logging)
logger = logging.getLogger(__name__)


def build_provider():
    """Create the configured data provider"""
    provider_config = ProviderConfig(
        seed_file=config.data_provider.seed_file,
        cache_enabled=config.redis.enabled,
        cache_ttl_seconds=config.redis.patient_cache_ttl_seconds
    )
    return create_provider(config.data_provider.provider_name, provider_config)


# FastAPI application with lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage service lifecycle"""
    logger.info(f"Starting {config.app_name} with '{config.data_provider.provider_name}' provider...")
    app.state.data_provider = build_provider()
    await app.state.data_provider.initialize()
    logger.info(f"{config.app_name} started successfully")

    yield

    logger.info(f"Shutting down {config.app_name}...")
    await app.state.data_provider.cleanup()
    logger.info(f"{config.app_name} shutdown complete")


app = FastAPI(
    title=config.app_name,
    version=config.app_version,
    description="Ranks recruiting clinical trials by compatibility with a patient",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(matching_router)


@app.get("/health")
async def health_check(request: Request):
    """Service and data provider health"""
    provider = getattr(request.app.state, "data_provider", None)
    provider_health = await provider.health_check() if provider else {"status": "not_initialized"}

    return {
        "status": "healthy" if provider_health.get("status") == "healthy" else "degraded",
        "version": config.app_version,
        "provider": provider_health,
        "timestamp": datetime.utcnow()
    }


@app.get("/")
async def root():
    """Root endpoint with service information"""
    return {
        "service": config.app_name,
        "version": config.app_version,
        "pattern": "Controller/Service/Repository",
        "documentation": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        log_level=config.logging.level.lower(),
        reload=config.debug
    )
