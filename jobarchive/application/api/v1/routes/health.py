"""Health check endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from jobarchive.application.api.v1.deps import get_config
from jobarchive.config import Config

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(config: Annotated[Config, Depends(get_config)]) -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": config.server.version,
    }
