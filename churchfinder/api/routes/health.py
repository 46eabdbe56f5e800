from fastapi import APIRouter, status
from datetime import datetime
from typing import Dict
from churchfinder.core.config import settings

router = APIRouter()

@router.get("/", response_model=Dict, status_code=status.HTTP_200_OK, summary="Health Check Endpoint",
    description="Returns the current status of the API including version and environment",)
async def health_check() -> Dict:
    """
    Endpoint to check the health status of the API.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }
