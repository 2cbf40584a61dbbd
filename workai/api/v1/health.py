from fastapi import APIRouter

from workai.core.config import settings

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"ok": True, "service": settings.service_name, "status": "alive"}
