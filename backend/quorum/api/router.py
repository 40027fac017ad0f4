from fastapi import APIRouter

from quorum.api.v1 import availabilities, calendars, health, public, recurrences, summaries


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(calendars.router, prefix="/calendars", tags=["calendars"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
api_router.include_router(availabilities.router, prefix="/public", tags=["availabilities"])
api_router.include_router(recurrences.router, prefix="/public", tags=["recurrences"])
api_router.include_router(summaries.router, prefix="/public", tags=["summaries"])
