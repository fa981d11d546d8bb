"""Routes API / API routes."""

from fastapi import APIRouter

from presto.api import (
    activity_reports,
    auth,
    clients,
    companies,
    missions,
    reporting,
    settings,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(settings.config_router, prefix="/config", tags=["config"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(missions.router, prefix="/missions", tags=["missions"])
api_router.include_router(activity_reports.router, prefix="/activity-reports", tags=["activity-reports"])
api_router.include_router(reporting.router, prefix="/reporting", tags=["reporting"])
