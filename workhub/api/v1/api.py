# workhub/api/v1/api.py
from fastapi import APIRouter
from workhub.api.v1.endpoints import (
    admin, documents, holidays, images, notifications, projects, settings, users, weekly_reports,
)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(images.router, prefix="/images", tags=["Images"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(holidays.router, prefix="/holidays", tags=["Holidays"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(weekly_reports.router, prefix="/weekly-reports", tags=["Weekly Reports"])
