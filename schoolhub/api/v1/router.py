"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from schoolhub.api.v1.endpoints import attendance, grades, reports

api_router = APIRouter()

# Grades
api_router.include_router(
    grades.router,
    prefix="/grades",
    tags=["Grades"],
)

# Attendance
api_router.include_router(
    attendance.router,
    prefix="/attendance",
    tags=["Attendance"],
)

# Class reports
api_router.include_router(
    reports.router,
    prefix="/reports",
    tags=["Reports"],
)
