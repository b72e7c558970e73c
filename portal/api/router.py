"""API router: mounts every endpoint group (the app includes it under /api)."""

from fastapi import APIRouter

from portal.api.endpoints import (
    admin,
    auth,
    courses,
    faculty,
    health,
    materials,
    papers,
    students,
    upload,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(courses.router, prefix="/courses", tags=["courses"])
api_router.include_router(students.router, prefix="/students", tags=["students"])
# Resource routes first so /faculty/materials is never read as a faculty id.
api_router.include_router(materials.router, prefix="/faculty/materials", tags=["materials"])
api_router.include_router(papers.router, prefix="/faculty/papers", tags=["papers"])
api_router.include_router(faculty.router, prefix="/faculty", tags=["faculty"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
