"""API v1 routes."""

from fastapi import APIRouter

from bugtracker.api.v1 import analytics, auth, comments, health, menus, reports, uploads, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(menus.router, prefix="/menus", tags=["menus"])
router.include_router(menus.sub_menu_router, prefix="/sub-menus", tags=["menus"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(comments.router, prefix="/comments", tags=["comments"])
router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
