"""
Top‑level router.

The subscriber endpoints are served from the application root under
``/email``; add further domains here by including their routers.
"""

from fastapi import APIRouter

from .endpoints import emails

router = APIRouter()

router.include_router(emails.router, prefix="/email", tags=["email"])
