"""
Dependencies shared by the endpoint modules.
"""

from fastapi import Request

from mailinglist_api.app.services.email_service import EmailStore


def get_store(request: Request) -> EmailStore:
    """Return the store created for this application in ``create_app``."""
    return request.app.state.store
