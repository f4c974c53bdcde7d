"""
Subscriber endpoints.

One route per store operation.  Request bodies are JSON for every
route, including the two ``GET`` routes.  Create, update and delete
re-read the affected subscriber after writing and return it; get
returns the subscriber or ``null`` and get_batch returns a list.

Failures are turned into ``{"Err": "<message>"}`` responses by the
handlers in ``core.errors``: store failures and malformed bodies give
400, a request using the wrong method gets an empty 405.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from mailinglist_api.app.api.deps import get_store
from mailinglist_api.app.core.errors import InvalidArgument
from mailinglist_api.app.schemas.email import BatchQuery, EmailEntry, EmailRequest, EmailUpdate
from mailinglist_api.app.services.email_service import EmailStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create", response_model=Optional[EmailEntry])
def create_email(body: EmailRequest, store: EmailStore = Depends(get_store)) -> Optional[EmailEntry]:
    """Add a new, unconfirmed subscriber.  Duplicate addresses give 400."""
    store.create(body.email)
    logger.info("JSON CreateEmail: %s", body.email)
    return store.get(body.email)


@router.get("/get", response_model=Optional[EmailEntry])
def get_email(body: EmailRequest, store: EmailStore = Depends(get_store)) -> Optional[EmailEntry]:
    """Look up a subscriber by address; ``null`` when there is none."""
    logger.info("JSON GetEmail: %s", body.email)
    return store.get(body.email)


@router.put("/update", response_model=Optional[EmailEntry])
def update_email(body: EmailUpdate, store: EmailStore = Depends(get_store)) -> Optional[EmailEntry]:
    """Create or replace a subscriber's confirmation time and opt-out flag."""
    store.update(body)
    logger.info("JSON UpdateEmail: %s", body.email)
    return store.get(body.email)


@router.post("/delete", response_model=Optional[EmailEntry])
def delete_email(body: EmailRequest, store: EmailStore = Depends(get_store)) -> Optional[EmailEntry]:
    """Opt a subscriber out and return the record as it now stands."""
    store.delete(body.email)
    logger.info("JSON DeleteEmail: %s", body.email)
    return store.get(body.email)


@router.get("/get_batch", response_model=List[EmailEntry])
def get_email_batch(body: BatchQuery, store: EmailStore = Depends(get_store)) -> List[EmailEntry]:
    """Return one page of active subscribers, ordered by id."""
    if body.page < 1 or body.count < 1:
        raise InvalidArgument("page and count fields are required and must be greater than 0")
    logger.info("JSON GetEmailBatch: page=%s count=%s", body.page, body.count)
    return store.get_batch(body.page, body.count)
