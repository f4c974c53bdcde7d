"""
Pydantic schemas for mailing list subscribers.

A subscriber is an email address plus its confirmation time and
opt-out flag.  A confirmation time of the Unix epoch means the address
was never confirmed.  Opted-out subscribers stay in the table but are
left out of batch listings.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class EmailEntry(BaseModel):
    """Schema for reading a subscriber record."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., alias="Id")
    email: str = Field(..., alias="Email")
    confirmed_at: datetime = Field(EPOCH, alias="ConfirmedAt")
    opt_out: bool = Field(False, alias="OptOut")


class EmailRequest(BaseModel):
    """Body of the create, get and delete requests."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., alias="Email", description="Subscriber email address")


class EmailUpdate(BaseModel):
    """Body of the update request.

    ``Id`` is accepted for symmetry with the record shape but ignored;
    records are matched by ``Email``.  A missing ``ConfirmedAt`` is
    stored as the epoch, i.e. "never confirmed".
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(None, alias="Id")
    email: str = Field(..., alias="Email")
    confirmed_at: Optional[datetime] = Field(None, alias="ConfirmedAt")
    opt_out: bool = Field(False, alias="OptOut")


class BatchQuery(BaseModel):
    """Body of the batch listing request.  Both fields must be at least 1."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(0, alias="Page")
    count: int = Field(0, alias="Count")
