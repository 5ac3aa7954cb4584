# GoGoTime - Shared Schema Pieces

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    """Response schema readable straight from a SQLAlchemy object."""

    model_config = ConfigDict(from_attributes=True)


class EntityResponse(ORMModel):
    """Fields every tenant entity exposes."""

    id: uuid.UUID
    company_id: uuid.UUID
    version: int
    created_at: datetime
    updated_at: datetime


class VersionedUpdate(BaseModel):
    """
    Base for update payloads.

    version is optional; when sent it must equal the stored version or
    the update is refused with a conflict.
    """

    model_config = ConfigDict(extra="forbid")

    version: Optional[int] = Field(None, ge=1)
