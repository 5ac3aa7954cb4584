# GoGoTime - Action Code Schemas

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import EntityResponse, VersionedUpdate


class ActionCodeCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    category_id: Optional[uuid.UUID] = None
    allow_time_logging: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code must not be blank")
        return v


class ActionCodeUpdate(VersionedUpdate):
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    category_id: Optional[uuid.UUID] = None
    allow_time_logging: Optional[bool] = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class ActionCodeResponse(EntityResponse):
    code: str
    name: str
    description: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    allow_time_logging: bool


class ActionCodeCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ActionCodeCategoryUpdate(VersionedUpdate):
    name: Optional[str] = Field(None, min_length=1, max_length=100)


class ActionCodeCategoryResponse(EntityResponse):
    name: str
