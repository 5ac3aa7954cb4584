# GoGoTime - Permission, Role and Grant Schemas

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import ORMModel, EntityResponse, VersionedUpdate


PERMISSION_NAME_PATTERN = r"^[a-z][a-z0-9_:.-]*$"


class PermissionCreate(BaseModel):
    """Permission names are lowercase capability keys, e.g. approve_timesheet."""
    name: str = Field(..., min_length=1, max_length=100, pattern=PERMISSION_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)


class PermissionUpdate(VersionedUpdate):
    name: Optional[str] = Field(None, min_length=1, max_length=100, pattern=PERMISSION_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)


class PermissionResponse(EntityResponse):
    name: str
    description: Optional[str] = None


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class RoleUpdate(VersionedUpdate):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)


class RoleResponse(EntityResponse):
    name: str
    description: Optional[str] = None


class RoleWithPermissionsResponse(RoleResponse):
    permissions: List[str] = []


class RolePermissionCreate(BaseModel):
    role_id: uuid.UUID
    permission_id: uuid.UUID


class RolePermissionResponse(ORMModel):
    id: uuid.UUID
    company_id: uuid.UUID
    role_id: uuid.UUID
    permission_id: uuid.UUID
    permission_name: Optional[str] = None

    @classmethod
    def from_grant(cls, grant) -> "RolePermissionResponse":
        return cls(
            id=grant.id,
            company_id=grant.company_id,
            role_id=grant.role_id,
            permission_id=grant.permission_id,
            permission_name=grant.permission.name if grant.permission is not None else None,
        )
