# GoGoTime - Active Session and History Schemas

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from gogotime.models import HistoryAction, HistoryTargetType, TimesheetHistory
from .common import ORMModel


class ActiveSessionResponse(ORMModel):
    id: uuid.UUID
    user_id: uuid.UUID
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    device_id: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    last_seen_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None


class HistoryResponse(BaseModel):
    id: uuid.UUID
    target_type: HistoryTargetType
    target_id: uuid.UUID
    action: HistoryAction
    actor_user_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    reason: Optional[str] = None
    diff: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    occurred_at: datetime

    @classmethod
    def from_model(cls, row: TimesheetHistory) -> "HistoryResponse":
        return cls(
            id=row.id,
            target_type=row.target_type,
            target_id=row.target_id,
            action=row.action,
            actor_user_id=row.actor_user_id,
            user_id=row.user_id,
            reason=row.reason,
            diff=row.get_diff(),
            metadata=row.get_metadata(),
            occurred_at=row.occurred_at,
        )
