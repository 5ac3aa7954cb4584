# GoGoTime - Leave Request Service
# Leave CRUD under the owner-or-override rule

import logging
import uuid
from typing import Optional, Sequence

from gogotime.errors import NotFoundError, ValidationError
from gogotime.models import LeaveRequest, HistoryTargetType
from gogotime.permissions import (
    CREATE_OTHER_LEAVE_REQUEST,
    UPDATE_OTHER_LEAVE_REQUEST,
    DELETE_OTHER_LEAVE_REQUEST,
    VIEW_OTHER_LEAVE_REQUEST,
)
from gogotime.repositories import LeaveRequestRepository, UserRepository
from gogotime.schemas import LeaveRequestCreate, LeaveRequestUpdate
from gogotime.services.base import TenantService
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)

# Columns a partial update may not clear
REQUIRED_FIELDS = ("start_date", "end_date", "leave_type", "status")


class LeaveRequestService(TenantService):
    """
    Leave requests of the caller's company.

    The owner may always manage their own requests. Acting on someone
    else's request needs the matching *_other_leave_request permission.

    Usage:
        service = LeaveRequestService(db, manager)
        leave = service.create_leave_request({
            "user_id": employee.id,
            "start_date": "2025-03-03",
            "end_date": "2025-03-07",
            "leave_type": "PTO",
        })
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = LeaveRequestRepository(db)
        self.users = UserRepository(db)

    def list_leave_requests(self, user_id: Optional[uuid.UUID] = None) -> Sequence[LeaveRequest]:
        """Own requests by default; another user's needs view_other_leave_request."""
        user_id = user_id or self.current_user.id
        if user_id != self.current_user.id:
            self.ensure_can_act_on(user_id, VIEW_OTHER_LEAVE_REQUEST, "You may only view your own leave requests")
        return self.repo.find_by_user(user_id, self.company_id)

    def get_leave_request(self, leave_request_id: uuid.UUID) -> LeaveRequest:
        leave = self.get_or_404(self.repo, leave_request_id, "LeaveRequest")
        self.ensure_can_act_on(leave.user_id, VIEW_OTHER_LEAVE_REQUEST, "You may only view your own leave requests")
        return leave

    def create_leave_request(self, data) -> LeaveRequest:
        """
        Create a leave request for the caller or, with
        create_other_leave_request, for another user of the company.

        Raises:
            ValidationError: bad payload
            ForbiddenError: non-owner without the override permission
            NotFoundError: target user not in the caller's company
        """
        dto = validate_dto(LeaveRequestCreate, data)
        owner_id = dto.user_id or self.current_user.id

        self.ensure_can_act_on(
            owner_id, CREATE_OTHER_LEAVE_REQUEST,
            "You may only request leave for yourself",
        )

        if owner_id != self.current_user.id and self.users.find_by_id_in_company(owner_id, self.company_id) is None:
            raise NotFoundError("User", owner_id)

        leave = LeaveRequest(
            company_id=self.company_id,
            user_id=owner_id,
            start_date=dto.start_date,
            end_date=dto.end_date,
            leave_type=dto.leave_type,
            reason=dto.reason,
        )
        self.repo.add(leave, self.current_user.id)
        self.history.log_created(HistoryTargetType.LEAVE_REQUEST, leave)

        logger.info("Leave request %s created for user %s by %s", leave.id, owner_id, self.current_user.id)
        return leave

    def update_leave_request(self, leave_request_id: uuid.UUID, data) -> LeaveRequest:
        dto = validate_dto(LeaveRequestUpdate, data)
        leave = self.get_or_404(self.repo, leave_request_id, "LeaveRequest")

        self.ensure_can_act_on(
            leave.user_id, UPDATE_OTHER_LEAVE_REQUEST,
            "You may only update your own leave requests",
        )

        changes = dto.model_dump(exclude_unset=True, exclude={"version"})
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                changes.pop(field)

        start = changes.get("start_date", leave.start_date)
        end = changes.get("end_date", leave.end_date)
        if end < start:
            raise ValidationError.single("end_date", "end_date must be on or after start_date")

        old_state = self.history.capture_state(leave)
        self.repo.update(leave, changes, self.current_user.id, expected_version=dto.version)
        self.history.log_updated(HistoryTargetType.LEAVE_REQUEST, leave, old_state)

        if "status" in changes:
            logger.info("Leave request %s is now %s", leave.id, leave.status.value)

        return self.reload(leave)

    def delete_leave_request(self, leave_request_id: uuid.UUID) -> LeaveRequest:
        leave = self.get_or_404(self.repo, leave_request_id, "LeaveRequest")

        self.ensure_can_act_on(
            leave.user_id, DELETE_OTHER_LEAVE_REQUEST,
            "You may only delete your own leave requests",
        )

        self.history.log_deleted(HistoryTargetType.LEAVE_REQUEST, leave)
        self.repo.soft_delete(leave, self.current_user.id)
        logger.info("Leave request %s deleted by %s", leave.id, self.current_user.id)
        return leave
