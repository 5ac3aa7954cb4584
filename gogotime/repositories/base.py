# GoGoTime - Scoped Repository
# Company filtering and soft-delete filtering for every tenant query

import logging
import uuid
from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, Select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gogotime.errors import ConflictError
from gogotime.models.base import TenantEntity


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=TenantEntity)


class ScopedRepository(Generic[ModelT]):
    """
    Data access for one tenant model.

    Every read takes the caller's company_id and adds
    ``deleted_at IS NULL`` unless with_deleted is asked for, so a record
    owned by another company is indistinguishable from a missing one.

    Writes only flush; the route owning the request commits.

    Usage:
        repo = ScopedRepository(db, Permission)
        perms = repo.find_all_in_company(user.company_id)
        perm = repo.find_by_id_in_company(perm_id, user.company_id)
    """

    model: Type[ModelT]

    def __init__(self, db: Session, model: Optional[Type[ModelT]] = None):
        self.db = db
        if model is not None:
            self.model = model

    # ---- reads ----------------------------------------------------------

    def scoped(self, company_id: uuid.UUID, with_deleted: bool = False) -> Select:
        """Base SELECT restricted to one company."""
        query = select(self.model).where(self.model.company_id == company_id)
        if not with_deleted:
            query = query.where(self.model.deleted_at.is_(None))
        return query

    def find_all_in_company(
        self,
        company_id: uuid.UUID,
        *criteria: Any,
        order_by: Any = None,
    ) -> Sequence[ModelT]:
        query = self.scoped(company_id).where(*criteria)
        query = query.order_by(order_by if order_by is not None else self.model.created_at)
        return self.db.execute(query).scalars().all()

    def find_by_id_in_company(
        self,
        entity_id: uuid.UUID,
        company_id: uuid.UUID,
        with_deleted: bool = False,
    ) -> Optional[ModelT]:
        return self.db.execute(
            self.scoped(company_id, with_deleted).where(self.model.id == entity_id)
        ).scalar_one_or_none()

    def find_one(self, company_id: uuid.UUID, *criteria: Any, with_deleted: bool = False) -> Optional[ModelT]:
        return self.db.execute(
            self.scoped(company_id, with_deleted).where(*criteria).limit(1)
        ).scalars().first()

    def find_by_user(self, user_id: uuid.UUID, company_id: uuid.UUID) -> Sequence[ModelT]:
        """Records owned by one user, for models with a user_id column."""
        return self.find_all_in_company(company_id, self.model.user_id == user_id)

    # ---- writes ---------------------------------------------------------

    def add(self, entity: ModelT, actor_id: Optional[uuid.UUID] = None) -> ModelT:
        """
        Insert a new row.

        Raises:
            ConflictError: if a unique constraint rejects the row
        """
        if actor_id is not None:
            entity.created_by_user_id = actor_id
            entity.updated_by_user_id = actor_id

        self.db.add(entity)
        self._flush()
        return entity

    def update(
        self,
        entity: ModelT,
        changes: dict,
        actor_id: Optional[uuid.UUID] = None,
        expected_version: Optional[int] = None,
    ) -> ModelT:
        """
        Apply ``changes`` and bump the version counter.

        When expected_version is given it must match the stored version,
        otherwise the caller was working from a stale copy.

        Raises:
            ConflictError: on a stale version or a unique violation
        """
        self.check_version(entity, expected_version)

        for field, value in changes.items():
            setattr(entity, field, value)

        self.touch(entity, actor_id)
        self._flush()
        return entity

    def soft_delete(self, entity: ModelT, actor_id: Optional[uuid.UUID] = None) -> ModelT:
        entity.soft_delete(actor_id)
        entity.version = (entity.version or 0) + 1
        self._flush()
        return entity

    def restore(self, entity: ModelT, actor_id: Optional[uuid.UUID] = None) -> ModelT:
        entity.restore()
        self.touch(entity, actor_id)
        self._flush()
        return entity

    # ---- helpers --------------------------------------------------------

    @staticmethod
    def check_version(entity: ModelT, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != entity.version:
            raise ConflictError(
                f"{type(entity).__name__} was modified by someone else",
                {"expected_version": expected_version, "current_version": entity.version},
            )

    @staticmethod
    def touch(entity: ModelT, actor_id: Optional[uuid.UUID]) -> None:
        """Record an update without changing any business field."""
        entity.version = (entity.version or 0) + 1
        if actor_id is not None:
            entity.updated_by_user_id = actor_id

    def _flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("Integrity error on %s: %s", self.model.__tablename__, exc.orig)
            raise ConflictError(
                f"{self.model.__name__} conflicts with an existing record"
            ) from exc
