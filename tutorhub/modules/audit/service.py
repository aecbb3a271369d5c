"""Audit business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import RoleEnum
from tutorhub.modules.audit.models import AuditLog
from tutorhub.modules.audit.repository import AuditRepository
from tutorhub.modules.identity.models import User
from tutorhub.shared.exceptions import UnauthorizedException


class AuditService:
    """Read access to the audit trail."""

    def __init__(self, repository: AuditRepository) -> None:
        self.repository = repository

    async def list_logs(
        self,
        actor: User,
        limit: int,
        offset: int,
        entity_type: str | None = None,
    ) -> tuple[list[AuditLog], int]:
        """List audit logs (admin only)."""
        if actor.role.name != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can view audit logs")
        return await self.repository.list_audit_logs(limit=limit, offset=offset, entity_type=entity_type)


async def get_audit_service(session: AsyncSession = Depends(get_db_session)) -> AuditService:
    """Dependency provider for audit service."""
    return AuditService(AuditRepository(session))
