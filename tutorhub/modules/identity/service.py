"""Identity business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import RoleEnum
from tutorhub.core.security import decode_token, oauth2_scheme
from tutorhub.modules.identity.models import Learner, User
from tutorhub.modules.identity.repository import IdentityRepository
from tutorhub.modules.identity.schemas import LearnerCreate
from tutorhub.shared.exceptions import AuthenticationException, ConflictException, ValidationException


class IdentityService:
    """Resolves the per-request user context and learner profiles."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def ensure_default_roles(self) -> None:
        """Ensure all default roles exist."""
        for role_name in (RoleEnum.STUDENT, RoleEnum.TEACHER, RoleEnum.ADMIN):
            role = await self.repository.get_role_by_name(role_name)
            if role is None:
                await self.repository.create_role(role_name)

    async def get_user_from_access_token(self, token: str | None) -> User:
        """Resolve user from access token."""
        if not token:
            raise AuthenticationException("User not authenticated. Please log in to continue.")

        payload = decode_token(token)
        if payload.get("type", "access") != "access":
            raise AuthenticationException("Invalid access token")

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationException("Token subject is missing")

        try:
            user_id = UUID(str(subject))
        except ValueError as exc:
            raise AuthenticationException("Token subject is not a valid user id") from exc

        user = await self.repository.get_user_by_id(user_id)
        if user is None:
            raise AuthenticationException("User not found")
        if not user.is_active:
            raise AuthenticationException("User is inactive")
        return user

    async def get_learner_id(self, user: User) -> UUID:
        """Return the learner the user books lessons for."""
        learner = await self.repository.get_learner_for_parent(user.id)
        if learner is None:
            raise ValidationException("No learner profile found. Please complete your profile first.")
        return learner.id

    async def create_learner(self, payload: LearnerCreate, user: User) -> Learner:
        existing = await self.repository.get_learner_for_parent(user.id)
        if existing is not None:
            raise ConflictException("Learner profile already exists")
        return await self.repository.create_learner(user.id, payload.name)


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> User:
    """Resolve currently authenticated user from bearer token."""
    return await service.get_user_from_access_token(token)


def require_roles(*roles: RoleEnum):
    """Dependency factory for role-based access."""

    async def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role.name not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted for your role",
            )
        return current_user

    return _checker
