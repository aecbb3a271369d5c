"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tutorhub.core.config import get_settings
from tutorhub.core.database import SessionLocal, close_engine
from tutorhub.core.enums import DuaBlockTypeEnum, RoleEnum
from tutorhub.core.security import create_access_token
from tutorhub.modules.audit.repository import AuditRepository
from tutorhub.modules.billing.models import ReferralCredit
from tutorhub.modules.billing.repository import BillingRepository
from tutorhub.modules.billing.schemas import CreditGrant
from tutorhub.modules.billing.service import BillingService
from tutorhub.modules.duas.models import DuaBlock
from tutorhub.modules.identity.models import Learner, Role, User
from tutorhub.modules.identity.repository import IdentityRepository
from tutorhub.modules.lessons.repository import LessonsRepository
from tutorhub.modules.scheduling.repository import SchedulingRepository
from tutorhub.modules.scheduling.schemas import RecurringAvailabilityCreate
from tutorhub.modules.scheduling.service import SchedulingService
from tutorhub.modules.teachers.models import Subject, TeacherProfile

DEMO_ADMIN_EMAIL = "demo-admin@tutorhub.dev"
DEMO_TEACHER_EMAIL = "demo-teacher@tutorhub.dev"
DEMO_STUDENT_EMAIL = "demo-student@tutorhub.dev"

DEMO_SUBJECTS = (("quran", "Quran"), ("arabic", "Arabic"), ("tajweed", "Tajweed"))

# Sunday-based weekdays: Monday..Friday.
DEMO_WINDOW_DAYS = (1, 2, 3, 4, 5)
DEMO_WINDOWS = ((time(9, 0), time(12, 0)), (time(17, 0), time(20, 0)))

DEMO_STUDENT_CREDITS = 12
DEMO_REFERRAL_BALANCE = Decimal("10.00")

DEMO_DUA_BLOCKS = (
    (DuaBlockTypeEnum.HAMD, "الْحَمْدُ لِلَّهِ رَبِّ الْعَالَمِينَ", "Alhamdu lillahi rabbil 'alamin",
     "All praise is for Allah, Lord of the worlds", ["Ar-Rabb"]),
    (DuaBlockTypeEnum.SALAWAT, "اللَّهُمَّ صَلِّ عَلَى مُحَمَّدٍ", "Allahumma salli 'ala Muhammad",
     "O Allah, send blessings upon Muhammad", []),
    (DuaBlockTypeEnum.ADMISSION, "رَبَّنَا ظَلَمْنَا أَنفُسَنَا", "Rabbana zalamna anfusana",
     "Our Lord, we have wronged ourselves", ["Ar-Rabb"]),
    (DuaBlockTypeEnum.REQUEST, "رَبِّ زِدْنِي عِلْمًا", "Rabbi zidni 'ilma",
     "My Lord, increase me in knowledge", ["Ar-Rabb"]),
    (DuaBlockTypeEnum.REQUEST, "رَبَّنَا آتِنَا فِي الدُّنْيَا حَسَنَةً", "Rabbana atina fid-dunya hasanah",
     "Our Lord, give us good in this world", ["Ar-Rabb"]),
    (DuaBlockTypeEnum.OTHERS, "يَا حَيُّ يَا قَيُّومُ", "Ya Hayyu ya Qayyum",
     "O Ever-Living, O Sustainer", ["Al-Hayy", "Al-Qayyum"]),
    (DuaBlockTypeEnum.CLOSING, "سُبْحَانَ رَبِّكَ رَبِّ الْعِزَّةِ", "Subhana rabbika rabbil 'izzah",
     "Glory be to your Lord, the Lord of might", ["Ar-Rabb", "Al-Aziz"]),
)


@dataclass(slots=True)
class SeedStats:
    roles_created: int = 0
    users_created: int = 0
    subjects_created: int = 0
    teacher_profile_created: bool = False
    learner_created: bool = False
    windows_created: int = 0
    credits_granted: int = 0
    dua_blocks_created: int = 0
    tokens: dict[str, str] = field(default_factory=dict)


async def _ensure_roles(session: AsyncSession) -> int:
    created = 0
    for role_name in (RoleEnum.STUDENT, RoleEnum.TEACHER, RoleEnum.ADMIN):
        existing = await session.scalar(select(Role).where(Role.name == role_name))
        if existing is None:
            session.add(Role(name=role_name))
            created += 1
    await session.flush()
    return created


async def _ensure_user(
    session: AsyncSession,
    *,
    email: str,
    full_name: str,
    role_name: RoleEnum,
    timezone: str,
) -> tuple[User, bool]:
    role = await session.scalar(select(Role).where(Role.name == role_name))
    if role is None:
        raise RuntimeError(f"Role {role_name} was not found after ensure_roles")

    user = await session.scalar(
        select(User).options(selectinload(User.role)).where(User.email == email),
    )
    created = False
    if user is None:
        user = User(email=email, full_name=full_name, timezone=timezone, is_active=True, role_id=role.id)
        session.add(user)
        created = True
    else:
        user.role_id = role.id
        user.timezone = timezone
        user.is_active = True

    await session.flush()
    await session.refresh(user, attribute_names=["role"])
    return user, created


async def _ensure_subjects(session: AsyncSession) -> int:
    created = 0
    for slug, name in DEMO_SUBJECTS:
        existing = await session.scalar(select(Subject).where(Subject.slug == slug))
        if existing is None:
            session.add(Subject(slug=slug, name=name, is_active=True))
            created += 1
    await session.flush()
    return created


async def _ensure_teacher_profile(session: AsyncSession, teacher_user: User) -> bool:
    profile = await session.scalar(
        select(TeacherProfile).where(TeacherProfile.user_id == teacher_user.id),
    )
    if profile is not None:
        profile.is_approved = True
        await session.flush()
        return False

    session.add(
        TeacherProfile(
            user_id=teacher_user.id,
            display_name="Ustadha Demo",
            bio="Demo teacher for Quran recitation and beginner Arabic.",
            is_approved=True,
        )
    )
    await session.flush()
    return True


async def _ensure_learner(session: AsyncSession, student_user: User) -> bool:
    existing = await session.scalar(select(Learner).where(Learner.parent_id == student_user.id))
    if existing is not None:
        return False
    session.add(Learner(parent_id=student_user.id, name="Demo Learner"))
    await session.flush()
    return True


async def _ensure_windows(session: AsyncSession, *, admin_user: User, teacher_user: User) -> int:
    service = SchedulingService(
        repository=SchedulingRepository(session),
        identity_repository=IdentityRepository(session),
        lessons_repository=LessonsRepository(session),
        audit_repository=AuditRepository(session),
    )
    existing = {
        (window.day_of_week, window.start_time, window.end_time)
        for window in await service.list_recurring(teacher_user.id)
    }
    subjects = [slug for slug, _ in DEMO_SUBJECTS]
    created = 0
    for day_of_week in DEMO_WINDOW_DAYS:
        for start_time, end_time in DEMO_WINDOWS:
            if (day_of_week, start_time, end_time) in existing:
                continue
            await service.create_recurring(
                RecurringAvailabilityCreate(
                    teacher_id=teacher_user.id,
                    day_of_week=day_of_week,
                    start_time=start_time,
                    end_time=end_time,
                    subjects=subjects,
                ),
                admin_user,
            )
            created += 1
    return created


async def _ensure_balances(session: AsyncSession, *, admin_user: User, student_user: User) -> int:
    billing_repository = BillingRepository(session)
    service = BillingService(repository=billing_repository, audit_repository=AuditRepository(session))

    referral = await session.scalar(select(ReferralCredit).where(ReferralCredit.user_id == student_user.id))
    if referral is None:
        session.add(ReferralCredit(user_id=student_user.id, balance=DEMO_REFERRAL_BALANCE))
        await session.flush()

    current = await billing_repository.get_credit_balance(student_user.id)
    missing = DEMO_STUDENT_CREDITS - current
    if missing <= 0:
        return 0
    await service.grant_credits(CreditGrant(user_id=student_user.id, credits=missing), admin_user)
    return missing


async def _ensure_dua_blocks(session: AsyncSession) -> int:
    created = 0
    for order, (block_type, arabic, transliteration, english, names) in enumerate(DEMO_DUA_BLOCKS):
        existing = await session.scalar(select(DuaBlock).where(DuaBlock.arabic_text == arabic))
        if existing is not None:
            continue
        session.add(
            DuaBlock(
                block_type=block_type,
                arabic_text=arabic,
                transliteration=transliteration,
                english_translation=english,
                allah_names=names,
                is_core=True,
                display_order=order,
            )
        )
        created += 1
    await session.flush()
    return created


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            stats.roles_created = await _ensure_roles(session)

            admin_user, admin_created = await _ensure_user(
                session,
                email=DEMO_ADMIN_EMAIL,
                full_name="Demo Admin",
                role_name=RoleEnum.ADMIN,
                timezone="UTC",
            )
            teacher_user, teacher_created = await _ensure_user(
                session,
                email=DEMO_TEACHER_EMAIL,
                full_name="Demo Teacher",
                role_name=RoleEnum.TEACHER,
                timezone="Europe/London",
            )
            student_user, student_created = await _ensure_user(
                session,
                email=DEMO_STUDENT_EMAIL,
                full_name="Demo Parent",
                role_name=RoleEnum.STUDENT,
                timezone="Europe/London",
            )
            stats.users_created = sum([admin_created, teacher_created, student_created])

            stats.subjects_created = await _ensure_subjects(session)
            stats.teacher_profile_created = await _ensure_teacher_profile(session, teacher_user)
            stats.learner_created = await _ensure_learner(session, student_user)
            stats.windows_created = await _ensure_windows(session, admin_user=admin_user, teacher_user=teacher_user)
            stats.credits_granted = await _ensure_balances(session, admin_user=admin_user, student_user=student_user)
            stats.dua_blocks_created = await _ensure_dua_blocks(session)

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    for label, user in (("admin", admin_user), ("teacher", teacher_user), ("student", student_user)):
        stats.tokens[label] = create_access_token(str(user.id), expires_minutes=24 * 60)
    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Seed idempotent demo data for TutorHub (users, subjects, teacher "
            "availability, student credits, dua blocks)."
        ),
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Roles created: {stats.roles_created}")
    print(f"- Users created: {stats.users_created}")
    print(f"- Subjects created: {stats.subjects_created}")
    print(f"- Teacher profile created: {stats.teacher_profile_created}")
    print(f"- Learner created: {stats.learner_created}")
    print(f"- Availability windows created: {stats.windows_created}")
    print(f"- Student credits granted: {stats.credits_granted}")
    print(f"- Dua blocks created: {stats.dua_blocks_created}")
    print("")
    print("Demo bearer tokens (non-production only, valid 24h):")
    for label, token in stats.tokens.items():
        print(f"- {label}: {token}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
