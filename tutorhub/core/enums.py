"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class LessonStatusEnum(StrEnum):
    """Lesson (booking) status."""

    PENDING = "pending"
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED_BY_TEACHER = "cancelled_by_teacher"
    CANCELLED_BY_STUDENT = "cancelled_by_student"

    @classmethod
    def cancelled(cls) -> tuple["LessonStatusEnum", ...]:
        return (cls.CANCELLED_BY_TEACHER, cls.CANCELLED_BY_STUDENT)


class LessonTierEnum(StrEnum):
    """Lesson tier stored on cart items."""

    STANDARD = "standard"
    PREMIUM = "premium"


class PaymentMethodEnum(StrEnum):
    """How a checkout is paid for."""

    CARD = "card"
    CREDITS = "credits"


class CheckoutOutcomeEnum(StrEnum):
    """Result of a checkout attempt."""

    FREE = "free"
    CREDITS = "credits"
    CARD = "card"


class CreditTransactionTypeEnum(StrEnum):
    """Credit ledger entry type."""

    PURCHASE = "purchase"
    BOOKING = "booking"
    REFUND = "refund"


class DuaBlockTypeEnum(StrEnum):
    """Ordered building blocks of a composed dua."""

    HAMD = "hamd"
    SALAWAT = "salawat"
    ADMISSION = "admission"
    REQUEST = "request"
    OTHERS = "others"
    CLOSING = "closing"
