"""Initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum("student", "teacher", "admin", name="role_enum", native_enum=False)
lesson_status_enum = sa.Enum(
    "pending",
    "booked",
    "completed",
    "cancelled_by_teacher",
    "cancelled_by_student",
    name="lesson_status_enum",
    native_enum=False,
)
lesson_tier_enum = sa.Enum("standard", "premium", name="lesson_tier_enum", native_enum=False)
credit_transaction_type_enum = sa.Enum(
    "purchase", "booking", "refund", name="credit_transaction_type_enum", native_enum=False
)
dua_block_type_enum = sa.Enum(
    "hamd", "salawat", "admission", "request", "others", "closing", name="dua_block_type_enum", native_enum=False
)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def _user_fk(column: str, table: str, ondelete: str = "CASCADE") -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint([column], ["users.id"], name=f"fk_{table}_{column}_users", ondelete=ondelete)


def _dua_block_fk(column: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column],
        ["dua_blocks.id"],
        name=f"fk_user_dua_compositions_{column}_dua_blocks",
        ondelete="SET NULL",
    )


def upgrade() -> None:
    op.create_table(
        "roles",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("name", role_enum, nullable=False),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("role_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], name="fk_users_role_id_roles", ondelete="RESTRICT"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=False)

    op.create_table(
        "learners",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("parent_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        _user_fk("parent_id", "learners"),
    )
    op.create_index("ix_learners_parent_id", "learners", ["parent_id"], unique=False)

    op.create_table(
        "subjects",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("slug", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("slug", name="uq_subjects_slug"),
    )

    op.create_table(
        "teacher_profiles",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("display_name", sa.String(length=128), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        _user_fk("user_id", "teacher_profiles"),
        sa.UniqueConstraint("user_id", name="uq_teacher_profiles_user_id"),
    )

    op.create_table(
        "teacher_availability",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("day_of_week", sa.SmallInteger(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("subjects", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        _user_fk("teacher_id", "teacher_availability"),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_teacher_availability_day_of_week_range"),
        sa.CheckConstraint("end_time > start_time", name="ck_teacher_availability_window_order"),
    )
    op.create_index("ix_teacher_availability_teacher_id", "teacher_availability", ["teacher_id"], unique=False)

    op.create_table(
        "teacher_availability_one_off",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        _user_fk("teacher_id", "teacher_availability_one_off"),
        sa.CheckConstraint("end_time > start_time", name="ck_teacher_availability_one_off_window_order"),
    )
    op.create_index(
        "ix_teacher_availability_one_off_teacher_id",
        "teacher_availability_one_off",
        ["teacher_id"],
        unique=False,
    )
    op.create_index("ix_teacher_availability_one_off_date", "teacher_availability_one_off", ["date"], unique=False)

    op.create_table(
        "lessons",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("learner_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("scheduled_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("status", lesson_status_enum, nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        _user_fk("teacher_id", "lessons"),
        _user_fk("student_id", "lessons"),
        sa.ForeignKeyConstraint(
            ["learner_id"], ["learners.id"], name="fk_lessons_learner_id_learners", ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["subject_id"], ["subjects.id"], name="fk_lessons_subject_id_subjects", ondelete="SET NULL"
        ),
    )
    op.create_index("ix_lessons_teacher_id", "lessons", ["teacher_id"], unique=False)
    op.create_index("ix_lessons_student_id", "lessons", ["student_id"], unique=False)
    op.create_index("ix_lessons_learner_id", "lessons", ["learner_id"], unique=False)
    op.create_index("ix_lessons_scheduled_time", "lessons", ["scheduled_time"], unique=False)
    op.create_index("ix_lessons_status", "lessons", ["status"], unique=False)

    op.create_table(
        "cart_items",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("scheduled_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("lesson_tier", lesson_tier_enum, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _user_fk("user_id", "cart_items"),
        _user_fk("teacher_id", "cart_items"),
        sa.ForeignKeyConstraint(
            ["subject_id"], ["subjects.id"], name="fk_cart_items_subject_id_subjects", ondelete="SET NULL"
        ),
        sa.CheckConstraint("duration_minutes IN (30, 60)", name="ck_cart_items_duration_allowed"),
        sa.CheckConstraint("price >= 0", name="ck_cart_items_price_non_negative"),
    )
    op.create_index("ix_cart_items_user_id_expires_at", "cart_items", ["user_id", "expires_at"], unique=False)
    op.create_index("ix_cart_items_teacher_id", "cart_items", ["teacher_id"], unique=False)

    op.create_table(
        "referral_credits",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("balance", sa.Numeric(10, 2), nullable=False),
        _user_fk("user_id", "referral_credits"),
        sa.UniqueConstraint("user_id", name="uq_referral_credits_user_id"),
        sa.CheckConstraint("balance >= 0", name="ck_referral_credits_balance_non_negative"),
    )

    op.create_table(
        "user_credits",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("credits_remaining", sa.Integer(), nullable=False),
        _user_fk("user_id", "user_credits"),
        sa.UniqueConstraint("user_id", name="uq_user_credits_user_id"),
        sa.CheckConstraint("credits_remaining >= 0", name="ck_user_credits_credits_non_negative"),
    )

    op.create_table(
        "credit_transactions",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("transaction_type", credit_transaction_type_enum, nullable=False),
        sa.Column("credits_amount", sa.Integer(), nullable=False),
        sa.Column("credits_after", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        _user_fk("user_id", "credit_transactions"),
    )
    op.create_index("ix_credit_transactions_user_id", "credit_transactions", ["user_id"], unique=False)

    op.create_table(
        "dua_blocks",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("block_type", dua_block_type_enum, nullable=False),
        sa.Column("arabic_text", sa.Text(), nullable=False),
        sa.Column("transliteration", sa.Text(), nullable=False),
        sa.Column("english_translation", sa.Text(), nullable=False),
        sa.Column("source", sa.String(length=255), nullable=True),
        sa.Column("allah_names", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("is_core", sa.Boolean(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_dua_blocks_block_type", "dua_blocks", ["block_type"], unique=False)

    op.create_table(
        "user_dua_compositions",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("hamd_block_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("salawat_block_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("admission_block_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("request_block_ids", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("others_block_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("closing_block_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("custom_text", sa.Text(), nullable=True),
        sa.Column("custom_blocks", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        _user_fk("user_id", "user_dua_compositions"),
        _dua_block_fk("hamd_block_id"),
        _dua_block_fk("salawat_block_id"),
        _dua_block_fk("admission_block_id"),
        _dua_block_fk("others_block_id"),
        _dua_block_fk("closing_block_id"),
    )
    op.create_index("ix_user_dua_compositions_user_id", "user_dua_compositions", ["user_id"], unique=False)

    op.create_table(
        "audit_logs",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("actor_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("action", sa.String(length=128), nullable=False),
        sa.Column("entity_type", sa.String(length=128), nullable=False),
        sa.Column("entity_id", sa.String(length=128), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        _user_fk("actor_id", "audit_logs", ondelete="SET NULL"),
    )
    op.create_index("ix_audit_logs_actor_id", "audit_logs", ["actor_id"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_actor_id", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_user_dua_compositions_user_id", table_name="user_dua_compositions")
    op.drop_table("user_dua_compositions")

    op.drop_index("ix_dua_blocks_block_type", table_name="dua_blocks")
    op.drop_table("dua_blocks")

    op.drop_index("ix_credit_transactions_user_id", table_name="credit_transactions")
    op.drop_table("credit_transactions")
    op.drop_table("user_credits")
    op.drop_table("referral_credits")

    op.drop_index("ix_cart_items_teacher_id", table_name="cart_items")
    op.drop_index("ix_cart_items_user_id_expires_at", table_name="cart_items")
    op.drop_table("cart_items")

    op.drop_index("ix_lessons_status", table_name="lessons")
    op.drop_index("ix_lessons_scheduled_time", table_name="lessons")
    op.drop_index("ix_lessons_learner_id", table_name="lessons")
    op.drop_index("ix_lessons_student_id", table_name="lessons")
    op.drop_index("ix_lessons_teacher_id", table_name="lessons")
    op.drop_table("lessons")

    op.drop_index("ix_teacher_availability_one_off_date", table_name="teacher_availability_one_off")
    op.drop_index("ix_teacher_availability_one_off_teacher_id", table_name="teacher_availability_one_off")
    op.drop_table("teacher_availability_one_off")

    op.drop_index("ix_teacher_availability_teacher_id", table_name="teacher_availability")
    op.drop_table("teacher_availability")

    op.drop_table("teacher_profiles")
    op.drop_table("subjects")

    op.drop_index("ix_learners_parent_id", table_name="learners")
    op.drop_table("learners")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("roles")
