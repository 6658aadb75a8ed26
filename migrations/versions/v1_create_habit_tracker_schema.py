"""Create habit tracker schema

Revision ID: v1
Revises:
Create Date: 2026-10-19 00:00:00

Profiles, habits, per-day progress records and shared progress snapshots
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'v1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=False, server_default=""),
        sa.Column("theme", sa.String(10), nullable=False, server_default="light"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_profiles_email"), "profiles", ["email"])

    op.create_table(
        "habits",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("emoji", sa.String(), nullable=False, server_default="✅"),
        sa.Column("category", sa.String(), nullable=False, server_default="General"),
        sa.Column("color", sa.String(), nullable=False, server_default="#3B82F6"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),

        # Cached streak calculator output
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_completions", sa.Integer(), nullable=False, server_default="0"),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("longest_streak >= current_streak", name="ck_habits_longest_ge_current"),
    )
    op.create_index(op.f("ix_habits_user_id"), "habits", ["user_id"])
    op.create_index(op.f("ix_habits_category"), "habits", ["category"])

    op.create_table(
        "progress",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("habit_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["habit_id"], ["habits.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("habit_id", "date", name="uq_progress_habit_date"),
    )
    op.create_index(op.f("ix_progress_user_id"), "progress", ["user_id"])
    op.create_index(op.f("ix_progress_habit_id"), "progress", ["habit_id"])
    op.create_index(op.f("ix_progress_date"), "progress", ["date"])

    op.create_table(
        "shared_progress",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("share_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False, server_default="My Habit Progress"),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("include_stats", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("include_habits", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("stats", sa.JSON(), nullable=True),
        sa.Column("habits", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shared_progress_user_id"), "shared_progress", ["user_id"])
    op.create_index(op.f("ix_shared_progress_share_id"), "shared_progress", ["share_id"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_shared_progress_share_id"), table_name="shared_progress")
    op.drop_index(op.f("ix_shared_progress_user_id"), table_name="shared_progress")
    op.drop_table("shared_progress")

    op.drop_index(op.f("ix_progress_date"), table_name="progress")
    op.drop_index(op.f("ix_progress_habit_id"), table_name="progress")
    op.drop_index(op.f("ix_progress_user_id"), table_name="progress")
    op.drop_table("progress")

    op.drop_index(op.f("ix_habits_category"), table_name="habits")
    op.drop_index(op.f("ix_habits_user_id"), table_name="habits")
    op.drop_table("habits")

    op.drop_index(op.f("ix_profiles_email"), table_name="profiles")
    op.drop_table("profiles")
