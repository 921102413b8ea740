"""Create flashcard entries table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "entries",
        sa.Column("headword", sa.String(length=255), nullable=False),
        sa.Column("pinyin", sa.String(length=255), server_default=sa.text("''"), nullable=False),
        sa.Column("english_definition", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("chinese_definition", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("freq", sa.Integer(), nullable=True),
        sa.Column("stability", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("difficulty", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("lapses", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("state", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("last_review", sa.DateTime(timezone=True), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("reps_ct", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("learning_step", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("headword", name="pk_entries"),
    )
    op.create_index("ix_entries_due_at", "entries", ["due_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_entries_due_at", table_name="entries")
    op.drop_table("entries")
