"""add writing_feedbacks

Revision ID: 7c1f2a9d4e30
Revises: base_0001
Create Date: 2026-10-06 18:44:02.530917

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c1f2a9d4e30"
down_revision: Union[str, Sequence[str], None] = "base_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "writing_feedbacks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "exam_id",
            sa.Integer(),
            sa.ForeignKey(
                "exams.id", name="fk_writing_feedbacks_exam_id_exams", ondelete="CASCADE"
            ),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("writing_id", sa.Integer(), nullable=True),
        sa.Column("overall", sa.Numeric(3, 1), nullable=False),
        sa.Column("task_achievement", sa.Text(), nullable=True),
        sa.Column("coherence_cohesion", sa.Text(), nullable=True),
        sa.Column("lexical_resource", sa.Text(), nullable=True),
        sa.Column("grammar_accuracy", sa.Text(), nullable=True),
        sa.Column("grammar_vocab_json", sa.Text(), nullable=True),
        sa.Column("feedback_sections", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_writing_feedbacks_exam_user", "writing_feedbacks", ["exam_id", "user_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_writing_feedbacks_exam_user", table_name="writing_feedbacks")
    op.drop_table("writing_feedbacks")
