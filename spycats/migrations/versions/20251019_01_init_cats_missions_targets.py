"""init cats missions targets

Revision ID: 5c1a7e2b9d40
Revises:
Create Date: 2025-10-19 09:30:00.000000

Note: les colonnes ``updated_at`` sont gérées par l'ORM via ``onupdate=func.now()``
et non par un trigger base de données.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1a7e2b9d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "cats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("years_of_experience", sa.Integer(), nullable=False),
        sa.Column("breed", sa.Text(), nullable=False),
        sa.Column("salary", sa.Float(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("salary >= 0", name="ck_cats_salary_non_negative"),
        sa.CheckConstraint(
            "years_of_experience >= 0 AND years_of_experience <= 50",
            name="ck_cats_years_of_experience_range",
        ),
    )
    op.create_index("ix_cats_breed", "cats", ["breed"])

    op.create_table(
        "missions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "cat_id",
            sa.Integer(),
            sa.ForeignKey("cats.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_missions_cat_id", "missions", ["cat_id"])

    op.create_table(
        "targets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "mission_id",
            sa.Integer(),
            sa.ForeignKey("missions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("country", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_targets_mission_id", "targets", ["mission_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_targets_mission_id", table_name="targets")
    op.drop_table("targets")
    op.drop_index("ix_missions_cat_id", table_name="missions")
    op.drop_table("missions")
    op.drop_index("ix_cats_breed", table_name="cats")
    op.drop_table("cats")
