from __future__ import annotations

from datetime import datetime, UTC
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    func,
)
from sqlmodel import SQLModel, Field


class Cat(SQLModel, table=True):
    __tablename__ = "cats"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )
    name: str = Field(sa_column=Column(Text, nullable=False))
    years_of_experience: int = Field(sa_column=Column(Integer, nullable=False))
    breed: str = Field(sa_column=Column(Text, nullable=False))
    salary: float = Field(sa_column=Column(Float, nullable=False))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
    )

    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_cats_salary_non_negative"),
        CheckConstraint(
            "years_of_experience >= 0 AND years_of_experience <= 50",
            name="ck_cats_years_of_experience_range",
        ),
        Index("ix_cats_breed", "breed"),
    )


class Mission(SQLModel, table=True):
    __tablename__ = "missions"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )
    # Une mission peut rester non assignée
    cat_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("cats.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    name: str = Field(sa_column=Column(Text, nullable=False))
    is_complete: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, server_default=sa.false()),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
    )

    __table_args__ = (
        Index("ix_missions_cat_id", "cat_id"),
    )


class Target(SQLModel, table=True):
    __tablename__ = "targets"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )
    mission_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("missions.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    name: str = Field(sa_column=Column(Text, nullable=False))
    country: str = Field(sa_column=Column(Text, nullable=False))
    notes: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default="", server_default=""),
    )
    is_complete: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, server_default=sa.false()),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
    )

    __table_args__ = (
        Index("ix_targets_mission_id", "mission_id"),
    )
