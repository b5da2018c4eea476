"""Exclusion constraint against double-booking a vehicle.

Backs the row-locked conditional insert in the store: even if application
code is bypassed, two non-cancelled reservations of one vehicle cannot
share a day.

Revision ID: 002_no_vehicle_overlap_constraint
Revises: 001_initial_schema
Create Date: 2026-03-02
"""
from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "002_no_vehicle_overlap_constraint"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parent.parent / "sql" / "002_no_vehicle_overlap_constraint.sql"


def upgrade() -> None:
    op.execute(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS no_vehicle_overlap")
