"""Seed the rental camper.

Revision ID: 003_seed_vehicle
Revises: 002_no_vehicle_overlap_constraint
Create Date: 2026-03-05
"""
from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "003_seed_vehicle"
down_revision = "002_no_vehicle_overlap_constraint"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parent.parent / "sql" / "003_seed_vehicle.sql"


def upgrade() -> None:
    op.execute(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    op.execute("DELETE FROM vehicles WHERE id = 'v2'")
