"""Add property coordinates

Revision ID: 9c3f5a8e1b27
Revises: 4b1e7c2d9a10
Create Date: 2025-10-21 09:47:31.208614

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "9c3f5a8e1b27"
down_revision: Union[str, Sequence[str], None] = "4b1e7c2d9a10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _property_columns() -> list:
    inspector = inspect(op.get_bind())
    if not inspector.has_table("properties"):
        return []
    return [col["name"] for col in inspector.get_columns("properties")]


def upgrade() -> None:
    """Add latitude/longitude to properties (skipped when the startup migrator already did)."""
    columns = _property_columns()
    for name in ("latitude", "longitude"):
        if name not in columns:
            op.add_column("properties", sa.Column(name, sa.Float(), nullable=True))


def downgrade() -> None:
    columns = _property_columns()
    for name in ("longitude", "latitude"):
        if name in columns:
            op.drop_column("properties", name)
