"""Create the identity, connectivity and group tables."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa  # noqa: F401

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    from proinfer.db.models import Base

    Base.metadata.create_all(bind=op.get_bind())


def downgrade() -> None:
    from proinfer.db.models import Base

    Base.metadata.drop_all(bind=op.get_bind())
