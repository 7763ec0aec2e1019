# Shared SQLAlchemy base class and timestamp mixin
from datetime import datetime, UTC

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def make_timestamp_mixin(prefix: str):
    """Build a mixin with ``<prefix>_created``/``<prefix>_modified`` columns."""

    def utcnow() -> datetime:
        return datetime.now(UTC)

    fields = {
        f"{prefix}_created": mapped_column(DateTime, default=utcnow),
        f"{prefix}_modified": mapped_column(DateTime, default=utcnow, onupdate=utcnow),
        "__annotations__": {
            f"{prefix}_created": Mapped[datetime],
            f"{prefix}_modified": Mapped[datetime],
        },
    }
    return type(f"{prefix.capitalize()}TimestampMixin", (object,), fields)


class Base(DeclarativeBase):
    pass
