"""Shared metadata for all tables."""

from datetime import UTC, datetime

from sqlalchemy import MetaData

# Constraint names are referenced when translating integrity errors
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def utc_now() -> datetime:
    """Timezone-aware current time used for audit columns."""
    return datetime.now(UTC)
