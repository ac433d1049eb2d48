"""SQLAlchemy tables backing the SQL key-value adapter."""

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class HashField(Base):
    """One field of a hash record."""

    __tablename__ = "kv_hash_fields"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Hash key (e.g., 'RM:KDV:1')",
    )

    field: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Field name within the hash",
    )

    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Field value, always stored as text",
    )

    def __repr__(self) -> str:
        return f"<HashField(key='{self.key}', field='{self.field}')>"


class SetMember(Base):
    """One member of a set record."""

    __tablename__ = "kv_set_members"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Set key (e.g., 'AREAS')",
    )

    member: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Set member",
    )

    def __repr__(self) -> str:
        return f"<SetMember(key='{self.key}', member='{self.member}')>"
